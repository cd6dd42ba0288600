import json
from functools import lru_cache
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session
from blog.core.config import get_settings


def _json_serializer(obj) -> str:
    # Keep non-ASCII tags readable in the stored JSON
    return json.dumps(obj, ensure_ascii=False)


def build_engine(database_url: str, **kwargs) -> Engine:
    # check_same_thread is needed for SQLite, remove for PostgreSQL
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(
        database_url,
        connect_args=connect_args,
        json_serializer=_json_serializer,
        **kwargs,
    )


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().DATABASE_URL)


def get_session():
    with Session(get_engine()) as session:
        yield session


def create_db_and_tables(engine: Engine = None):
    # Import models so they are registered with SQLModel metadata
    import blog.models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())


def ping(session: Session) -> bool:
    session.connection().execute(text("SELECT 1"))
    return True
