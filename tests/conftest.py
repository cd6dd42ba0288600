import os

# Required at import time of blog.main
os.environ.setdefault("ADMIN_PASSWORD", "env-admin-password")
os.environ.setdefault("JWT_SECRET", "env-jwt-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from blog.core.config import Settings, get_settings
from blog.db.session import build_engine, create_db_and_tables, get_session
from blog.main import app
from blog.services.auth import AdminAuthService

ADMIN_PASSWORD = "s3cret-password"


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        _env_file=None,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        JWT_SECRET="test-signing-secret",
        ENVIRONMENT="test",
        EMAIL_USER="blog@example.com",
        EMAIL_PASS="mail-password",
        EMAIL_HOST="smtp.example.com",
        EMAIL_PORT=465,
        EMAIL_SECURE=True,
        CONTACT_EMAIL="owner@example.com",
    )


@pytest.fixture(name="session")
def session_fixture():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session: Session, settings: Settings):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_settings] = lambda: settings
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(settings: Settings):
    token = AdminAuthService(settings).login(ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}
