from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Personal Blog API"
    ENVIRONMENT: str = "development"
    DATABASE_URL: str = "sqlite:///./blog.db"
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    # Admin session (no defaults, the app refuses to start without them)
    ADMIN_PASSWORD: str = Field(min_length=1)
    JWT_SECRET: str = Field(min_length=1)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 # 24 hours

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"

    # Outgoing mail (mapped from .env)
    MAIL_USERNAME: str = Field("", validation_alias="EMAIL_USER")
    MAIL_PASSWORD: str = Field("", validation_alias="EMAIL_PASS")
    MAIL_SERVER: str = Field("smtp.gmail.com", validation_alias="EMAIL_HOST")
    MAIL_PORT: int = Field(465, validation_alias="EMAIL_PORT")
    MAIL_SSL: bool = Field(True, validation_alias="EMAIL_SECURE")
    MAIL_TIMEOUT: float = Field(10, validation_alias="EMAIL_TIMEOUT")
    CONTACT_EMAIL: str = ""

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
