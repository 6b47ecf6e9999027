from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./jackemate.db"

    # JWT Authentication
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    # Tracebacks in 500 responses instead of the JSON error body
    DEBUG: bool = False
    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    LOG_LEVEL: str = "INFO"
    # Runs create_all on startup; disable when Alembic owns the schema
    AUTO_CREATE_TABLES: bool = True

    # Photo storage
    UPLOAD_DIR: str = "static/uploads"
    UPLOAD_URL_PREFIX: str = "/static/uploads"
    MAX_PHOTO_BYTES: int = 5 * 1024 * 1024

    # Email Configuration
    EMAIL_NOTIFICATIONS_ENABLED: bool = True
    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT_SECONDS: int = 8


settings = Settings()
