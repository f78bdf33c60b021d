"""
Application Configuration
Loads settings from environment variables
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file"""

    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "EventCert"
    APP_URL: str = "http://localhost:8000"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./eventcert.db"

    # JWT / admin session
    JWT_SECRET_KEY: str = "temp-jwt-secret-change-later"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 3
    ADMIN_KEY_HASH: Optional[str] = None
    AUTH_COOKIE_NAME: str = "authToken"

    # Storage (Supabase)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    STORAGE_BUCKET: str = "certificates"
    STORAGE_FOLDER: str = "certificates"
    STORAGE_TIMEOUT_SECONDS: float = 30.0

    # Certificates
    CERTIFICATE_PREFIX: str = "ECELL"
    TEMPLATES_DIR: str = "templates"
    CERTIFICATE_TEMPLATE_DIR: str = "templates/certificates"
    PDF_RENDER_TIMEOUT_SECONDS: float = 30.0

    # Bulk import / generation
    MAX_UPLOAD_SIZE: int = 5242880  # 5MB
    MAX_ROWS_PER_REQUEST: int = 20
    CLIENT_CHUNK_SIZE: int = 5
    MAX_NUMBER_ATTEMPTS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
