"""
Core configuration and settings for the FastAPI application.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Info
    app_name: str = "HealthVault API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./healthvault.db"
    auto_create_tables: bool = True

    # Session tokens
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7

    # Password hashing
    bcrypt_rounds: int = 12

    # One-time codes
    otp_expiry_minutes: int = 10

    # Outbound email
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_from_name: str = "HealthVault"

    # File storage: "local" or "gcs"
    storage_backend: str = "local"
    upload_dir: str = "uploads"

    # Google Cloud Storage Configuration
    google_cloud_project: Optional[str] = None
    google_application_credentials: Optional[str] = None
    gcs_bucket_name: Optional[str] = None

    # File Upload Configuration
    max_file_size_mb: int = 10
    allowed_extensions: set = {".pdf", ".jpg", ".jpeg", ".png"}

    # CORS Settings
    cors_origins: list = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
