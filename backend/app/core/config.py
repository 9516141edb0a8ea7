"""
Configuration management using Pydantic Settings.
All environment variables are loaded and validated here.
"""

from typing import List, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ================================
    # Application Configuration
    # ================================
    APP_NAME: str = "StoryTeller"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = True

    # API Configuration
    API_PREFIX: str = "/api"
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into list."""
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    # ================================
    # Database Configuration
    # ================================
    DATABASE_URL: str = Field(..., description="Async SQLAlchemy connection string")
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10

    # ================================
    # Auth Provider (Supabase-compatible)
    # ================================
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Access tokens issued by the provider are HS256 JWTs signed with this secret
    SUPABASE_JWT_SECRET: str = Field(..., min_length=32)
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    JWT_ALGORITHM: str = "HS256"
    AUTH_REQUEST_TIMEOUT_SECONDS: float = 10.0

    # ================================
    # Object Storage (S3-compatible, e.g. Cloudflare R2)
    # ================================
    STORAGE_BUCKET: Optional[str] = None
    STORAGE_ENDPOINT_URL: Optional[str] = None
    STORAGE_REGION: str = "auto"
    STORAGE_ACCESS_KEY_ID: Optional[str] = None
    STORAGE_SECRET_ACCESS_KEY: Optional[str] = None
    STORAGE_PUBLIC_URL: str = "http://localhost:9000/storyteller"

    @field_validator("STORAGE_PUBLIC_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    MAX_IMAGE_SIZE_MB: int = 5
    MAX_AUDIO_SIZE_MB: int = 50

    # ================================
    # Content Configuration
    # ================================
    STORIES_LATEST_LIMIT: int = 5
    STORY_PAGES_DEFAULT: int = 5

    # ================================
    # Logging Configuration
    # ================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.APP_ENV == "production"

    @property
    def uses_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def storage_configured(self) -> bool:
        """True when a real bucket is configured; otherwise an in-memory store is used."""
        return bool(self.STORAGE_BUCKET)


# Global settings instance
settings = Settings()
