"""
Application Configuration Module

Centralizes all application settings using Pydantic Settings.
Environment variables are loaded from .env file automatically.

Usage:
    from config.settings import settings

    print(settings.DATABASE_URL)
    print(settings.is_development)
"""

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict
from typing import List, Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Variable names are case-insensitive.
    """

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./hume_connect.db",
        description="SQLAlchemy async connection string (postgresql:// is rewritten to asyncpg)"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )

    # ==========================================================================
    # Authentication & Security
    # ==========================================================================
    SECRET_KEY: str = Field(
        default="your_super_secret_key_change_this_in_production",
        description="JWT verification secret key"
    )
    ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )

    # ==========================================================================
    # Redis Configuration (for rate limiting)
    # ==========================================================================
    REDIS_URL: Optional[str] = Field(
        default=None,
        description="Redis connection URL for rate limiting storage"
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def cors_origins_list(self) -> list:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development, production)"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    LOG_LEVEL: Optional[str] = Field(
        default=None,
        description="Explicit log level; defaults to DEBUG/INFO based on DEBUG"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit logs as JSON lines"
    )
    APP_NAME: str = Field(
        default="Hume Connect Forms",
        description="Application name for OpenAPI docs"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application version"
    )

    @property
    def is_development(self) -> bool:
        """True when raw error details may be exposed to clients."""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    # ==========================================================================
    # Dynamic Form Configuration
    # ==========================================================================
    DEFAULT_APPLICATION_TYPE: str = Field(
        default="clinical",
        description="Application type assumed when a submission omits one"
    )
    AUTO_PROVISION_DEFAULT_FORMS: bool = Field(
        default=True,
        description="Synthesize a default form when a submission's type has none"
    )
    INITIALIZE_DEFAULT_FORMS_ON_STARTUP: bool = Field(
        default=True,
        description="Ensure every standard application type has a default form at startup"
    )
    STARTUP_FORM_TYPES: List[str] = Field(
        default=["clinical", "affiliate", "wholesale"],
        description="Application types provisioned at startup"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


# Singleton instance for easy import
settings = get_settings()
