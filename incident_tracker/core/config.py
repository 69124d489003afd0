"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for local development.

All settings can be overridden via environment variables or a ``.env`` file.
"""

import logging
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        APP_NAME: Application name.
        APP_VERSION: Application version.
        ENVIRONMENT: development, testing or production.
        DEBUG: Debug mode flag (enables API docs and SQL echo).
        DATABASE_URL: SQLAlchemy database URL.
        DB_AUTO_CREATE: Create tables on startup (local development only).
        DEFAULT_PAGE_SIZE: Page size used when the client sends none.
        MAX_PAGE_SIZE: Upper bound applied to client supplied page sizes.
        LOG_LEVEL: Logging level.
        LOG_FORMAT: ``json`` or ``console``.
    """

    # Application metadata
    APP_NAME: str = "Incident Tracker"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./incidents.db"
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_POOL_TIMEOUT: int = Field(default=30, ge=1)
    DB_POOL_RECYCLE: int = Field(default=1800, ge=-1)
    DB_AUTO_CREATE: bool = True

    # API
    API_PREFIX: str = "/api"
    DEFAULT_PAGE_SIZE: int = Field(default=10, ge=1)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"

    # CORS
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_METHODS: str = "GET,POST,PATCH,OPTIONS"
    CORS_HEADERS: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins as a list."""
        return self._split(self.CORS_ORIGINS)

    @property
    def cors_methods_list(self) -> List[str]:
        """CORS methods as a list."""
        return self._split(self.CORS_METHODS)

    @property
    def cors_headers_list(self) -> List[str]:
        """CORS headers as a list."""
        return self._split(self.CORS_HEADERS)

    @property
    def is_sqlite(self) -> bool:
        """True when the configured store is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(
            "Settings loaded: app_name=%s, environment=%s",
            _settings.APP_NAME,
            _settings.ENVIRONMENT,
        )
    return _settings


settings = get_settings()
