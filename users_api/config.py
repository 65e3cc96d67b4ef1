"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from users_api import __version__


# config.py lives in users_api/, so the project root is one level up
_CONFIG_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _CONFIG_DIR.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Users API", description="Application name")
    app_version: str = Field(default=__version__, description="Version reported by the root endpoint")
    app_env: str = Field(default="development", description="Application environment")

    # Server
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=3000, description="Listen port")

    # Database
    database_url: str = Field(
        ...,
        description="Database connection URL",
        alias="DATABASE_URL",
    )
    database_pool_size: int = Field(default=10, description="Number of connections to maintain")
    database_max_overflow: int = Field(default=20, description="Connections allowed beyond pool_size")
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    auto_create_tables: bool = Field(
        default=False,
        description="Create missing tables on startup (development only)",
    )

    # HTTP
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins; '*' allows any origin",
    )

    # Observability
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="text", description="'json' or 'text'")

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str:
        """Validate and normalize database URL."""
        if v is None or (isinstance(v, str) and v.strip() == ""):
            raise ValueError("DATABASE_URL is required")
        v = v.strip()
        # SQLAlchemy dropped the bare "postgres" dialect name
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("app_env", mode="before")
    @classmethod
    def normalize_app_env(cls, v: str) -> str:
        """Normalize app environment to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_format", mode="before")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Accept only the formats setup_logging knows about."""
        if isinstance(v, str):
            v = v.lower().strip()
            if v not in ("json", "text"):
                raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get the cached application settings instance.

    Returns:
        Settings: Application settings instance

    Raises:
        pydantic.ValidationError: If DATABASE_URL is missing

    Example:
        ```python
        from users_api.config import get_settings

        settings = get_settings()
        print(settings.database_url)
        ```
    """
    return Settings()
