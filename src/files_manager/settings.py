# src/files_manager/settings.py
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

DEPLOYMENT_MODES = ("local-dev", "prod")


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from files_manager.settings import get_settings
        settings = get_settings()
        root = settings.folder_path
    """

    # Application Settings
    app_name: str = Field(
        default="files-manager",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="local-dev (SQLite documents, in-process cache) or prod (MongoDB + Redis)"
    )

    # Session cache
    redis_host: str = Field(default="127.0.0.1", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")

    # Document store
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=27017, alias="DB_PORT")
    db_database: str = Field(default="files_manager", alias="DB_DATABASE")
    sqlite_path: str = Field(
        default="files_manager.db",
        alias="SQLITE_PATH",
        description="Document database file used in local-dev mode"
    )

    # Blob storage
    folder_path: str = Field(
        default="/tmp/files_manager",
        alias="FOLDER_PATH",
        description="Root directory for uploaded files and thumbnails"
    )

    # Sessions
    session_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)

    # Task pipeline
    user_lane_workers: int = Field(default=2, ge=1)
    file_lane_workers: int = Field(default=2, ge=1)

    # Dependency readiness
    readiness_attempts: int = Field(default=10, ge=1)
    readiness_interval_seconds: float = Field(default=1.0, ge=0)

    # Listing
    page_size: int = Field(default=20, ge=1)

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {list(DEPLOYMENT_MODES)}")
        return v

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=(".env", ".env.local-dev", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
