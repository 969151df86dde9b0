"""Application configuration management using Pydantic Settings.

This module provides centralized configuration for the Ward Handover backend,
supporting environment variables and .env files for different deployment environments.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the backend directory (parent of ward_handover/ directory)
BACKEND_DIR = Path(__file__).parent.parent.parent
ENV_FILE = BACKEND_DIR / ".env"

# Load environment variables from .env file
load_dotenv(ENV_FILE)


class DatabaseSettings(BaseSettings):
    """Relational backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    driver: str = Field(default="sqlite+aiosqlite", description="Database driver")
    path: Path = Field(
        default=Path("./data/handover.db"), description="SQLite database file"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")

    @property
    def url(self) -> str:
        """Get database connection URL."""
        return f"{self.driver}:///{self.path}"


class StorageSettings(BaseSettings):
    """Selects which backend serves the record stores."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    backend: Literal["sql", "local"] = Field(
        default="sql", description="'sql' for the relational store, 'local' for the JSON key-value file"
    )
    local_path: Path = Field(
        default=Path("./data/handover_storage.json"),
        description="Key-value file used by the local backend",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Ward Handover", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    workers: int = Field(default=1, ge=1, le=32, description="Number of workers")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(default=True, description="Allow CORS credentials")

    # Demo data
    enable_demo_data: bool = Field(
        default=False, description="Seed illustrative records on startup when the store is empty"
    )

    # Ward board
    beds_per_ward: int = Field(default=28, ge=1, description="Beds shown per ward board")
    high_news_threshold: int = Field(
        default=5, ge=0, le=20, description="Early warning score flagged as high"
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings after initialization."""
        if self.environment == "production":
            if self.debug:
                raise ValueError("Debug mode must be disabled in production (DEBUG=false)")
            if self.enable_demo_data:
                raise ValueError("Demo data must be disabled in production (ENABLE_DEMO_DATA=false)")

        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
