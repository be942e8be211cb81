"""
Runtime configuration helpers for the MindCanvus API.

Loads DATABASE_URL and the remaining settings from the environment, falling
back to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required: must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="MindCanvus API", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    public_base_url: str = Field(default="http://localhost:5173", alias="PUBLIC_BASE_URL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Scheduled publisher cadence
    publisher_interval_seconds: float = Field(default=60.0, gt=0, alias="PUBLISHER_INTERVAL_SECONDS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
