"""
Application Settings using Pydantic Settings
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COMPONENTS_DIR = Path(__file__).resolve().parent.parent / "components"

# Components referenced by others must be registered first.
DEFAULT_CATEGORY_ORDER = [
    "config",
    "shared",
    "widget",
    "header",
    "component",
    "single-type",
    "block",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    APP_NAME: str = Field(default="Padma Backend")
    APP_VERSION: str = Field(default="0.1.0")
    DEBUG: bool = Field(default=False)

    # Backend Server
    BACKEND_HOST: str = Field(default="localhost")
    BACKEND_PORT: int = Field(default=8010)

    # CMS (content-type-builder admin API)
    CMS_URL: str = Field(default="http://localhost:1337")
    CMS_API_TOKEN: str | None = Field(default=None)
    CMS_REQUEST_TIMEOUT: float = Field(default=30.0)

    # Component registration
    COMPONENTS_DIR: str = Field(default=str(DEFAULT_COMPONENTS_DIR))
    COMPONENT_CATEGORY_ORDER: List[str] = Field(default=DEFAULT_CATEGORY_ORDER)
    REGISTRATION_DELAY_MS: int = Field(default=500, ge=0)
    REGISTER_COMPONENTS_ON_STARTUP: bool = Field(default=True)
    RELOAD_ON_REGISTRATION: bool = Field(default=True)

    @computed_field  # type: ignore[misc]
    @property
    def REGISTRATION_DELAY_SECONDS(self) -> float:
        """Throttle between create calls, in seconds."""
        return self.REGISTRATION_DELAY_MS / 1000.0

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
