"""Runtime settings from the environment (or a .env file).

These only select *where* and *how* the service bootstraps. Everything the
operator configures about the bucket lives in the per-profile TOML file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from resource_versions.models.configuration import Profile


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Resource Versions"
    VERSION: str = "0.3.0"
    ENVIRONMENT: str = "development"

    # Configuration files
    CONFIG_DIR: Path = Path("config")

    # Logging
    LOG_LEVEL: Optional[str] = None  # defaults per profile
    LOG_DIR: Path = Path("logs")
    LOG_BACKUP_COUNT: int = 14

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def profile(self) -> Profile:
        return Profile.parse(self.ENVIRONMENT)

    def is_production(self) -> bool:
        return self.profile is Profile.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    return Settings()
