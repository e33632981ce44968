from __future__ import annotations

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "http://localhost:9308"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Connection and logging options for the Manticore client.

    Values come from ``MANTICORE_*`` environment variables, falling back to a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="MANTICORE_",
        env_file=".env",
        extra="ignore",
    )

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Apply the configured level to the package logger.

    The library itself never installs handlers; applications call this once
    at startup if they want the level taken from settings.
    """
    settings = settings or load_settings()
    logger = logging.getLogger("manticore_client")
    logger.setLevel(settings.log_level.upper())
    return logger
