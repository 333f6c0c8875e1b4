# forbidden403/config.py

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SINK_FORMAT = "%(asctime)s [client %(client_ip)s] %(message)s"


class Settings(BaseSettings):
    log_file: Optional[str] = None
    log_format: str = DEFAULT_SINK_FORMAT
    debug: bool = False
    # Only enable behind a proxy that overwrites the header.
    trust_forwarded_for: bool = False

    model_config = SettingsConfigDict(
        env_prefix="FORBIDDEN403_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Set up the project loggers the same way for every entry point."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logging.getLogger("forbidden403").setLevel(logging.DEBUG if settings.debug else logging.INFO)
