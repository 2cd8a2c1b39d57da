"""Runtime settings for dockwrap.

Values come from ``DOCKWRAP_*`` environment variables or a ``.env`` file
in the working directory::

    DOCKWRAP_COMPOSE_COMMAND=docker-compose
    DOCKWRAP_DOCKER_BASE_URL=unix:///var/run/docker.sock
    DOCKWRAP_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """dockwrap settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKWRAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    compose_command: str = Field(default="docker-compose")
    """Executable spawned for every compose operation."""

    docker_base_url: str | None = Field(default=None)
    """Daemon URL.  ``None`` defers to ``DOCKER_HOST`` via ``docker.from_env``."""

    docker_timeout: int = Field(default=60, ge=1)

    log_level: str = Field(default="WARNING")
    log_format: Literal["console", "json"] = Field(default="console")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide :class:`Settings` instance."""
    return Settings()
