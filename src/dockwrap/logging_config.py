"""Structured logging setup for dockwrap."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from dockwrap.config import Settings
from dockwrap.version import __version__


def setup_logging(settings: Settings, *, level: str | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Output goes to stderr so that compose stdout stays clean for piping.
    *level* overrides ``settings.log_level`` (the CLI ``--verbose`` flag).
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_tool_context,
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    configure_third_party_loggers()


def configure_third_party_loggers() -> None:
    """Quieten chatty libraries used underneath the Docker SDK."""
    logging.getLogger("docker").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def add_tool_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Stamp every entry with the tool name and version."""
    event_dict["tool"] = "dockwrap"
    event_dict["version"] = __version__
    return event_dict
