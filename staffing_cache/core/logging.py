"""structlog setup for the staffing cache.

Every entry carries ``service`` and ``environment``. Production and
staging render one JSON object per line; any other environment gets the
colored console renderer. CacheAsideDataAccessor.from_settings() calls
configure_logging(), so embedding applications only need to call it
themselves when they wire the accessor by hand.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from staffing_cache.core.config import Settings, get_settings


JSON_ENVIRONMENTS = frozenset({"production", "staging"})

# Chatty third-party loggers held at WARNING
QUIET_LOGGERS = ("httpx", "httpcore")


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor stamping service name and environment."""
    settings = get_settings()
    event_dict.setdefault("service", settings.service_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for ``settings.environment``, renderer last."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context,
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.environment in JSON_ENVIRONMENTS:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.

    Args:
        settings: Source of environment and log level (default: get_settings())
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


Logger = structlog.BoundLogger
