"""Configuration and logging helpers for the timeout cache.

Reads typed environment variables into module constants (LOG_LEVEL,
LOG_JSON) and exposes ``configure_logging`` for applications that want
the cache's structlog events rendered. Importing the package never
configures logging by itself.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import structlog


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    # getLevelName returns "Level X" strings for unknown names
    return level if isinstance(level, int) else logging.WARNING


# Logging
LOG_LEVEL = _env_str("TIMEOUT_CACHE_LOG_LEVEL", "WARNING")
LOG_JSON = _env_bool("TIMEOUT_CACHE_LOG_JSON", False)


def configure_logging(level: Optional[str] = None, *, json: Optional[bool] = None) -> int:
    """Route structlog through stdlib logging at the configured level.

    Returns the numeric level applied to the ``timeout_cache`` logger.
    """
    lvl = _level_from_name(level or LOG_LEVEL)
    use_json = LOG_JSON if json is None else json

    logging.basicConfig(format="%(message)s")
    logging.getLogger("timeout_cache").setLevel(lvl)

    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return lvl
