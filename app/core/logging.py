"""Process-wide logging configuration."""

import logging
from logging.config import dictConfig

from app.core.config import settings

_configured = False


def _default_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def configure_logging() -> None:
    """Configure application logging once per process."""

    global _configured
    if _configured:
        return

    dictConfig(_default_config(settings.LOG_LEVEL))
    logging.getLogger(__name__).debug(f"Logging configured at level {settings.LOG_LEVEL}")
    _configured = True
