"""Process-wide logging setup.

Module code logs through ``logging.getLogger(__name__)`` using
``event_name key=value`` messages; this module only wires handlers.
"""

import logging
import logging.config

from app.config import settings

_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    resolved = (level or settings.log_level or "INFO").upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": resolved},
            "loggers": {
                # Client-side log mirror; keep it visible regardless of root level.
                "app.client": {"level": "DEBUG", "propagate": True},
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )
    _CONFIGURED = True
