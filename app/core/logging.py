"""Logging configuration."""
import logging
import logging.config
from typing import Any, Dict

from app.core.config import settings


def setup_logging() -> None:
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "format": '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": settings.LOG_FORMAT if settings.LOG_FORMAT in ("text", "json") else "text",
            },
        },
        "root": {
            "level": settings.LOG_LEVEL.upper(),
            "handlers": ["console"],
        },
        "loggers": {
            "uvicorn": {"level": settings.LOG_LEVEL.upper()},
            "sqlalchemy.engine": {"level": "WARNING"},
            "app": {"level": settings.LOG_LEVEL.upper()},
        },
    }

    logging.config.dictConfig(config)
