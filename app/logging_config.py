# app/logging_config.py

import logging
from logging.config import dictConfig

from app.config import Settings


def configure_logging(settings: Settings) -> logging.Logger:
    level = settings.LOG_LEVEL.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    # app.* modules and uvicorn share one console format
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {"format": settings.LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                },
            },
            "loggers": {
                "app": {"handlers": ["console"], "level": level, "propagate": False},
                "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
                "uvicorn.access": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
    return logging.getLogger("app")
