"""
Logging configuration
Called once from the application lifespan
"""

import logging.config

from .config import settings


def setup_logging() -> None:
    level = settings.LOG_LEVEL.upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "storefront": {"level": level, "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {"level": "INFO" if settings.DATABASE_ECHO else "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    })
