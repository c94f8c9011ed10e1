from __future__ import annotations

import logging.config

# Prefix shared by every module logger here; it follows the import path.
PACKAGE_LOGGER = __name__.rsplit(".common.", 1)[0]


def build_logging_config(level: str = "INFO") -> dict:
    level = (level or "INFO").upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level, "propagate": True},
            PACKAGE_LOGGER: {"handlers": ["console"], "level": level, "propagate": False},
            # Connector debug output is per-packet.
            "mysql.connector": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(level))
