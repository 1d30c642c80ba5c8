"""Central logging configuration for the interview package.

Applies a root stdout handler so all module loggers emit without per-module
setup. Debug output from the engine is requested explicitly by the caller,
never picked up from the environment.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig


def _dict_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure application-wide logging once.

    If the root logger already has handlers, return to prevent duplicate output
    (important when embedded in another application or under pytest).
    """
    root = logging.getLogger()
    if root.handlers:
        return
    dictConfig(_dict_config("DEBUG" if debug else level.upper()))
