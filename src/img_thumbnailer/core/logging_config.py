"""Logging setup shared by the service, the CLI and the pipeline stages."""

import logging
import os
import sys
from typing import Optional

DEFAULT_LOGGER_NAME = "img-thumbnailer"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Requests run on worker threads, so the structured format names the thread.
LOG_FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | %(threadName)s | "
        "%(filename)s:%(lineno)d | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure ``name`` to write to stdout and return it.

    Args:
        name: Logger name
        level: Level name; falls back to ``LOG_LEVEL`` and then INFO
        format_type: "structured" or "simple"; ``LOG_FORMAT`` wins over it

    Calling it again for the same name updates the level but never adds a
    second handler.
    """
    configured = logging.getLogger(name)
    configured.setLevel(_resolve_level(level))

    if not configured.handlers:
        format_name = os.getenv("LOG_FORMAT", format_type).lower()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                LOG_FORMATS.get(format_name, LOG_FORMATS["simple"]),
                datefmt=DATE_FORMAT,
            )
        )
        configured.addHandler(handler)

    configured.propagate = False
    return configured


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Return ``name``, configuring it on first use only.

    Loggers below ``img-thumbnailer`` get no handler of their own; they
    inherit level and output from it, so ``set_debug`` reaches every stage.
    """
    existing = logging.getLogger(name)
    if existing.handlers or name.startswith(DEFAULT_LOGGER_NAME + "."):
        return existing
    return setup_logger(name)


def set_debug(name: str = DEFAULT_LOGGER_NAME) -> None:
    """Switch the named logger and the root logger to DEBUG."""
    get_logger(name).setLevel(logging.DEBUG)
    logging.getLogger().setLevel(logging.DEBUG)


logger = setup_logger()
