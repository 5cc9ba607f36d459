# asciilog/utils/logging.py
from __future__ import annotations

import logging
import os
import sys

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_configured = False


def configure(level: int | str | None = None) -> None:
    """
    Install a single stderr handler on the package logger.

    The level defaults to ASCII_LOG_LEVEL from the environment, then INFO.
    Calling it again only changes the level.
    """
    global _configured

    if level is None:
        level = os.environ.get("ASCII_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger("asciilog")
    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        _configured = True
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the asciilog namespace."""
    if not name.startswith("asciilog"):
        name = f"asciilog.{name}"
    return logging.getLogger(name)


def set_level(level: int | str) -> None:
    logging.getLogger("asciilog").setLevel(level)
