"""Logging setup shared by the console and the storage layers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_NAME = "complaints-console"


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.

    Calling it again only updates the level, so tests and the CLI can both
    invoke it without duplicating output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("complaints")
    logger.setLevel(level)
    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)
    return logger
