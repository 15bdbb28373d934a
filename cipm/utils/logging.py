"""Application logging helpers.

A process-wide ``cipm`` logger with a single stream handler. The level
comes from ``LOG_LEVEL`` (``config.Config``) and can be changed at app
creation time through :func:`configure`. Module loggers are children of
``cipm`` and share its handler.
"""
from __future__ import annotations

import logging
import os
import threading
from typing import Optional

_LOCK = threading.Lock()
_PRIMARY: Optional[logging.Logger] = None
_ROOT_NAME = "cipm"


def _level_from(level_name: Optional[str]) -> int:
    name = (level_name or os.environ.get("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _primary() -> logging.Logger:
    global _PRIMARY
    if _PRIMARY is not None:
        return _PRIMARY
    with _LOCK:
        if _PRIMARY is not None:
            return _PRIMARY
        logger = logging.getLogger(_ROOT_NAME)
        logger.setLevel(_level_from(None))
        if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[cipm] %(asctime)s %(levelname)s %(name)s %(message)s"))
            logger.addHandler(handler)
        logger.propagate = False
        _PRIMARY = logger
        return logger


def get_logger(name: str = _ROOT_NAME) -> logging.Logger:
    primary = _primary()
    if name == _ROOT_NAME:
        return primary
    if not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)


def configure(level_name: Optional[str]) -> logging.Logger:
    logger = _primary()
    logger.setLevel(_level_from(level_name))
    return logger


__all__ = ["get_logger", "configure"]
