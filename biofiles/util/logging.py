"""
MIT License

Lightweight logging helpers for biofiles.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_NAME = "biofiles"

_LOGGER: Optional[logging.Logger] = None


def _configure() -> logging.Logger:
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger(ROOT_NAME)
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s", "%Y-%m-%dT%H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
        _LOGGER = logger
    return _LOGGER


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    """Return a logger under the process-wide ``biofiles`` handler."""
    root = _configure()
    if name == ROOT_NAME or not name.startswith(ROOT_NAME + "."):
        return root
    return logging.getLogger(name)


def set_level(level: int) -> None:
    _configure().setLevel(level)


__all__ = ["get_logger", "set_level"]
