# bookdigest/logging/logger.py
"""
Unified logging setup for bookdigest.

All modules use:
    from bookdigest.logging.logger import get_logger
    logger = get_logger(__name__)

Configuration happens once, in configure_logging(), usually from the CLI
entrypoint. Log namespaces follow module paths automatically.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

DEFAULT_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO | None = None,
) -> None:
    """
    Configure the root logging handler.

    Safe to call multiple times; handler duplication is prevented and only
    the level is updated on later calls.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Do NOT configure logging here; configuration happens in configure_logging().
    """
    return logging.getLogger(name)


__all__ = ["DEFAULT_FORMAT", "configure_logging", "get_logger"]
