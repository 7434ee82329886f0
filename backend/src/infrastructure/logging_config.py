"""
Logging configuration for the engine.
"""
from __future__ import annotations

import logging
import sys
from typing import Iterable

_HANDLER_NAME = "video_trimmer"

# Pillow logs every plugin import at DEBUG; asyncio logs subprocess transports
_NOISY_LOGGERS = ("PIL", "asyncio")


def setup_logging(level: str = "INFO", quiet: Iterable[str] = _NOISY_LOGGERS) -> None:
    """Configure engine-wide logging.

    Safe to call once per container: the engine's stdout handler is replaced
    rather than stacked, and handlers installed by the host are left alone.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(logging.WARNING, log_level))
