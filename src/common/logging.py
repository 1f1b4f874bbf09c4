"""Logging configuration for the post collection engine."""

from __future__ import annotations

import logging
import sys


def resolve_level(level: int | str) -> int:
    """Turn a level name like "debug" into its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "src",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Library modules log through ``logging.getLogger(__name__)``, so the
    default name ``src`` covers every package under the project root.

    Args:
        level: Logging level, numeric or by name (default INFO).
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    numeric = resolve_level(level)

    if logger.handlers:
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)
        return logger

    logger.setLevel(numeric)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
