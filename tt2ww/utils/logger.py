"""Logging configuration helpers shared by the CLI and library modules."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = logging.INFO

_LOGGING_CONFIGURED = False
_INSTALLED_HANDLERS: list[logging.Handler] = []


def _resolve_level(level: str | int | None) -> int:
    """Resolves explicit level, then `LOG_LEVEL`, then INFO."""
    candidate: str | int | None = level
    if candidate is None:
        candidate = os.getenv("LOG_LEVEL", "").strip() or None
    if candidate is None:
        return DEFAULT_LOG_LEVEL
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelName(candidate.strip().upper())
    if isinstance(resolved, int):
        return resolved
    return DEFAULT_LOG_LEVEL


def configure_logging(level: str | int | None = None) -> int:
    """Configures root logging and returns the applied level.

    Args:
        level: Explicit level name or number. Overrides `LOG_LEVEL` when set.

    Returns:
        The numeric logging level applied to the root logger.
    """
    global _LOGGING_CONFIGURED
    applied_level = _resolve_level(level)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=applied_level)
        _INSTALLED_HANDLERS[:] = root_logger.handlers
    for handler in _INSTALLED_HANDLERS:
        handler.setLevel(applied_level)
    root_logger.setLevel(applied_level)
    _LOGGING_CONFIGURED = True
    return applied_level


def get_logger(name: str) -> logging.Logger:
    """Returns a named logger, configuring logging on first use."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return logging.getLogger(name)
