"""Centralized logging configuration for Honest Pitch.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Dict, Optional, TextIO

from .logger import PACKAGE_LOGGER

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "honest_pitch": logging.INFO,
    "honest_pitch.main": logging.INFO,
    "honest_pitch.session": logging.INFO,
    "honest_pitch.frame_loop": logging.INFO,
    # Detection runs once per frame, keep it quiet unless debugging
    "honest_pitch.detection": logging.WARNING,
    "honest_pitch.history": logging.INFO,
    "honest_pitch.audio": logging.INFO,
    "honest_pitch.core": logging.INFO,
    "honest_pitch.ui": logging.WARNING,  # UI modules often noisy, keep at WARNING
    "honest_pitch.cli": logging.INFO,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler, replaced when a different stream is requested
_console_handler: Optional[logging.StreamHandler] = None

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _shared_handler(stream: TextIO) -> logging.StreamHandler:
    global _console_handler

    if _console_handler is None or _console_handler.stream is not stream:
        _console_handler = logging.StreamHandler(stream)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return _console_handler


def _resolve_levels(level: Optional[str]) -> Dict[str, int]:
    """Module levels, with every package logger forced to ``level`` if given."""
    log_levels = MODULE_LOG_LEVELS.copy()
    if not level:
        return log_levels

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        logging.getLogger(__name__).error(f"Invalid log level: {level}")
        return log_levels

    for module_name in log_levels:
        if module_name.startswith(PACKAGE_LOGGER):
            log_levels[module_name] = numeric_level
    return log_levels


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'honest_pitch' log levels with this level (e.g., "DEBUG").
        stream: Where log lines go; stdout by default. Tools that print
            results on stdout pass stderr here.
    """
    handler = _shared_handler(stream or sys.stdout)

    for module_name, module_level in _resolve_levels(level).items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Swap whatever was attached for the shared handler
        for existing in logger.handlers[:]:
            logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger(PACKAGE_LOGGER).info("Logging configuration complete")
