"""Cached logger lookup for Honest Pitch modules."""
import logging
from typing import Dict

PACKAGE_LOGGER = "honest_pitch"

_logger_cache: Dict[str, logging.Logger] = {}


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a module, creating it on first use.

    Modules run as scripts (``python -m honest_pitch.main``) are named
    ``__main__``; they are filed under the package logger so that
    ``setup_logging`` still applies to them.

    Args:
        name: The full module name (e.g., 'honest_pitch.session')

    Returns:
        The logger for that module
    """
    if name not in _logger_cache:
        if name == "__main__":
            qualified = f"{PACKAGE_LOGGER}.main"
        else:
            qualified = name
        _logger_cache[name] = logging.getLogger(qualified)
    return _logger_cache[name]
