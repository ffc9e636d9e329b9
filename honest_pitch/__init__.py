"""Honest Pitch - real-time voice pitch detection."""

__version__ = "0.1.0"
