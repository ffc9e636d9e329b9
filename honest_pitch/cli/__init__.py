"""Command-line interface for Honest Pitch."""

from .analyze import analyze, analyze_file

__all__ = ["analyze", "analyze_file"]
