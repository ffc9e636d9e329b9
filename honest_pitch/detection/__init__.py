"""Pitch detection algorithms."""

from .pitch_estimator import PitchEstimator

__all__ = ["PitchEstimator"]
