"""Core components for the Honest Pitch application."""

# Import interfaces for easier access
from .interfaces import (
    IAudioInput,
    ICaptureSession,
    IPitchEstimator,
)

__all__ = ["IAudioInput", "ICaptureSession", "IPitchEstimator"]
