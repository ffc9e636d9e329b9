"""Defines the core interfaces for the Honest Pitch application."""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..note_types import AudioFrame, PitchEstimate


class ICaptureSession(ABC):
    """An open audio capture, owned by exactly one listening session.

    Only two operations are available to the owner: pulling the most recent
    frame and releasing the capture.
    """

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the capture in Hz."""
        pass

    @abstractmethod
    def read_frame(self) -> AudioFrame:
        """Return the most recent frame of samples without blocking."""
        pass

    @abstractmethod
    def release(self) -> None:
        """Stop capturing and free the underlying resources."""
        pass

    @property
    def exhausted(self) -> bool:
        """True once a finite source has nothing more to play.

        Live inputs never run out.
        """
        return False

    def __enter__(self) -> "ICaptureSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()


class IAudioInput(ABC):
    """Interface for audio inputs that can open a capture session."""

    @abstractmethod
    def open(self) -> ICaptureSession:
        """Open a capture session.

        Raises:
            AudioPermissionError: If access to the input was refused
            DeviceUnavailableError: If the input device cannot be opened
        """
        pass


class IPitchEstimator(ABC):
    """Interface for pitch estimation algorithms."""

    @abstractmethod
    def estimate(self, frame: AudioFrame) -> PitchEstimate:
        """Return the fundamental frequency of the frame, or None."""
        pass
