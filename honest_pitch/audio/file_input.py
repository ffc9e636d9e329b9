"""Audio input that replays a sound file, for offline analysis and tests."""

from __future__ import annotations
import numpy as np
import soundfile as sf
from typing import Optional

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IAudioInput, ICaptureSession
from .errors import DeviceUnavailableError

logger = get_logger(__name__)


class WavFileCapture(ICaptureSession):
    """Replays decoded samples one hop per frame.

    Each ``read_frame`` advances the play position by ``hop_size`` samples
    and returns the ``frame_size`` samples that end there, zero-padded at
    the start of the file.
    """

    def __init__(
        self,
        samples: np.ndarray,
        sample_rate: int,
        frame_size: int,
        hop_size: int,
        loop: bool = False,
    ):
        self._samples = samples
        self._sample_rate = sample_rate
        self._frame_size = frame_size
        self._hop_size = hop_size
        self._loop = loop
        self._position = 0
        self._released = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def position(self) -> int:
        """Number of samples played so far."""
        return self._position

    @property
    def exhausted(self) -> bool:
        """True once every sample has been played (never when looping)."""
        return not self._loop and self._position >= len(self._samples)

    def read_frame(self) -> AudioFrame:
        if self._released:
            raise RuntimeError("Capture session has been released")

        total = len(self._samples)
        self._position += self._hop_size
        if self._loop and total and self._position > total:
            self._position %= total
        end = min(self._position, total)

        start = max(0, end - self._frame_size)
        frame = self._samples[start:end]
        if len(frame) < self._frame_size:
            padding = np.zeros(self._frame_size - len(frame), dtype=np.float32)
            frame = np.concatenate((padding, frame))

        return AudioFrame(samples=frame, sample_rate=self._sample_rate)

    def release(self) -> None:
        if not self._released:
            self._released = True
            logger.debug("File capture released")


class WavFileInput(IAudioInput):
    """Provides audio data by reading from a WAV (or any libsndfile) file."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = 4096,
        hop_size: Optional[int] = None,
        fps: float = 60.0,
        loop: bool = False,
        gain: float = 1.0,
    ):
        """Initialize the file input.

        Args:
            file_path: Path of the sound file
            frame_size: Samples per analysis frame
            hop_size: Samples to advance per frame, or None to follow ``fps``
            fps: Frame rate to emulate when hop_size is not given
            loop: Start over at the end of the file
            gain: Linear gain applied to the samples
        """
        self._file_path = file_path
        self._frame_size = frame_size
        self._hop_size = hop_size
        self._fps = fps
        self._loop = loop
        self._gain = gain

    def open(self) -> WavFileCapture:
        """Decode the file and return a capture over its first channel.

        Raises:
            DeviceUnavailableError: If the file cannot be read
        """
        try:
            data, sample_rate = sf.read(self._file_path, dtype="float32", always_2d=True)
        except (RuntimeError, OSError) as e:
            logger.error(f"Error reading audio file {self._file_path}: {e}")
            raise DeviceUnavailableError(f"Could not read {self._file_path}: {e}") from e

        samples = data[:, 0]
        # Apply gain if specified
        if self._gain != 1.0:
            samples = np.clip(samples * self._gain, -1.0, 1.0).astype(np.float32)

        hop_size = self._hop_size or max(1, int(round(sample_rate / self._fps)))
        logger.info(
            f"Opened {self._file_path}: {len(samples)} samples at {sample_rate}Hz, "
            f"hop {hop_size}"
        )
        return WavFileCapture(
            samples, sample_rate, self._frame_size, hop_size, loop=self._loop
        )
