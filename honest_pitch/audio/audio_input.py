"""Microphone capture through sounddevice."""

from __future__ import annotations
import numpy as np
import sounddevice as sd
from typing import Optional, Dict, Any, List, ClassVar

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IAudioInput, ICaptureSession
from .errors import AudioPermissionError, DeviceUnavailableError

logger = get_logger(__name__)

_PERMISSION_HINTS = ("permission", "not permitted", "access denied", "unauthorized")


def _capture_error(message: str, error: Exception) -> Exception:
    """Translate a PortAudio failure into one of our capture errors."""
    text = str(error).lower()
    if any(hint in text for hint in _PERMISSION_HINTS):
        return AudioPermissionError(f"{message}: {error}")
    return DeviceUnavailableError(f"{message}: {error}")


def list_input_devices() -> List[Dict[str, Any]]:
    """Describe every device that can record.

    Returns:
        A list of dicts with the device id, name and default sample rate
    """
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "max_input_channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


class SoundDeviceCapture(ICaptureSession):
    """An open sounddevice input stream with a rolling frame buffer.

    The stream is read without a callback: every ``read_frame`` drains
    whatever the device has buffered since the previous call and returns
    the newest ``frame_size`` samples, so nothing runs on another thread.
    """

    def __init__(self, stream: sd.InputStream, sample_rate: int, frame_size: int):
        self._stream: Optional[sd.InputStream] = stream
        self._sample_rate = sample_rate
        self._buffer = np.zeros(frame_size, dtype=np.float32)

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def read_frame(self) -> AudioFrame:
        if self._stream is None:
            raise RuntimeError("Capture session has been released")

        available = self._stream.read_available
        if available > 0:
            indata, overflowed = self._stream.read(available)
            if overflowed:
                logger.warning("Audio input overflow")

            # Extract mono audio data (take first channel if multi-channel)
            samples = indata[:, 0] if indata.ndim > 1 else indata
            self._push(samples.astype(np.float32, copy=False))

        return AudioFrame(samples=self._buffer.copy(), sample_rate=self._sample_rate)

    def _push(self, samples: np.ndarray) -> None:
        size = len(self._buffer)
        if len(samples) >= size:
            self._buffer[:] = samples[-size:]
        else:
            self._buffer = np.concatenate((self._buffer[len(samples):], samples))

    def release(self) -> None:
        if self._stream is None:
            return

        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()
            logger.info("Audio input stopped")


class SoundDeviceInput(IAudioInput):
    """Audio input handler using sounddevice library."""

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAME_SIZE: ClassVar[int] = 4096  # Samples handed to the pitch estimator
    CHANNELS: ClassVar[int] = 1  # Mono audio
    COMMON_RATES: ClassVar[List[int]] = [44100, 48000, 22050, 16000]

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the default input
            sample_rate: Preferred sample rate in Hz, or None for default (44100)
            frame_size: Samples per analysis frame, or None for default (4096)
            channels: Number of audio channels, or None for default (1)
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frame_size = frame_size or self.FRAME_SIZE
        self._channels = channels or self.CHANNELS

    @property
    def sample_rate(self) -> int:
        """The preferred (or last negotiated) sample rate."""
        return self._sample_rate

    def _negotiate_sample_rate(self) -> int:
        """Find a sample rate the device accepts, preferring the requested one."""
        rates = [self._sample_rate] + [
            rate for rate in self.COMMON_RATES if rate != self._sample_rate
        ]

        last_error: Optional[Exception] = None
        for rate in rates:
            try:
                sd.check_input_settings(
                    device=self._device_id, samplerate=rate, channels=self._channels
                )
                if rate != self._sample_rate:
                    logger.info(f"Sample rate {self._sample_rate} Hz not supported, using {rate} Hz")
                return rate
            except Exception as e:
                logger.warning(f"Sample rate {rate} Hz not supported: {e}")
                last_error = e

        raise _capture_error("Could not initialize audio device", last_error)

    def open(self) -> SoundDeviceCapture:
        """Open the microphone and start capturing.

        Raises:
            AudioPermissionError: If the system refused access to the microphone
            DeviceUnavailableError: If no usable input device could be opened
        """
        rate = self._negotiate_sample_rate()

        stream = None
        try:
            stream = sd.InputStream(
                device=self._device_id,
                samplerate=rate,
                channels=self._channels,
                dtype="float32",
            )
            stream.start()
        except Exception as e:
            if stream is not None:
                stream.close()
            logger.error(f"Failed to start audio input: {e}")
            raise _capture_error("Could not start audio input", e) from e

        self._sample_rate = rate
        logger.info(
            f"Audio input started: device={self._device_id}, rate={rate}Hz, "
            f"frame_size={self._frame_size}"
        )
        return SoundDeviceCapture(stream, rate, self._frame_size)
