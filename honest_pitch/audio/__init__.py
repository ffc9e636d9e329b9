"""Audio capture for pitch detection.

The sounddevice-backed microphone input lives in ``audio_input`` and is
imported on demand, so the rest of the package works without PortAudio.
"""

from .errors import AudioCaptureError, AudioPermissionError, DeviceUnavailableError
from .file_input import WavFileInput, WavFileCapture

__all__ = [
    "AudioCaptureError",
    "AudioPermissionError",
    "DeviceUnavailableError",
    "WavFileInput",
    "WavFileCapture",
]
