"""Errors raised when an audio capture cannot be opened."""


class AudioCaptureError(Exception):
    """Base class for failures to start capturing audio."""


class AudioPermissionError(AudioCaptureError):
    """Access to the microphone was refused."""


class DeviceUnavailableError(AudioCaptureError):
    """No usable input device could be opened."""


PERMISSION_NOTICE = "Please allow microphone access to use the pitch detector"
