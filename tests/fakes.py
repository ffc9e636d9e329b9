"""Test doubles for audio input and clocks."""

import numpy as np

from honest_pitch.audio.errors import AudioPermissionError
from honest_pitch.core.interfaces import IAudioInput, ICaptureSession
from honest_pitch.note_types import AudioFrame

SAMPLE_RATE = 44100
FRAME_SIZE = 4096


def sine(frequency, amplitude=0.5, size=FRAME_SIZE, sample_rate=SAMPLE_RATE):
    t = np.arange(size) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def silence(size=FRAME_SIZE):
    return np.zeros(size, dtype=np.float32)


class FakeCapture(ICaptureSession):
    """Hands out queued frames; repeats silence when the queue is empty."""

    def __init__(self, frames, sample_rate=SAMPLE_RATE):
        self._frames = list(frames)
        self._sample_rate = sample_rate
        self.released = False
        self.reads = 0

    @property
    def sample_rate(self):
        return self._sample_rate

    def read_frame(self):
        if self.released:
            raise RuntimeError("Capture session has been released")
        self.reads += 1
        samples = self._frames.pop(0) if self._frames else silence()
        return AudioFrame(samples=samples, sample_rate=self._sample_rate)

    def release(self):
        self.released = True


class FakeAudioInput(IAudioInput):
    def __init__(self, frames=(), error=None):
        self.frames = list(frames)
        self.error = error
        self.captures = []

    def open(self):
        if self.error is not None:
            raise self.error
        capture = FakeCapture(self.frames)
        self.captures.append(capture)
        return capture


class DeniedAudioInput(FakeAudioInput):
    def __init__(self):
        super().__init__(error=AudioPermissionError("denied"))


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
