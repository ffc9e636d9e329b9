import unittest

import numpy as np
import pytest

from honest_pitch.detection.pitch_estimator import (
    PitchEstimator,
    autocorrelation,
    parabolic_interpolation,
)
from honest_pitch.note_types import AudioFrame

SAMPLE_RATE = 44100
FRAME_SIZE = 4096


def sine_frame(frequency, amplitude=0.5, sample_rate=SAMPLE_RATE, size=FRAME_SIZE):
    t = np.arange(size) / sample_rate
    samples = (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    return AudioFrame(samples=samples, sample_rate=sample_rate)


def voice_like_frame(frequency, sample_rate=SAMPLE_RATE, size=FRAME_SIZE):
    """A fundamental with decaying harmonics, like a sung vowel."""
    t = np.arange(size) / sample_rate
    samples = sum(
        (0.4 / k) * np.sin(2 * np.pi * frequency * k * t + k) for k in range(1, 6)
    )
    return AudioFrame(samples=samples.astype(np.float32), sample_rate=sample_rate)


class TestAutocorrelation(unittest.TestCase):
    def test_matches_direct_sum(self):
        rng = np.random.default_rng(3)
        x = rng.uniform(-1, 1, 300)
        corr = autocorrelation(x)
        for lag in (0, 1, 50, 149, 299):
            expected = float(np.sum(x[: len(x) - lag] * x[lag:]))
            self.assertAlmostEqual(corr[lag], expected, places=6)

    def test_zero_lag_is_energy(self):
        x = np.array([0.5, -0.5, 0.25], dtype=np.float32)
        self.assertAlmostEqual(autocorrelation(x)[0], 0.5625, places=6)

    def test_empty(self):
        self.assertEqual(len(autocorrelation(np.zeros(0))), 0)


class TestParabolicInterpolation(unittest.TestCase):
    def test_symmetric_peak_stays_put(self):
        corr = np.array([0.0, 1.0, 2.0, 1.0, 0.0])
        self.assertEqual(parabolic_interpolation(corr, 2), 2.0)

    def test_skewed_peak_moves_towards_larger_neighbour(self):
        corr = np.array([0.0, 1.0, 2.0, 1.5, 0.0])
        self.assertGreater(parabolic_interpolation(corr, 2), 2.0)
        self.assertLess(parabolic_interpolation(corr, 2), 2.5)

    def test_flat_neighbourhood_falls_back_to_integer_lag(self):
        corr = np.array([1.0, 1.0, 1.0, 1.0])
        self.assertEqual(parabolic_interpolation(corr, 1), 1.0)

    def test_boundaries_are_not_refined(self):
        corr = np.array([3.0, 2.0, 1.0])
        self.assertEqual(parabolic_interpolation(corr, 0), 0.0)
        self.assertEqual(parabolic_interpolation(corr, 2), 2.0)


class TestPitchEstimator(unittest.TestCase):
    def setUp(self):
        self.estimator = PitchEstimator()

    def test_sine_220(self):
        frequency = self.estimator.estimate(sine_frame(220.0))
        self.assertIsNotNone(frequency)
        self.assertAlmostEqual(frequency, 220.0, delta=2.0)

    def test_silence(self):
        frame = AudioFrame(np.zeros(FRAME_SIZE, dtype=np.float32), SAMPLE_RATE)
        self.assertIsNone(self.estimator.estimate(frame))

    def test_empty_frame(self):
        frame = AudioFrame(np.zeros(0, dtype=np.float32), SAMPLE_RATE)
        self.assertIsNone(self.estimator.estimate(frame))

    def test_quiet_noise(self):
        rng = np.random.default_rng(1234)
        samples = rng.normal(0.0, 0.001, FRAME_SIZE).astype(np.float32)
        self.assertIsNone(self.estimator.estimate(AudioFrame(samples, SAMPLE_RATE)))

    def test_constant_offset_is_out_of_band(self):
        # The strongest lag is the search floor: 44100 / 50 = 882 Hz
        frame = AudioFrame(np.full(FRAME_SIZE, 0.2, dtype=np.float32), SAMPLE_RATE)
        self.assertIsNone(self.estimator.estimate(frame))

    def test_above_accepted_band(self):
        narrow = PitchEstimator(min_frequency=85.0, max_frequency=200.0)
        self.assertIsNone(narrow.estimate(sine_frame(220.0)))

    def test_below_voice_band(self):
        self.assertIsNone(self.estimator.estimate(sine_frame(60.0)))

    def test_other_sample_rate(self):
        frequency = self.estimator.estimate(sine_frame(330.0, sample_rate=48000))
        self.assertAlmostEqual(frequency, 330.0, delta=2.0)

    def test_threshold_is_absolute(self):
        strict = PitchEstimator(correlation_threshold=1e6)
        self.assertIsNone(strict.estimate(sine_frame(220.0)))

    def test_invalid_parameters(self):
        with self.assertRaises(ValueError):
            PitchEstimator(min_lag=0)
        with self.assertRaises(ValueError):
            PitchEstimator(min_frequency=800.0, max_frequency=700.0)


@pytest.mark.parametrize("frequency", [98.0, 146.83, 220.0, 261.63, 392.0, 523.25, 659.26])
def test_voice_band_sines(frequency):
    estimate = PitchEstimator().estimate(sine_frame(frequency))
    assert estimate == pytest.approx(frequency, rel=0.01)


@pytest.mark.parametrize("frequency", [110.0, 196.0, 330.0])
def test_harmonic_rich_signal(frequency):
    estimate = PitchEstimator().estimate(voice_like_frame(frequency))
    assert estimate == pytest.approx(frequency, rel=0.01)
