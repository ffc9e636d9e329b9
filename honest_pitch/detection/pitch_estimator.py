"""Autocorrelation pitch estimation for monophonic voice input."""

from __future__ import annotations
import numpy as np
from typing import ClassVar

from ..logger import get_logger
from ..note_types import AudioFrame, PitchEstimate
from ..core.interfaces import IPitchEstimator

logger = get_logger(__name__)


def autocorrelation(samples: np.ndarray) -> np.ndarray:
    """Unnormalized autocorrelation of a frame for every lag 0..N-1.

    corr[L] = sum(x[i] * x[i + L]) for i in 0..N-L-1, so corr[0] is the
    signal energy. Computed through a zero-padded FFT, which gives the
    linear (not circular) correlation.
    """
    n = len(samples)
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    x = samples.astype(np.float64)
    n_fft = 1 << int(np.ceil(np.log2(2 * n)))
    spectrum = np.fft.rfft(x, n=n_fft)
    corr = np.fft.irfft(spectrum * np.conj(spectrum), n=n_fft)
    return corr[:n]


def parabolic_interpolation(corr: np.ndarray, lag: int) -> float:
    """Refine a peak position using a parabola through its two neighbours.

    Falls back to the integer lag at the buffer edges or when the three
    points are collinear.
    """
    if lag <= 0 or lag >= len(corr) - 1:
        return float(lag)

    left, center, right = corr[lag - 1], corr[lag], corr[lag + 1]
    denominator = left - 2.0 * center + right
    if denominator == 0 or not np.isfinite(denominator):
        return float(lag)

    delta = 0.5 * (left - right) / denominator
    return float(lag) + float(delta)


class PitchEstimator(IPitchEstimator):
    """Estimates the fundamental frequency of a frame by autocorrelation."""

    # Lags below this are the zero-lag peak or unrealistically high pitches
    DEFAULT_MIN_LAG: ClassVar[int] = 50
    # Absolute correlation a peak must exceed (rejects silence)
    DEFAULT_CORRELATION_THRESHOLD: ClassVar[float] = 0.1
    # Human voice band with some margin
    DEFAULT_MIN_FREQUENCY: ClassVar[float] = 85.0
    DEFAULT_MAX_FREQUENCY: ClassVar[float] = 750.0

    def __init__(
        self,
        min_lag: int = DEFAULT_MIN_LAG,
        correlation_threshold: float = DEFAULT_CORRELATION_THRESHOLD,
        min_frequency: float = DEFAULT_MIN_FREQUENCY,
        max_frequency: float = DEFAULT_MAX_FREQUENCY,
    ) -> None:
        """Initialize the PitchEstimator.

        Args:
            min_lag: First lag (in samples) considered when searching for a peak
            correlation_threshold: Minimum raw correlation for a peak to count
            min_frequency: Lowest frequency accepted as a pitch
            max_frequency: Highest frequency accepted as a pitch
        """
        if min_lag < 1:
            raise ValueError("min_lag must be at least 1")
        if not 0 < min_frequency < max_frequency:
            raise ValueError("min_frequency must be positive and below max_frequency")

        self._min_lag = int(min_lag)
        self._correlation_threshold = float(correlation_threshold)
        self._min_frequency = float(min_frequency)
        self._max_frequency = float(max_frequency)

        logger.info(
            f"Pitch estimator initialized: min_lag={self._min_lag}, "
            f"threshold={self._correlation_threshold}, "
            f"band={self._min_frequency:.0f}-{self._max_frequency:.0f}Hz"
        )

    def estimate(self, frame: AudioFrame) -> PitchEstimate:
        """Estimate the pitch of one frame.

        Args:
            frame: Mono samples and their sample rate

        Returns:
            Frequency in Hz, or None if no confident pitch is in range
        """
        samples = np.asarray(frame.samples)
        n = len(samples)
        corr = autocorrelation(samples)

        # Search window [min_lag, N/2)
        max_lag = (n + 1) // 2
        if max_lag <= self._min_lag:
            return None

        window = corr[self._min_lag:max_lag]
        best_lag = int(np.argmax(window)) + self._min_lag
        best_corr = float(corr[best_lag])

        if not best_corr > self._correlation_threshold:
            logger.debug(f"No correlation peak above threshold (best {best_corr:.4f})")
            return None

        refined_lag = parabolic_interpolation(corr, best_lag)
        if refined_lag <= 0:
            return None

        frequency = frame.sample_rate / refined_lag

        if not self._min_frequency <= frequency <= self._max_frequency:
            logger.debug(
                f"Rejected {frequency:.1f}Hz outside "
                f"{self._min_frequency:.0f}-{self._max_frequency:.0f}Hz"
            )
            return None

        logger.debug(
            f"Pitch {frequency:.2f}Hz (lag {best_lag} -> {refined_lag:.3f}, "
            f"corr {best_corr:.3f})"
        )
        return frequency

    @property
    def min_lag(self) -> int:
        """Get the first lag considered in the peak search."""
        return self._min_lag

    @property
    def correlation_threshold(self) -> float:
        """Get the absolute correlation threshold."""
        return self._correlation_threshold

    @correlation_threshold.setter
    def correlation_threshold(self, value: float) -> None:
        """Set the absolute correlation threshold."""
        if value < 0:
            raise ValueError("correlation_threshold must not be negative")
        self._correlation_threshold = float(value)

    @property
    def min_frequency(self) -> float:
        """Get the lowest accepted frequency."""
        return self._min_frequency

    @property
    def max_frequency(self) -> float:
        """Get the highest accepted frequency."""
        return self._max_frequency
