"""Rolling, time-windowed history of detected pitches."""

from collections import deque
from typing import Deque, Iterator, Optional, Tuple

from .logger import get_logger
from .note_types import PitchPoint

logger = get_logger(__name__)

WINDOW_SECONDS = 15.0


class PitchHistory:
    """
    Keeps the pitch points of the last few seconds for the pitch graph.

    Points arrive in non-decreasing timestamp order, so anything too old is
    always at the front of the buffer.
    """

    def __init__(self, window_seconds: float = WINDOW_SECONDS):
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._window_seconds = float(window_seconds)
        self._points: Deque[PitchPoint] = deque()

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def append(
        self, point: PitchPoint, current_time: Optional[float] = None
    ) -> Tuple[PitchPoint, ...]:
        """Add a point and evict everything that fell out of the window.

        Args:
            point: The new pitch point
            current_time: Session time used for eviction, defaults to the
                point's own timestamp

        Returns:
            Snapshot of the updated history
        """
        if current_time is None:
            current_time = point.timestamp

        self._points.append(point)

        evicted = 0
        while (
            self._points
            and current_time - self._points[0].timestamp >= self._window_seconds
        ):
            self._points.popleft()
            evicted += 1

        if evicted:
            logger.debug(f"Evicted {evicted} points older than {self._window_seconds}s")

        return self.snapshot()

    def clear(self) -> Tuple[PitchPoint, ...]:
        """Remove every point."""
        if self._points:
            logger.info(f"Cleared pitch history ({len(self._points)} points)")
        self._points.clear()
        return self.snapshot()

    def snapshot(self) -> Tuple[PitchPoint, ...]:
        return tuple(self._points)

    def latest(self) -> Optional[PitchPoint]:
        return self._points[-1] if self._points else None

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PitchPoint]:
        return iter(tuple(self._points))

    def __bool__(self) -> bool:
        return bool(self._points)
