import unittest

from honest_pitch.history import PitchHistory, WINDOW_SECONDS
from honest_pitch.note_types import PitchPoint


def point(timestamp, frequency=220.0):
    return PitchPoint(timestamp=timestamp, frequency=frequency, note="A", octave=3, cents=0)


class TestPitchHistory(unittest.TestCase):
    def setUp(self):
        self.history = PitchHistory()

    def test_default_window(self):
        self.assertEqual(self.history.window_seconds, WINDOW_SECONDS)
        self.assertEqual(WINDOW_SECONDS, 15.0)

    def test_append_keeps_order(self):
        for t in (0.0, 0.5, 1.0):
            self.history.append(point(t))
        self.assertEqual([p.timestamp for p in self.history], [0.0, 0.5, 1.0])
        self.assertEqual(self.history.latest().timestamp, 1.0)

    def test_append_returns_snapshot(self):
        snapshot = self.history.append(point(1.0))
        self.assertEqual(snapshot, (point(1.0),))
        self.history.append(point(2.0))
        self.assertEqual(len(snapshot), 1)

    def test_evicts_everything_older_than_window(self):
        t = 100.0
        for timestamp in (t - 20, t - 18, t - 16):
            self.history.append(point(timestamp))
        self.history.append(point(t))
        self.assertEqual(self.history.snapshot(), (point(t),))

    def test_point_exactly_window_old_is_evicted(self):
        self.history.append(point(0.0))
        self.history.append(point(14.999))
        self.assertEqual(len(self.history), 2)
        self.history.append(point(15.0))
        self.assertEqual([p.timestamp for p in self.history], [14.999, 15.0])

    def test_window_invariant_after_many_appends(self):
        for i in range(600):
            now = i * 0.1
            self.history.append(point(now))
            for kept in self.history:
                self.assertLess(now - kept.timestamp, 15.0)

    def test_explicit_current_time(self):
        self.history.append(point(1.0))
        self.history.append(point(2.0), current_time=16.5)
        self.assertEqual([p.timestamp for p in self.history], [2.0])

    def test_clear_is_idempotent(self):
        self.history.append(point(1.0))
        self.assertEqual(self.history.clear(), ())
        self.assertEqual(self.history.clear(), ())
        self.assertFalse(self.history)
        self.assertIsNone(self.history.latest())

    def test_custom_window(self):
        history = PitchHistory(window_seconds=2.0)
        history.append(point(0.0))
        history.append(point(2.5))
        self.assertEqual(len(history), 1)

    def test_invalid_window(self):
        with self.assertRaises(ValueError):
            PitchHistory(window_seconds=0)


if __name__ == "__main__":
    unittest.main()
