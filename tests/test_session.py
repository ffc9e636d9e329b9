import unittest

import pytest

from honest_pitch.audio.errors import AudioPermissionError, DeviceUnavailableError
from honest_pitch.core.events import PitchEventType
from honest_pitch.history import PitchHistory
from honest_pitch.session import PitchSession
from honest_pitch.transpose import Transposer

from tests.fakes import FakeAudioInput, FakeClock, DeniedAudioInput, sine, silence


class TestPitchSession(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.audio = FakeAudioInput(frames=[sine(220.0), silence(), sine(440.0)])
        self.session = PitchSession(self.audio, clock=self.clock)

    def test_not_listening_until_started(self):
        self.assertFalse(self.session.is_listening())
        self.assertIsNone(self.session.tick())
        self.assertEqual(self.audio.captures, [])

    def test_tick_appends_point(self):
        self.session.start()
        self.clock.advance(0.5)
        point = self.session.tick()

        self.assertIsNotNone(point)
        self.assertEqual((point.note, point.octave), ("A", 3))
        self.assertAlmostEqual(point.frequency, 220.0, delta=2.0)
        self.assertAlmostEqual(point.timestamp, 0.5)
        self.assertEqual(self.session.history.snapshot(), (point,))

        state = self.session.display_state()
        self.assertTrue(state.listening)
        self.assertEqual(state.note, "A")
        self.assertAlmostEqual(state.frequency, point.frequency)

    def test_no_pitch_keeps_previous_display(self):
        self.session.start()
        first = self.session.tick()
        self.clock.advance(0.1)
        self.assertIsNone(self.session.tick())

        state = self.session.display_state()
        self.assertEqual(state.note, "A")
        self.assertEqual(state.frequency, first.frequency)
        self.assertEqual(len(state.history), 1)

    def test_display_blank_before_first_pitch(self):
        self.session.start()
        state = self.session.display_state()
        self.assertEqual(state.note, "")
        self.assertEqual(state.frequency, 0.0)
        self.assertEqual(state.cents, 0)

    def test_transpose_applies_to_frequency_and_note(self):
        self.session.set_transpose(3)
        self.session.start()
        point = self.session.tick()
        self.assertEqual((point.note, point.octave), ("C", 4))
        self.assertAlmostEqual(point.frequency, 220.0 * 2 ** 0.25, delta=2.5)

    def test_invalid_transpose(self):
        with self.assertRaises(ValueError):
            self.session.set_transpose(13)
        self.assertEqual(self.session.transpose, 0)

    def test_reset_transpose(self):
        self.session.set_transpose(-5)
        self.session.reset_transpose()
        self.assertEqual(self.session.transpose, 0)

    def test_stop_releases_capture_and_resets(self):
        self.session.start()
        self.session.tick()
        self.session.stop()

        self.assertTrue(self.audio.captures[0].released)
        self.assertFalse(self.session.is_listening())
        self.assertIsNone(self.session.tick())
        self.assertEqual(self.audio.captures[0].reads, 1)

        state = self.session.display_state()
        self.assertEqual((state.note, state.frequency, state.cents), ("", 0.0, 0))
        self.assertEqual(state.history, ())

    def test_stop_twice_is_harmless(self):
        self.session.start()
        self.session.stop()
        self.session.stop()
        self.assertEqual(len(self.audio.captures), 1)

    def test_start_twice_opens_one_capture(self):
        self.session.start()
        self.session.start()
        self.assertEqual(len(self.audio.captures), 1)

    def test_timestamps_restart_with_each_session(self):
        self.session.start()
        self.clock.advance(3.0)
        self.session.stop()

        self.audio.frames = [sine(220.0)]
        self.session.start()
        self.clock.advance(0.25)
        point = self.session.tick()
        self.assertAlmostEqual(point.timestamp, 0.25)

    def test_context_manager_releases_on_error(self):
        with self.assertRaises(KeyError):
            with self.session:
                self.session.start()
                raise KeyError("boom")
        self.assertTrue(self.audio.captures[0].released)
        self.assertFalse(self.session.is_listening())

    def test_clear_history(self):
        self.session.start()
        self.session.tick()
        self.session.clear_history()
        self.assertEqual(len(self.session.history), 0)
        self.assertTrue(self.session.is_listening())

    def test_toggle(self):
        self.session.toggle()
        self.assertTrue(self.session.is_listening())
        self.session.toggle()
        self.assertFalse(self.session.is_listening())


class TestSessionErrors(unittest.TestCase):
    def test_permission_denied_creates_no_state(self):
        session = PitchSession(DeniedAudioInput())
        with self.assertRaises(AudioPermissionError):
            session.start()
        self.assertFalse(session.is_listening())
        self.assertEqual(session.elapsed(), 0.0)

    def test_retry_after_failure(self):
        audio = FakeAudioInput(error=DeviceUnavailableError("busy"))
        session = PitchSession(audio)
        with self.assertRaises(DeviceUnavailableError):
            session.start()
        audio.error = None
        session.start()
        self.assertTrue(session.is_listening())
        session.stop()


class TestSessionEvents(unittest.TestCase):
    def test_events(self):
        clock = FakeClock()
        session = PitchSession(FakeAudioInput(frames=[sine(330.0)]), clock=clock)
        seen = []
        for event_type in PitchEventType:
            session.events.on(event_type, lambda *args, e=event_type: seen.append(e))

        session.start()
        session.tick()
        session.set_transpose(1)
        session.set_transpose(1)
        session.clear_history()
        session.stop()

        self.assertEqual(
            seen,
            [
                PitchEventType.SESSION_STARTED,
                PitchEventType.PITCH_DETECTED,
                PitchEventType.TRANSPOSE_CHANGED,
                PitchEventType.HISTORY_CLEARED,
                PitchEventType.SESSION_STOPPED,
            ],
        )

    def test_failing_listener_does_not_break_tick(self):
        session = PitchSession(FakeAudioInput(frames=[sine(330.0)]), clock=FakeClock())

        def broken(point):
            raise RuntimeError("listener failure")

        session.events.on_pitch_detected(broken)
        session.start()
        self.assertIsNotNone(session.tick())


def test_history_window_applies_to_session_time():
    clock = FakeClock()
    frames = [sine(220.0) for _ in range(4)]
    session = PitchSession(
        FakeAudioInput(frames=frames),
        history=PitchHistory(window_seconds=15.0),
        transposer=Transposer(0),
        clock=clock,
    )
    session.start()
    for _ in range(3):
        session.tick()
        clock.advance(2.0)
    clock.advance(14.0)
    session.tick()

    timestamps = [p.timestamp for p in session.history]
    assert timestamps == [pytest.approx(20.0)]
