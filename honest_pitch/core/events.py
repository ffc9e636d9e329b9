"""Event system for Honest Pitch components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class PitchEventType(Enum):
    """Event types emitted by a pitch session."""

    PITCH_DETECTED = auto()
    SESSION_STARTED = auto()
    SESSION_STOPPED = auto()
    HISTORY_CLEARED = auto()
    TRANSPOSE_CHANGED = auto()


class EventEmitter:
    """Event emitter for Honest Pitch components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class PitchSessionEvents:
    """Event emitter specifically for pitch session events."""

    def __init__(self):
        """Initialize the pitch session events."""
        self._emitter = EventEmitter()

    def on(self, event_type: PitchEventType, callback: Callable) -> None:
        """Register a callback for any session event type."""
        self._emitter.on(event_type, callback)

    def on_pitch_detected(self, callback: Callable) -> None:
        """Register a callback for pitch detection events.

        Args:
            callback: Function called with the new PitchPoint
        """
        self._emitter.on(PitchEventType.PITCH_DETECTED, callback)

    def emit(self, event_type: PitchEventType, *args) -> None:
        """Emit a session event."""
        self._emitter.emit(event_type, *args)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
