"""Main entry point for the Honest Pitch application."""

import argparse
import sys
import time
from typing import Dict, Any, Optional

from .logger import get_logger
from .logging_config import setup_logging
from .core.config import ConfigManager
from .core.factory import ComponentFactory
from .frame_loop import FrameLoop, FramePacer
from .note_types import PitchPoint
from .note_utils import format_cents
from .session import PitchSession
from .audio.errors import AudioCaptureError
from .ui.adapters import PygameAdapter, CursesAdapter, UIAdapter

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Honest Pitch - Voice Pitch Detection")

    parser.add_argument(
        "--ui",
        choices=["pygame", "curses", "none"],
        default="pygame",
        help="UI to use (default: pygame)",
    )

    parser.add_argument(
        "--device",
        type=int,
        default=None,
        help="Audio input device ID (default: system default input)",
    )

    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List audio input devices and exit",
    )

    parser.add_argument(
        "--sample-rate",
        type=int,
        default=None,
        help="Audio sample rate in Hz (default: from configuration, 44100)",
    )

    parser.add_argument(
        "--frame-size",
        type=int,
        default=None,
        help="Samples per analysis frame (default: from configuration, 4096)",
    )

    parser.add_argument(
        "--transpose",
        type=int,
        default=0,
        help="Transpose in semitones, -12 to 12 (default: 0)",
    )

    parser.add_argument(
        "--wav",
        type=str,
        default=None,
        help="Replay a sound file instead of listening to the microphone",
    )

    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (headless mode only)",
    )

    parser.add_argument(
        "--config-dir",
        type=str,
        default=None,
        help="Configuration directory (default: ~/.config/honest_pitch)",
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if not -12 <= args.transpose <= 12:
        parser.error("--transpose must be between -12 and 12")
    return args


def create_ui_adapter(
    ui_type: str, session: PitchSession, config: Dict[str, Any]
) -> Optional[UIAdapter]:
    """Create a UI adapter based on the specified type."""
    if ui_type == "pygame":
        return PygameAdapter(session, config=config)
    elif ui_type == "curses":
        return CursesAdapter(session, config=config)
    elif ui_type == "none":
        return None
    else:
        logger.error(f"Unknown UI type: {ui_type}")
        return None


def create_session(args, factory: ComponentFactory) -> PitchSession:
    """Build the session for the selected audio source."""
    overrides = {}
    if args.frame_size:
        overrides["frame_size"] = args.frame_size

    if args.wav:
        audio_input = factory.create_audio_input(
            "wav", file_path=args.wav, loop=args.ui != "none", **overrides
        )
    else:
        if args.sample_rate:
            overrides["sample_rate"] = args.sample_rate
        audio_input = factory.create_audio_input(
            "default", device_id=args.device, **overrides
        )

    return factory.create_session(audio_input=audio_input, transpose=args.transpose)


def run_headless(session: PitchSession, duration: Optional[float], fps: float) -> int:
    """Listen without a display, logging each detected pitch."""

    def log_point(point: PitchPoint) -> None:
        logger.info(
            f"[{point.timestamp:6.2f}s] {point.note}{point.octave} "
            f"{point.frequency:.1f}Hz {format_cents(point.cents)}"
        )

    session.events.on_pitch_detected(log_point)

    try:
        session.start()
    except AudioCaptureError as e:
        logger.error(f"Could not start listening: {e}")
        return 1

    deadline = time.monotonic() + duration if duration else None

    def keep_going() -> bool:
        if session.is_exhausted():
            logger.info("End of input reached")
            return False
        return deadline is None or time.monotonic() < deadline

    loop = FrameLoop(session, poll=keep_going, pace=FramePacer(fps=fps))
    with session:
        try:
            loop.run()
        except KeyboardInterrupt:
            logger.info("Interrupted")
    return 0


def list_devices() -> int:
    """Print the available input devices."""
    from .audio.audio_input import list_input_devices

    for device in list_input_devices():
        print(
            f"{device['id']}: {device['name']} "
            f"(inputs: {device['max_input_channels']}, "
            f"rate: {device['default_samplerate']}Hz)"
        )
    return 0


def main(argv=None):
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_args(argv)

    # Configure logging
    setup_logging(level="DEBUG" if args.debug else None)

    if args.list_devices:
        return list_devices()

    try:
        factory = ComponentFactory(ConfigManager(args.config_dir))
        display_config = factory.config_manager.get_config("display")
        display_config["title"] = "Honest Pitch"

        session = create_session(args, factory)
        ui_adapter = create_ui_adapter(args.ui, session, display_config)

        if ui_adapter is None:
            if args.ui != "none":
                logger.error("Failed to create UI adapter")
                return 1
            return run_headless(session, args.duration, display_config.get("fps", 60))

        if not ui_adapter.run(autostart=args.wav is not None):
            logger.error("Failed to initialize UI adapter.")
            return 1
        return 0

    except Exception as e:
        logger.exception(f"Error in main: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
