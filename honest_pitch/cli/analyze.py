"""Offline pitch analysis of a sound file."""

import math
import sys
from typing import List

import click
import soundfile as sf

from ..logger import get_logger
from ..logging_config import setup_logging
from ..audio.errors import AudioCaptureError
from ..audio.file_input import WavFileInput
from ..detection.pitch_estimator import PitchEstimator
from ..frame_loop import FrameLoop
from ..history import PitchHistory
from ..note_types import PitchPoint
from ..note_utils import format_cents
from ..session import PitchSession
from ..transpose import Transposer

logger = get_logger(__name__)


class FileClock:
    """Session clock that advances by one hop per frame instead of wall time."""

    def __init__(self, step: float):
        self.step = step
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self) -> None:
        self.now += self.step


def analyze_file(
    path: str,
    transpose: int = 0,
    frame_size: int = 4096,
    fps: float = 60.0,
    gain: float = 1.0,
) -> List[PitchPoint]:
    """Run the live pipeline over a file as fast as possible.

    Returns:
        Every detected pitch point, in order
    """
    info = sf.info(path)
    hop_size = max(1, int(round(info.samplerate / fps)))
    total_frames = math.ceil(info.frames / hop_size)
    clock = FileClock(hop_size / info.samplerate)

    session = PitchSession(
        WavFileInput(path, frame_size=frame_size, hop_size=hop_size, gain=gain),
        estimator=PitchEstimator(),
        # Keep every point of the file, not just the last window
        history=PitchHistory(window_seconds=max(clock.step * (total_frames + 1), 1.0)),
        transposer=Transposer(transpose),
        clock=clock,
    )

    points: List[PitchPoint] = []
    session.events.on_pitch_detected(points.append)

    with session:
        session.start()
        FrameLoop(session, pace=clock.advance).run(max_frames=total_frames)

    logger.info(f"Analyzed {total_frames} frames of {path}, {len(points)} pitches")
    return points


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--transpose", "-t", default=0, type=click.IntRange(-12, 12), help="Transpose in semitones")
@click.option("--frame-size", default=4096, show_default=True, help="Samples per analysis frame")
@click.option("--fps", default=60.0, show_default=True, help="Frames per second of audio to emulate")
@click.option("--gain", default=1.0, show_default=True, help="Gain applied to the samples")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def analyze(path, transpose, frame_size, fps, gain, debug):
    """Print the pitch detected in each frame of PATH."""
    # Results go to stdout, so log lines go to stderr
    setup_logging(level="DEBUG" if debug else "WARNING", stream=sys.stderr)

    try:
        points = analyze_file(path, transpose, frame_size, fps, gain)
    except (AudioCaptureError, RuntimeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not points:
        click.echo("No pitch detected")
        return

    for point in points:
        click.echo(
            f"{point.timestamp:7.2f}s  {point.note + str(point.octave):<4} "
            f"{point.frequency:7.1f} Hz  {format_cents(point.cents)}"
        )


if __name__ == "__main__":
    analyze()
