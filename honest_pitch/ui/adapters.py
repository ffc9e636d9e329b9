"""Adapters for connecting displays to a pitch session."""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Optional, Dict, Any, List

from ..logger import get_logger
from ..note_types import DisplayState, PitchPoint
from ..note_utils import format_cents, cents_color, IN_TUNE_CENTS, SLIGHTLY_OFF_CENTS
from ..graph import graph_x, graph_y, rainbow_rgb, note_grid
from ..session import PitchSession
from ..frame_loop import FrameLoop, FramePacer
from ..audio.errors import AudioCaptureError, AudioPermissionError, PERMISSION_NOTICE

logger = get_logger(__name__)


class UICommand(Enum):
    """User controls understood by every display."""

    TOGGLE_LISTENING = auto()
    CLEAR_HISTORY = auto()
    TRANSPOSE_UP = auto()
    TRANSPOSE_DOWN = auto()
    TRANSPOSE_RESET = auto()
    TOGGLE_TRANSPOSE_PANEL = auto()
    DISMISS_NOTICE = auto()
    QUIT = auto()


# Shared key bindings, by character
KEY_COMMANDS: Dict[str, UICommand] = {
    " ": UICommand.TOGGLE_LISTENING,
    "c": UICommand.CLEAR_HISTORY,
    "+": UICommand.TRANSPOSE_UP,
    "=": UICommand.TRANSPOSE_UP,
    "-": UICommand.TRANSPOSE_DOWN,
    "0": UICommand.TRANSPOSE_RESET,
    "t": UICommand.TOGGLE_TRANSPOSE_PANEL,
    "\n": UICommand.DISMISS_NOTICE,
    "\r": UICommand.DISMISS_NOTICE,
    "q": UICommand.QUIT,
    "\x1b": UICommand.QUIT,
}


def hex_to_rgb(color: str):
    """'#22c55e' -> (34, 197, 94)"""
    color = color.lstrip("#")
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


class UIAdapter(ABC):
    """Base class for displays driven by a pitch session.

    Subclasses turn their input events into ``UICommand`` values and draw
    ``DisplayState`` snapshots; the base class owns the frame loop and maps
    commands onto session operations.
    """

    def __init__(self, session: PitchSession, config: Optional[Dict[str, Any]] = None):
        """Initialize the UI adapter.

        Args:
            session: Pitch session to drive
            config: Display configuration options
        """
        self._session = session
        self._config = config or {}
        self._show_transpose = False
        self._notice: Optional[str] = None
        self._running = False
        self._loop: Optional[FrameLoop] = None

    @abstractmethod
    def initialize(self) -> bool:
        """Initialize the UI.

        Returns:
            True if initialization was successful, False otherwise
        """
        pass

    @abstractmethod
    def poll_commands(self) -> List[UICommand]:
        """Collect the user commands issued since the last frame."""
        pass

    @abstractmethod
    def render(self, state: DisplayState) -> None:
        """Render one frame."""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Clean up resources used by the UI."""
        pass

    @property
    def notice(self) -> Optional[str]:
        """Blocking message shown to the user, if any."""
        return self._notice

    @property
    def show_transpose(self) -> bool:
        return self._show_transpose

    def display_state(self) -> DisplayState:
        return self._session.display_state(
            show_transpose=self._show_transpose, notice=self._notice
        )

    def update(self) -> bool:
        """Handle pending user input.

        Returns:
            True to continue running, False to exit
        """
        for command in self.poll_commands():
            if not self.handle_command(command):
                return False
        return True

    def handle_command(self, command: UICommand) -> bool:
        """Apply one user command.

        Returns:
            False if the command asks the application to quit
        """
        if command is UICommand.QUIT:
            return False

        # A notice blocks everything else until dismissed
        if self._notice is not None:
            if command in (UICommand.DISMISS_NOTICE, UICommand.TOGGLE_LISTENING):
                self._notice = None
            return True

        if command is UICommand.TOGGLE_LISTENING:
            if self._session.is_listening():
                self._session.stop()
            else:
                self.start_listening()
        elif command is UICommand.CLEAR_HISTORY:
            self._session.clear_history()
        elif command is UICommand.TOGGLE_TRANSPOSE_PANEL:
            self._show_transpose = not self._show_transpose
        elif command in (UICommand.TRANSPOSE_UP, UICommand.TRANSPOSE_DOWN):
            step = 1 if command is UICommand.TRANSPOSE_UP else -1
            try:
                self._session.set_transpose(self._session.transpose + step)
            except ValueError:
                logger.debug("Transpose already at its limit")
        elif command is UICommand.TRANSPOSE_RESET:
            self._session.reset_transpose()

        return True

    def start_listening(self) -> bool:
        """Start the session, turning capture failures into a notice."""
        try:
            self._session.start()
            return True
        except AudioPermissionError as e:
            logger.error(f"Microphone access refused: {e}")
            self._notice = PERMISSION_NOTICE
        except AudioCaptureError as e:
            logger.error(f"Failed to start listening: {e}")
            self._notice = f"Could not open the audio input: {e}"
        return False

    def make_pacer(self):
        return FramePacer(fps=self._config.get("fps", 60))

    def run(self, max_frames: Optional[int] = None, autostart: bool = False) -> bool:
        """Initialize the display and run the frame loop until the user quits.

        Returns:
            False if the display could not be initialized
        """
        if not self.initialize():
            logger.error("Failed to initialize UI")
            return False

        self._running = True
        try:
            if autostart:
                self.start_listening()
            self._loop = FrameLoop(
                self._session,
                render=self.render,
                poll=self.update,
                pace=self.make_pacer(),
                state=self.display_state,
            )
            self._loop.run(max_frames=max_frames)
        finally:
            self._session.stop()
            self.cleanup()
            self._running = False
            self._loop = None
        return True

    def stop(self) -> None:
        """Ask the frame loop to finish."""
        if self._loop is not None:
            self._loop.stop()

    def is_running(self) -> bool:
        """Check if the UI is running."""
        return self._running


class PygameAdapter(UIAdapter):
    """Adapter for Pygame UI."""

    BG_COLOR = (20, 20, 30)
    TEXT_COLOR = (235, 235, 235)
    DIM_COLOR = (120, 120, 130)
    GRID_COLOR = (60, 60, 70)
    LISTEN_COLOR = (239, 68, 68)
    IDLE_COLOR = (0, 122, 255)

    def __init__(self, session: PitchSession, config: Dict[str, Any] = None):
        """Initialize the Pygame adapter.

        Args:
            session: Pitch session to drive
            config: Configuration options (width, height, graph_height, fps, title)
        """
        super().__init__(session, config)
        self._pygame = None
        self._clock = None
        self._screen = None
        self._large_font = None
        self._font = None
        self._small_font = None

    def initialize(self) -> bool:
        """Initialize the Pygame UI.

        Returns:
            True if initialization was successful, False otherwise
        """
        try:
            # Import pygame here to avoid dependency if not used
            import pygame
            self._pygame = pygame

            pygame.init()

            # Set up the display
            width = self._config.get("width", 1024)
            height = self._config.get("height", 640)
            self._screen = pygame.display.set_mode((width, height))
            pygame.display.set_caption(self._config.get("title", "Honest Pitch"))

            # Set up the clock
            self._clock = pygame.time.Clock()

            # Set up the fonts
            self._large_font = pygame.font.Font(None, 72)
            self._font = pygame.font.Font(None, 32)
            self._small_font = pygame.font.Font(None, 20)

            logger.info("Pygame UI initialized")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize Pygame UI: {e}")
            return False

    def make_pacer(self):
        fps = self._config.get("fps", 60)
        return lambda: self._clock.tick(fps)

    def poll_commands(self) -> List[UICommand]:
        pygame = self._pygame
        commands = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                commands.append(UICommand.QUIT)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_UP:
                    commands.append(UICommand.TRANSPOSE_UP)
                elif event.key == pygame.K_DOWN:
                    commands.append(UICommand.TRANSPOSE_DOWN)
                elif event.key == pygame.K_ESCAPE:
                    commands.append(UICommand.QUIT)
                elif event.unicode in KEY_COMMANDS:
                    commands.append(KEY_COMMANDS[event.unicode])
        return commands

    def render(self, state: DisplayState) -> None:
        """Render the Pygame UI."""
        if not self._pygame or not self._screen:
            return

        self._screen.fill(self.BG_COLOR)
        self._draw_header(state)
        self._draw_graph(state)
        if state.show_transpose:
            self._draw_transpose(state)
        if state.notice:
            self._draw_notice(state.notice)

        self._pygame.display.flip()

    def _text(self, font, text, color, pos, center=False):
        surface = font.render(text, True, color)
        rect = surface.get_rect(center=pos) if center else surface.get_rect(topleft=pos)
        self._screen.blit(surface, rect)
        return rect

    def _draw_header(self, state: DisplayState) -> None:
        status = "LISTENING (space to stop)" if state.listening else "space to start"
        color = self.LISTEN_COLOR if state.listening else self.IDLE_COLOR
        self._text(self._small_font, status, color, (20, 20))

        self._text(self._large_font, state.note or "--", self.TEXT_COLOR, (20, 45))
        if state.cents != 0:
            self._text(
                self._font,
                format_cents(state.cents),
                hex_to_rgb(cents_color(state.cents)),
                (130, 60),
            )
        if state.frequency > 0:
            self._text(self._font, f"{state.frequency:.1f} Hz", self.DIM_COLOR, (230, 60))

    def _graph_rect(self):
        width = self._screen.get_width()
        graph_height = self._config.get("graph_height", 400)
        return self._pygame.Rect(60, 130, width - 80, graph_height)

    def _draw_graph(self, state: DisplayState) -> None:
        pygame = self._pygame
        rect = self._graph_rect()
        pygame.draw.rect(self._screen, self.GRID_COLOR, rect, 1)

        spacing = rect.height / 12.0
        for y, label in note_grid(state.transpose, rect.height):
            screen_y = rect.bottom - y
            pygame.draw.line(
                self._screen, self.GRID_COLOR, (rect.left, screen_y), (rect.right, screen_y)
            )
            self._text(
                self._small_font,
                label,
                self.DIM_COLOR,
                (rect.left - 50, screen_y - spacing / 2 - 6),
            )

        for point in state.history:
            self._draw_point(rect, point)

        self._text(
            self._small_font,
            "c clear   t transpose   q quit",
            self.DIM_COLOR,
            (rect.left, rect.bottom + 8),
        )

    def _draw_point(self, rect, point: PitchPoint) -> None:
        y = graph_y(point.frequency, rect.height)
        x = graph_x(point.timestamp, rect.width)
        self._pygame.draw.circle(
            self._screen,
            rainbow_rgb(y, rect.height),
            (int(rect.left + x), int(rect.bottom - y)),
            2,
        )

    def _draw_transpose(self, state: DisplayState) -> None:
        label = f"+{state.transpose}" if state.transpose > 0 else str(state.transpose)
        self._text(
            self._font,
            f"Transpose: {label} semitones (up/down, 0 to reset)",
            self.TEXT_COLOR,
            (60, self._graph_rect().bottom + 30),
        )

    def _draw_notice(self, notice: str) -> None:
        width, height = self._screen.get_size()
        overlay = self._pygame.Surface((width, height))
        overlay.set_alpha(200)
        overlay.fill((0, 0, 0))
        self._screen.blit(overlay, (0, 0))
        self._text(self._font, notice, self.TEXT_COLOR, (width / 2, height / 2), center=True)
        self._text(
            self._small_font,
            "Press enter to continue",
            self.DIM_COLOR,
            (width / 2, height / 2 + 40),
            center=True,
        )

    def cleanup(self) -> None:
        """Clean up Pygame resources."""
        if self._pygame:
            self._pygame.quit()
            self._pygame = None
            logger.info("Pygame UI cleaned up")


class CursesAdapter(UIAdapter):
    """Adapter for Curses (terminal) UI."""

    def __init__(self, session: PitchSession, config: Dict[str, Any] = None):
        """Initialize the Curses adapter.

        Args:
            session: Pitch session to drive
            config: Configuration options (max_history, fps)
        """
        super().__init__(session, config)
        self._curses = None
        self._stdscr = None
        self._figlet = None
        self._max_history = self._config.get("max_history", 8)

    def initialize(self) -> bool:
        """Initialize the Curses UI.

        Returns:
            True if initialization was successful, False otherwise
        """
        try:
            # Import curses here to avoid dependency if not used
            import curses
            import pyfiglet
            self._curses = curses
            self._figlet = pyfiglet

            # Initialize curses
            self._stdscr = curses.initscr()
            curses.noecho()
            curses.cbreak()
            curses.curs_set(0)
            self._stdscr.keypad(True)
            self._stdscr.nodelay(True)  # Non-blocking getch

            # Check if terminal supports colors
            if curses.has_colors():
                curses.start_color()
                curses.init_pair(1, curses.COLOR_GREEN, curses.COLOR_BLACK)
                curses.init_pair(2, curses.COLOR_YELLOW, curses.COLOR_BLACK)
                curses.init_pair(3, curses.COLOR_RED, curses.COLOR_BLACK)
                curses.init_pair(4, curses.COLOR_CYAN, curses.COLOR_BLACK)

            logger.info("Curses UI initialized")
            return True

        except Exception as e:
            logger.error(f"Failed to initialize Curses UI: {e}")
            if self._curses:
                self._cleanup_curses()
            return False

    def poll_commands(self) -> List[UICommand]:
        curses = self._curses
        commands = []
        while True:
            key = self._stdscr.getch()
            if key == -1:
                break
            if key == curses.KEY_UP:
                commands.append(UICommand.TRANSPOSE_UP)
            elif key == curses.KEY_DOWN:
                commands.append(UICommand.TRANSPOSE_DOWN)
            elif 0 <= key < 256 and chr(key) in KEY_COMMANDS:
                commands.append(KEY_COMMANDS[chr(key)])
        return commands

    def _cents_pair(self, cents: int) -> int:
        abs_cents = abs(cents)
        if abs_cents <= IN_TUNE_CENTS:
            return 1
        elif abs_cents <= SLIGHTLY_OFF_CENTS:
            return 2
        return 3

    def _addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        height, width = self._stdscr.getmaxyx()
        if 0 <= y < height and x < width:
            try:
                self._stdscr.addstr(y, max(0, x), text[: max(0, width - x - 1)], attr)
            except self._curses.error:
                pass

    def render(self, state: DisplayState) -> None:
        """Render the Curses UI."""
        if not self._curses or not self._stdscr:
            return

        curses = self._curses
        self._stdscr.erase()
        height, width = self._stdscr.getmaxyx()

        # Draw header
        header = "Honest Pitch - " + ("listening" if state.listening else "stopped")
        self._addstr(0, (width - len(header)) // 2, header, curses.A_BOLD)

        if state.notice:
            self._addstr(height // 2, (width - len(state.notice)) // 2, state.notice, curses.color_pair(3))
            self._addstr(height // 2 + 1, 2, "Press enter to continue", curses.A_DIM)
            self._stdscr.refresh()
            return

        # Draw the current note in big letters
        lines = self._figlet.figlet_format(state.note or "--").splitlines()
        for i, line in enumerate(lines):
            self._addstr(2 + i, (width - len(line)) // 2, line, curses.color_pair(4))

        row = 3 + len(lines)
        if state.frequency > 0:
            details = f"{state.frequency:.1f} Hz  {format_cents(state.cents)}"
            self._addstr(row, (width - len(details)) // 2, details, curses.color_pair(self._cents_pair(state.cents)))
        row += 2

        if state.show_transpose:
            self._addstr(row, 2, f"Transpose: {state.transpose:+d} semitones (up/down, 0 to reset)")
            row += 2

        # Draw the newest points first
        recent = list(state.history)[-self._max_history:]
        if recent:
            self._addstr(row, 2, "Recent pitches:", curses.A_BOLD)
            for i, point in enumerate(reversed(recent)):
                text = (
                    f"{point.timestamp:6.2f}s  {point.note}{point.octave:<3} "
                    f"{point.frequency:7.1f} Hz  {format_cents(point.cents)}"
                )
                self._addstr(row + 1 + i, 4, text)

        self._addstr(height - 1, 0, "space start/stop  c clear  t transpose  q quit", curses.A_DIM)
        self._stdscr.refresh()

    def cleanup(self) -> None:
        """Clean up Curses resources."""
        if self._curses:
            self._cleanup_curses()
            self._curses = None
            logger.info("Curses UI cleaned up")

    def _cleanup_curses(self) -> None:
        """Restore the terminal."""
        try:
            if self._stdscr:
                self._stdscr.keypad(False)
            self._curses.nocbreak()
            self._curses.echo()
            self._curses.endwin()
        except self._curses.error as e:
            logger.warning(f"Error restoring terminal: {e}")
