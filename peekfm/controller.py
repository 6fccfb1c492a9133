"""Event controller and composition root.

``run_browser`` builds the application context once and hands it to
``BrowserController``, which consumes events one at a time and is the only
writer of navigator and viewport state. Errors that are a normal part of
browsing are shown in the footer; everything else propagates and ends the
session after the terminal has been restored.
"""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Callable
from dataclasses import dataclass

from .config import BrowserConfig
from .debug import get_logger
from .errors import (
    ExternalProcessFailure,
    NavigationError,
    PermissionDenied,
    TerminalDriverFailure,
)
from .events import DriverError, Event, EventSource, Quit, Reselect, Resize, Select, ToggleHidden
from .highlight import preview_file_lines, sanitize_terminal_text
from .navigator import NOT_A_REGULAR_FILE, PERMISSION_DENIED, Navigator, is_directory_entry
from .screen import Screen
from .terminal import TerminalController
from .viewport import Viewport

log = get_logger("controller")


@dataclass
class AppContext:
    """Everything one browser session owns, built once at startup."""

    config: BrowserConfig
    navigator: Navigator
    viewport: Viewport
    events: EventSource
    terminal: TerminalController | None = None
    show_hidden: bool = False


class BrowserController:
    """Single consumer of the event queue."""

    def __init__(self, context: AppContext) -> None:
        self.context = context
        self._handlers: dict[type, Callable[[Event], bool]] = {
            Reselect: self._on_reselect,
            Select: self._on_select,
            ToggleHidden: self._on_toggle_hidden,
            Resize: self._on_resize,
            Quit: self._on_quit,
            DriverError: self._on_driver_error,
        }

    @property
    def navigator(self) -> Navigator:
        return self.context.navigator

    @property
    def viewport(self) -> Viewport:
        return self.context.viewport

    # -- views ---------------------------------------------------------------

    def build_preview(self) -> list[str]:
        """Preview lines for the highlighted entry, sized to the preview box."""
        selected = self.viewport.current_selected()
        if selected is None:
            return []
        height = self.viewport.preview_height()
        if is_directory_entry(selected):
            listing = self.navigator.list_first_n(selected, height, self.context.show_hidden)
            return [sanitize_terminal_text(line) for line in listing]
        try:
            lines = self.navigator.read_first_n(selected, height)
        except PermissionDenied:
            return [PERMISSION_DENIED]
        if lines == [NOT_A_REGULAR_FILE]:
            return lines
        config = self.context.config
        return preview_file_lines(lines, selected, config.style, config.no_color)

    def show_directory(self) -> None:
        """List the cursor directory and redisplay from the top."""
        lines = self.navigator.list(self.context.show_hidden)
        self.viewport.init(self.navigator.current_path, lines)
        self.viewport.render(self.build_preview())

    def start(self, path: str) -> None:
        """(Re)start the browser at absolute ``path``."""
        self.navigator.move_absolute(path)
        self.show_directory()

    def report(self, message: str) -> None:
        self.viewport.status_message = message

    # -- dispatch ------------------------------------------------------------

    def handle(self, event: Event) -> bool:
        """Act on one event; returns ``False`` when the loop should stop."""
        handler = self._handlers.get(type(event))
        if handler is None:
            return True
        self.viewport.status_message = ""
        return handler(event)

    def _on_reselect(self, event: Reselect) -> bool:
        self.viewport.move_selection(event.direction)
        self.viewport.render(self.build_preview())
        return True

    def _on_select(self, _event: Select) -> bool:
        selected = self.viewport.current_selected()
        if selected is None:
            return True
        if is_directory_entry(selected):
            try:
                self.navigator.move_one(selected)
            except (NavigationError, PermissionDenied) as exc:
                log.info("move into %r refused: %s", selected, exc)
                self.report(str(exc))
                self.viewport.render()
                return True
            self.show_directory()
            return True

        previous = self.navigator.current_path
        try:
            self.navigator.view_externally(selected, handoff=self._handoff)
        except ExternalProcessFailure as exc:
            self.report(str(exc))
        # The viewer may have left the screen in any state; rebuild from scratch.
        self.start(previous)
        return True

    def _on_toggle_hidden(self, _event: ToggleHidden) -> bool:
        self.context.show_hidden = not self.context.show_hidden
        log.debug("show hidden: %s", self.context.show_hidden)
        self.show_directory()
        return True

    def _on_resize(self, _event: Resize) -> bool:
        self.viewport.render(self.build_preview())
        return True

    def _on_quit(self, _event: Quit) -> bool:
        return False

    def _on_driver_error(self, event: DriverError) -> bool:
        raise TerminalDriverFailure(f"terminal input failed: {event.message}")

    @contextlib.contextmanager
    def _handoff(self):
        """Park the input reader and leave TUI mode around the viewer."""
        terminal = self.context.terminal
        with self.context.events.suspended():
            if terminal is None:
                yield
            else:
                with terminal.suspended():
                    yield

    # -- loop ----------------------------------------------------------------

    def run(self) -> None:
        """Display the start directory, then dispatch until ``Quit``."""
        self.start(self.navigator.current_path)
        self.context.events.start()
        while True:
            event = self.context.events.get()
            if not self.handle(event):
                break


def run_browser(
    config: BrowserConfig,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> None:
    """Run one interactive session; the terminal is restored however it ends."""
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd

    # Validate the start path before touching the terminal.
    navigator = Navigator(config.start_path, config.viewer_command)
    terminal = TerminalController(stdin_fd, stdout_fd)
    context = AppContext(
        config=config,
        navigator=navigator,
        viewport=Viewport(Screen(stdout_fd)),
        events=EventSource(stdin_fd),
        terminal=terminal,
        show_hidden=config.show_hidden,
    )
    controller = BrowserController(context)
    log.info("session start at %s", navigator.current_path)
    with terminal.raw_mode():
        try:
            controller.run()
        finally:
            context.events.stop()
    log.info("session end at %s", navigator.current_path)
