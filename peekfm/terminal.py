"""Terminal mode control for the browser session.

Owns raw-mode lifecycle and alternate-screen switching, and brackets the
external viewer handoff so it gets a normal cooked terminal.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

from .errors import TerminalDriverFailure

ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Switch the controlling terminal between cooked and TUI modes."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalDriverFailure(f"stdin is not a terminal: {exc}") from exc
        self._tui_active = False

    @property
    def tui_active(self) -> bool:
        return self._tui_active

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        try:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
            os.write(self.stdout_fd, ENTER_TUI)
        except (OSError, termios.error) as exc:
            raise TerminalDriverFailure(f"cannot enter raw mode: {exc}") from exc
        self._tui_active = True

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and the main screen buffer."""
        self._tui_active = False
        try:
            os.write(self.stdout_fd, LEAVE_TUI)
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except (OSError, termios.error) as exc:
            raise TerminalDriverFailure(f"cannot restore terminal: {exc}") from exc

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Hand the terminal back in cooked mode for the duration of the block."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()
