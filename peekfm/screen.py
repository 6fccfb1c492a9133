"""Cell-grid drawing surface.

Rendering code paints individual cells, then ``flush`` composes one ANSI
frame and writes it with a single ``os.write``. Writes outside the grid are
clipped silently.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from .ansi import RESET, styled_chars
from .errors import TerminalDriverFailure

FALLBACK_SIZE = (80, 24)

DEFAULT = ""
BLUE = "\033[34m"
CYAN = "\033[36m"
BG_RED = "\033[41m"


@dataclass(frozen=True)
class Cell:
    ch: str = " "
    style: str = DEFAULT


BLANK = Cell()
# Right half of a double-width character; emits nothing on flush.
CONTINUATION = Cell(ch="")


def terminal_size() -> tuple[int, int]:
    """Return ``(rows, cols)`` for the controlling terminal."""
    size = shutil.get_terminal_size(FALLBACK_SIZE)
    return size.lines, size.columns


class Screen:
    """Back buffer of styled cells sized to the live terminal."""

    def __init__(
        self,
        stdout_fd: int,
        size_probe: Callable[[], tuple[int, int]] = terminal_size,
    ) -> None:
        self.stdout_fd = stdout_fd
        self._size_probe = size_probe
        self.rows = 0
        self.cols = 0
        self._cells: list[list[Cell]] = []

    def size(self) -> tuple[int, int]:
        """Query current ``(rows, cols)``; never cached."""
        rows, cols = self._size_probe()
        return max(0, rows), max(0, cols)

    def clear(self) -> None:
        """Blank the back buffer, resizing it to the current terminal size."""
        self.rows, self.cols = self.size()
        self._cells = [[BLANK] * self.cols for _ in range(self.rows)]

    def set_cell(self, x: int, y: int, ch: str, style: str = DEFAULT) -> None:
        if 0 <= y < self.rows and 0 <= x < self.cols:
            self._cells[y][x] = Cell(ch, style)

    def draw_text(self, x: int, y: int, text: str, style: str = DEFAULT, max_cols: int | None = None) -> int:
        """Draw ``text`` starting at ``(x, y)``; returns columns consumed.

        SGR sequences embedded in ``text`` are honoured and layered over
        ``style``. Output stops at ``max_cols`` columns; a wide character that
        would straddle the limit is dropped.
        """
        limit = self.cols - x if max_cols is None else min(max_cols, self.cols - x)
        used = 0
        for ch, sgr, width in styled_chars(text):
            if used + width > limit:
                break
            self.set_cell(x + used, y, ch, style + sgr)
            if width == 2:
                self.set_cell(x + used + 1, y, CONTINUATION.ch, style + sgr)
            used += width
        return max(0, used)

    def cell(self, x: int, y: int) -> Cell:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        """Plain characters of row ``y``; handy for inspection."""
        return "".join(cell.ch for cell in self._cells[y])

    def compose(self) -> str:
        out: list[str] = ["\033[H"]
        for y, row in enumerate(self._cells):
            out.append(f"\033[{y + 1};1H")
            active = DEFAULT
            for cell in row:
                if cell.style != active:
                    out.append(RESET)
                    if cell.style:
                        out.append(cell.style)
                    active = cell.style
                out.append(cell.ch)
            if active:
                out.append(RESET)
        return "".join(out)

    def flush(self) -> None:
        """Write the composed frame in one call."""
        frame = self.compose()
        try:
            os.write(self.stdout_fd, frame.encode("utf-8", errors="replace"))
        except OSError as exc:
            raise TerminalDriverFailure(f"cannot write frame: {exc}") from exc
