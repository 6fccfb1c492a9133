"""Viewport renderer for the split listing/preview view.

Owns the selection window over the current listing and paints a whole frame
onto the cell grid on every ``render``. Pane geometry is derived from the live
terminal size each time, never cached across frames.

Layout (``rows`` x ``cols``)::

    row 0            header (left pane only)
    rows 1..rows-2   listing, caret at column 1, names from column 3
    rows 1..rows-2   preview box in the right pane
    row rows-1       key functions or a status message
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import display_width
from .highlight import sanitize_terminal_text
from .navigator import PERMISSION_DENIED, is_directory_entry
from .screen import BG_RED, BLUE, CYAN, DEFAULT, Screen

HEADER_ROWS = 1
FOOTER_ROWS = 1
FIRST_LINE_ROW = HEADER_ROWS
CARET_X = 1
FILE_X = 3
PREVIEW_Y = 2
CARET = ">"
STATUS_STYLE = "\033[7m"

KEY_FUNCTIONS: tuple[str, ...] = (
    "up/down: move",
    "right/enter: open",
    "a: toggle hidden",
    "q: quit",
)
KEY_SEPARATOR = ", "


class Viewport:
    """Scrollable, selectable window over a list of display lines."""

    def __init__(self, screen: Screen, key_functions: Sequence[str] = KEY_FUNCTIONS) -> None:
        self.screen = screen
        self.key_functions = list(key_functions)
        self.header = ""
        self.lines: list[str] = []
        self.selected_index = 0
        self.scroll_offset = 0
        self.preview_lines: list[str] = []
        self.status_message = ""
        self.split_column = 0

    # -- content -------------------------------------------------------------

    def init(self, header: str, lines: Sequence[str]) -> None:
        """Replace the content and reset selection and scroll; does not render."""
        self.header = header
        self.lines = list(lines)
        self.selected_index = 0
        self.scroll_offset = 0

    def display(self, header: str, lines: Sequence[str], preview: Sequence[str] | None = None) -> None:
        self.init(header, lines)
        self.render(preview)

    def current_selected(self) -> str | None:
        if not self.lines:
            return None
        return self.lines[self.selected_index]

    # -- geometry ------------------------------------------------------------

    @staticmethod
    def _visible_rows_for(rows: int) -> int:
        return max(1, rows - HEADER_ROWS - FOOTER_ROWS)

    def visible_rows(self) -> int:
        rows, _cols = self.screen.size()
        return self._visible_rows_for(rows)

    def text_view_size(self) -> tuple[int, int]:
        """``(rows, cols)`` available to the listing in the left pane."""
        rows, cols = self.screen.size()
        return self._visible_rows_for(rows), max(0, cols // 2 - FILE_X)

    def preview_height(self) -> int:
        """Rows inside the preview box: everything but header, footer and borders."""
        rows, _cols = self.screen.size()
        return max(0, rows - FOOTER_ROWS - PREVIEW_Y - 1)

    def preview_width(self) -> int:
        _rows, cols = self.screen.size()
        return max(0, cols - cols // 2 - 4)

    # -- selection -----------------------------------------------------------

    def move_selection(self, direction: int) -> bool:
        """Move the caret one row; returns whether the selection changed.

        Moves that would leave ``[0, len(lines))`` are ignored. The scroll
        offset follows by exactly one row when the caret leaves the window.
        """
        if direction not in (1, -1):
            raise ValueError(f"direction must be +1 or -1, got {direction!r}")
        new_index = self.selected_index + direction
        if new_index < 0 or new_index >= len(self.lines):
            return False
        self.selected_index = new_index
        if new_index < self.scroll_offset:
            self.scroll_offset -= 1
        elif new_index >= self.scroll_offset + self.visible_rows():
            self.scroll_offset += 1
        self._keep_selection_visible(self.visible_rows())
        return True

    def _keep_selection_visible(self, visible_rows: int) -> None:
        # Only does work after a shrink; single-row moves are already in range.
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + visible_rows:
            self.scroll_offset = self.selected_index - visible_rows + 1
        self.scroll_offset = max(0, min(self.scroll_offset, max(0, len(self.lines) - 1)))

    # -- drawing -------------------------------------------------------------

    def render(self, preview: Sequence[str] | None = None) -> None:
        """Paint the full frame and flush it.

        ``preview`` replaces the stored preview lines when given.
        """
        if preview is not None:
            self.preview_lines = list(preview)
        screen = self.screen
        screen.clear()
        rows, cols = screen.rows, screen.cols
        self.split_column = cols // 2
        visible_rows = self._visible_rows_for(rows)
        self._keep_selection_visible(visible_rows)

        screen.draw_text(0, 0, sanitize_terminal_text(self.header), max_cols=self.split_column)
        self._draw_lines(visible_rows)
        self._draw_footer(rows, cols)
        self._draw_preview(rows, cols)
        screen.flush()

    def _draw_lines(self, visible_rows: int) -> None:
        end = min(self.scroll_offset + visible_rows, len(self.lines))
        name_cols = self.split_column - FILE_X
        for idx in range(self.scroll_offset, end):
            y = idx - self.scroll_offset + FIRST_LINE_ROW
            line = self.lines[idx]
            if idx == self.selected_index:
                self.screen.set_cell(CARET_X, y, CARET)
            style = BLUE if is_directory_entry(line) else DEFAULT
            self.screen.draw_text(FILE_X, y, sanitize_terminal_text(line), style, max_cols=name_cols)

    def _draw_footer(self, rows: int, cols: int) -> None:
        y = rows - FOOTER_ROWS
        if y < FIRST_LINE_ROW:
            return
        if self.status_message:
            self.screen.draw_text(1, y, sanitize_terminal_text(self.status_message), STATUS_STYLE, max_cols=cols - 1)
            return
        x = 1
        for idx, token in enumerate(self.key_functions):
            piece = token if idx == 0 else KEY_SEPARATOR + token
            width = display_width(piece)
            if x + width >= cols:
                break
            self.screen.draw_text(x, y, piece, CYAN)
            x += width

    def _draw_box(self, left: int, top: int, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        right = left + width
        bottom = top + height
        self.screen.set_cell(left, top, "┌")
        self.screen.set_cell(right, top, "┐")
        self.screen.set_cell(left, bottom, "└")
        self.screen.set_cell(right, bottom, "┘")
        for x in range(left + 1, right):
            self.screen.set_cell(x, top, "─")
            self.screen.set_cell(x, bottom, "─")
        for y in range(top + 1, bottom):
            self.screen.set_cell(left, y, "│")
            self.screen.set_cell(right, y, "│")

    def _draw_preview(self, rows: int, cols: int) -> None:
        preview_x = self.split_column + 2
        box_width = cols - preview_x - 1
        preview_height = max(0, rows - FOOTER_ROWS - PREVIEW_Y - 1)
        self._draw_box(preview_x - 1, PREVIEW_Y - 1, box_width, preview_height + 1)

        inner_width = box_width - 1
        if inner_width <= 0:
            return
        for offset, line in enumerate(self.preview_lines[:preview_height]):
            style = BG_RED if line == PERMISSION_DENIED else DEFAULT
            self.screen.draw_text(preview_x, PREVIEW_Y + offset, line, style, max_cols=inner_width)
