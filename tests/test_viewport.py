"""Viewport renderer tests.

Frames are painted onto a fixed-size cell grid and inspected directly, so no
terminal is involved.
"""

from __future__ import annotations

import unittest

from peekfm.navigator import PERMISSION_DENIED
from peekfm.screen import BG_RED, BLUE, CYAN, DEFAULT, Screen
from peekfm.viewport import CARET, CARET_X, FILE_X, PREVIEW_Y, Viewport


class RecordingScreen(Screen):
    """Screen with a settable size whose flushes are kept instead of written."""

    def __init__(self, rows: int = 24, cols: int = 80) -> None:
        self.size_value = (rows, cols)
        super().__init__(stdout_fd=-1, size_probe=lambda: self.size_value)
        self.frames: list[str] = []

    def flush(self) -> None:
        self.frames.append(self.compose())


def _lines(count: int) -> list[str]:
    return [f"entry{idx}" for idx in range(count)]


def _assert_window_invariant(test: unittest.TestCase, viewport: Viewport) -> None:
    visible = viewport.visible_rows()
    test.assertLessEqual(viewport.scroll_offset, viewport.selected_index)
    test.assertLess(viewport.selected_index, viewport.scroll_offset + visible)


class SelectionTests(unittest.TestCase):
    def test_move_selection_never_leaves_bounds(self) -> None:
        viewport = Viewport(RecordingScreen())
        viewport.init("/tmp", _lines(5))

        self.assertFalse(viewport.move_selection(-1))
        self.assertEqual(viewport.selected_index, 0)

        for _ in range(10):
            viewport.move_selection(1)
        self.assertEqual(viewport.selected_index, 4)

    def test_move_selection_on_empty_listing_is_a_noop(self) -> None:
        viewport = Viewport(RecordingScreen())
        viewport.init("/", [])
        self.assertFalse(viewport.move_selection(1))
        self.assertIsNone(viewport.current_selected())

    def test_scroll_follows_selection_one_row_at_a_time(self) -> None:
        viewport = Viewport(RecordingScreen(rows=6, cols=40))
        viewport.init("/tmp", _lines(20))
        self.assertEqual(viewport.visible_rows(), 4)

        offsets = []
        for _ in range(15):
            viewport.move_selection(1)
            _assert_window_invariant(self, viewport)
            offsets.append(viewport.scroll_offset)
        self.assertEqual(offsets[:4], [0, 0, 0, 1])
        self.assertEqual(viewport.scroll_offset, 12)

        for _ in range(15):
            viewport.move_selection(-1)
            _assert_window_invariant(self, viewport)
        self.assertEqual(viewport.selected_index, 0)
        self.assertEqual(viewport.scroll_offset, 0)

    def test_move_selection_rejects_multi_row_steps(self) -> None:
        viewport = Viewport(RecordingScreen())
        viewport.init("/tmp", _lines(5))
        with self.assertRaises(ValueError):
            viewport.move_selection(2)

    def test_init_resets_selection_and_scroll(self) -> None:
        viewport = Viewport(RecordingScreen(rows=5, cols=40))
        viewport.init("/a", _lines(10))
        for _ in range(6):
            viewport.move_selection(1)
        viewport.init("/b", ["x", "y"])
        self.assertEqual((viewport.selected_index, viewport.scroll_offset), (0, 0))
        self.assertEqual(viewport.current_selected(), "x")
        self.assertEqual(viewport.header, "/b")

    def test_shrinking_terminal_restores_window_on_render(self) -> None:
        screen = RecordingScreen(rows=20, cols=40)
        viewport = Viewport(screen)
        viewport.init("/tmp", _lines(30))
        for _ in range(12):
            viewport.move_selection(1)

        screen.size_value = (6, 40)
        viewport.render()

        self.assertEqual(viewport.selected_index, 12)
        _assert_window_invariant(self, viewport)

    def test_geometry_is_recomputed_per_query(self) -> None:
        screen = RecordingScreen(rows=24, cols=80)
        viewport = Viewport(screen)
        self.assertEqual(viewport.preview_height(), 20)
        self.assertEqual(viewport.text_view_size(), (22, 37))

        screen.size_value = (12, 40)
        self.assertEqual(viewport.preview_height(), 8)
        self.assertEqual(viewport.text_view_size(), (10, 17))
        self.assertEqual(viewport.preview_width(), 16)


class RenderTests(unittest.TestCase):
    def test_header_is_truncated_to_left_pane(self) -> None:
        screen = RecordingScreen(rows=10, cols=20)
        viewport = Viewport(screen)
        viewport.display("/very/long/header/path", ["a"], [])

        self.assertEqual(screen.row_text(0)[:10], "/very/long")
        self.assertEqual(screen.row_text(0)[10:].strip(), "")

    def test_caret_and_directory_color(self) -> None:
        screen = RecordingScreen(rows=10, cols=40)
        viewport = Viewport(screen)
        viewport.display("/home/user", ["../", "Documents/", "notes.txt"], [])
        viewport.move_selection(1)
        viewport.render()

        self.assertEqual(screen.cell(CARET_X, 2).ch, CARET)
        self.assertEqual(screen.cell(CARET_X, 1).ch, " ")
        self.assertEqual(screen.row_text(2)[FILE_X:FILE_X + 10], "Documents/")
        self.assertEqual(screen.cell(FILE_X, 2).style, BLUE)
        self.assertEqual(screen.cell(FILE_X, 3).style, DEFAULT)

    def test_only_visible_window_is_drawn(self) -> None:
        screen = RecordingScreen(rows=6, cols=40)
        viewport = Viewport(screen)
        viewport.display("/tmp", _lines(10), [])
        for _ in range(5):
            viewport.move_selection(1)
        viewport.render()

        self.assertEqual(viewport.scroll_offset, 2)
        self.assertEqual(screen.row_text(1)[FILE_X:FILE_X + 6], "entry2")
        self.assertEqual(screen.row_text(4)[FILE_X:FILE_X + 6], "entry5")
        self.assertEqual(screen.cell(CARET_X, 4).ch, CARET)

    def test_footer_lists_key_functions_that_fit(self) -> None:
        screen = RecordingScreen(rows=10, cols=80)
        viewport = Viewport(screen, key_functions=["up/down: move", "right/enter: open", "q: quit"])
        viewport.display("/tmp", ["a"], [])
        footer = screen.row_text(9)
        self.assertEqual(footer.strip(), "up/down: move, right/enter: open, q: quit")
        self.assertEqual(screen.cell(1, 9).style, CYAN)

        screen.size_value = (10, 30)
        viewport.render()
        footer = screen.row_text(9)
        self.assertEqual(footer.strip(), "up/down: move")

    def test_status_message_replaces_footer(self) -> None:
        screen = RecordingScreen(rows=10, cols=60)
        viewport = Viewport(screen)
        viewport.status_message = "/tmp/gone: No such file or directory"
        viewport.display("/tmp", ["a"], [])
        self.assertIn("/tmp/gone: No such file", screen.row_text(9))
        self.assertNotIn("quit", screen.row_text(9))

    def test_preview_box_geometry(self) -> None:
        screen = RecordingScreen(rows=10, cols=40)
        viewport = Viewport(screen)
        viewport.display("/tmp", ["a"], [])

        self.assertEqual(screen.cell(21, 1).ch, "┌")
        self.assertEqual(screen.cell(38, 1).ch, "┐")
        self.assertEqual(screen.cell(21, 8).ch, "└")
        self.assertEqual(screen.cell(38, 8).ch, "┘")
        self.assertEqual(screen.cell(21, 4).ch, "│")
        self.assertEqual(screen.cell(30, 8).ch, "─")

    def test_preview_lines_are_clipped_not_wrapped(self) -> None:
        screen = RecordingScreen(rows=10, cols=40)
        viewport = Viewport(screen)
        preview = ["0123456789abcdefghij"] + [f"line{idx}" for idx in range(1, 12)]
        viewport.display("/tmp", ["a"], preview)

        self.assertEqual(screen.row_text(PREVIEW_Y)[22:38], "0123456789abcdef")
        self.assertEqual(screen.cell(38, PREVIEW_Y).ch, "│")
        self.assertEqual(screen.row_text(PREVIEW_Y + 5)[22:27], "line5")
        self.assertEqual(screen.cell(22, 8).ch, "─")

    def test_permission_denied_preview_is_highlighted(self) -> None:
        screen = RecordingScreen(rows=10, cols=60)
        viewport = Viewport(screen)
        viewport.display("/tmp", ["locked/"], [PERMISSION_DENIED])
        self.assertEqual(screen.cell(32, PREVIEW_Y).style, BG_RED)

    def test_colored_preview_keeps_styles_in_cells(self) -> None:
        screen = RecordingScreen(rows=10, cols=60)
        viewport = Viewport(screen)
        viewport.display("/tmp", ["a.py"], ["\033[38;5;197mdef\033[39m x"])
        self.assertEqual(screen.row_text(PREVIEW_Y)[32:37], "def x")
        self.assertEqual(screen.cell(32, PREVIEW_Y).style, "\033[38;5;197m")
        self.assertEqual(screen.cell(35, PREVIEW_Y).style, DEFAULT)

    def test_render_is_idempotent(self) -> None:
        screen = RecordingScreen(rows=12, cols=50)
        viewport = Viewport(screen)
        viewport.display("/tmp", _lines(20), ["preview"])
        viewport.render()
        viewport.render(["preview"])
        self.assertEqual(len(screen.frames), 3)
        self.assertEqual(screen.frames[0], screen.frames[1])
        self.assertEqual(screen.frames[1], screen.frames[2])

    def test_control_bytes_in_names_are_escaped(self) -> None:
        screen = RecordingScreen(rows=10, cols=60)
        viewport = Viewport(screen)
        viewport.display("/tmp", ["bad\x1b[2Jname"], [])
        self.assertEqual(screen.row_text(1)[FILE_X:FILE_X + 15], "bad\\x1b[2Jname ")


if __name__ == "__main__":
    unittest.main()
