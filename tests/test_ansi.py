"""Regression tests for ANSI measurement and style splitting.

These protect the cell grid from escape sequences leaking into widths.
"""

import unittest

from peekfm import ansi as ansi_mod


class MeasurementTests(unittest.TestCase):
    def test_escape_sequences_have_no_width(self) -> None:
        self.assertEqual(ansi_mod.display_width("\x1b[31mred\x1b[0m"), 3)

    def test_wide_and_combining_characters(self) -> None:
        self.assertEqual(ansi_mod.display_width("日本"), 4)
        self.assertEqual(ansi_mod.display_width("é"), 1)

    def test_tabs_expand_to_next_stop(self) -> None:
        self.assertEqual(ansi_mod.display_width("ab\tc"), 9)


class StyledCharsTests(unittest.TestCase):
    def test_styles_accumulate_until_reset(self) -> None:
        chars = list(ansi_mod.styled_chars("\x1b[1m\x1b[31mab\x1b[39;49;00mc"))
        self.assertEqual(
            chars,
            [
                ("a", "\x1b[1m\x1b[31m", 1),
                ("b", "\x1b[1m\x1b[31m", 1),
                ("c", "", 1),
            ],
        )

    def test_leading_reset_starts_a_fresh_style(self) -> None:
        chars = list(ansi_mod.styled_chars("\x1b[1mx\x1b[0;32my"))
        self.assertEqual(chars[1], ("y", "\x1b[32m", 1))

    def test_non_sgr_sequences_are_dropped(self) -> None:
        chars = list(ansi_mod.styled_chars("a\x1b[2Jb"))
        self.assertEqual([ch for ch, _sgr, _w in chars], ["a", "b"])

    def test_tabs_become_spaces_and_wide_chars_report_width(self) -> None:
        chars = list(ansi_mod.styled_chars("\t日"))
        self.assertEqual([ch for ch, _sgr, _w in chars], [" "] * 8 + ["日"])
        self.assertEqual(chars[-1][2], 2)


if __name__ == "__main__":
    unittest.main()
