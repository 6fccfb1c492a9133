"""ANSI-aware text measurement and SGR splitting.

Escape sequences never count toward display width. ``styled_chars`` splits a
colorized line into characters paired with the SGR state active for each, which
is what the cell grid stores.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


_RESET_PARAMS = frozenset({"", "0", "00", "39", "49"})


def _merge_sgr(current: str, seq: str) -> str:
    params = seq[2:-1]
    parts = params.split(";")
    if all(part in _RESET_PARAMS for part in parts):
        return ""
    if parts[0] in {"0", "00"}:
        return f"\033[{';'.join(parts[1:])}m"
    return current + seq


def styled_chars(text: str) -> Iterator[tuple[str, str, int]]:
    """Yield ``(char, sgr, width)`` for each visible character of ``text``.

    ``sgr`` is the accumulated SGR prefix in effect (empty for default style).
    Non-SGR escape sequences are dropped, tabs are expanded to spaces.
    """
    sgr = ""
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if seq.endswith("m"):
                    sgr = _merge_sgr(sgr, seq)
                i = match.end()
                continue
        ch = text[i]
        i += 1
        if ch == "\t":
            for _ in range(char_display_width(ch, col)):
                yield " ", sgr, 1
                col += 1
            continue
        w = char_display_width(ch, col)
        if w == 0:
            continue
        yield ch, sgr, w
        col += w
