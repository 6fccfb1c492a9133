"""Preview text sanitization and syntax highlighting.

File previews are escaped first so control bytes can never reach the terminal,
then optionally colorized with Pygments one line per input line.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .config import DEFAULT_STYLE

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


@lru_cache(maxsize=None)
def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=None)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=_normalize_style(style))


def _lexer_for(filename: str, source: str):
    try:
        return get_lexer_for_filename(filename, source, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


def colorize_lines(lines: list[str], filename: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Highlight ``lines`` as a fragment of ``filename``.

    Always returns exactly ``len(lines)`` lines.
    """
    if not lines:
        return []
    source = "\n".join(lines)
    rendered = pygments_highlight(source, _lexer_for(filename, source), _formatter_for_style(style))
    out = rendered.split("\n")[: len(lines)]
    if len(out) < len(lines):
        out.extend(lines[len(out):])
    return out


def preview_file_lines(lines: list[str], filename: str, style: str, no_color: bool) -> list[str]:
    safe = [sanitize_terminal_text(line) for line in lines]
    if no_color:
        return safe
    return colorize_lines(safe, filename, style)
