"""Runtime configuration.

Options come from the command line, an optional read-only JSON file, and the
environment. The file is never written back.
"""

from __future__ import annotations

import json
import os
import shlex
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path.home() / ".config" / "peekfm.json"
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class BrowserConfig:
    """Settings fixed for the lifetime of one browser session."""

    start_path: str
    viewer_command: tuple[str, ...]
    show_hidden: bool = False
    style: str = DEFAULT_STYLE
    no_color: bool = False


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _config_str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _config_bool(data: dict[str, object], key: str) -> bool | None:
    value = data.get(key)
    return value if isinstance(value, bool) else None


def default_viewer() -> str:
    if os.name == "nt":
        return "notepad"
    return "vi"


def resolve_viewer_command(explicit: str | None, data: dict[str, object]) -> tuple[str, ...]:
    """Pick the external viewer: flag, config file, ``$VISUAL``, ``$EDITOR``, platform default."""
    candidates = (
        explicit,
        _config_str(data, "viewer"),
        os.environ.get("VISUAL"),
        os.environ.get("EDITOR"),
    )
    for candidate in candidates:
        if candidate is None:
            continue
        parts = shlex.split(candidate)
        if parts:
            return tuple(parts)
    return (default_viewer(),)


def build_config(
    start_path: str,
    *,
    viewer: str | None = None,
    show_hidden: bool | None = None,
    style: str | None = None,
    no_color: bool | None = None,
) -> BrowserConfig:
    """Merge command-line values over the config file.

    ``None`` means "not given on the command line".
    """
    data = load_config()
    if show_hidden is None:
        show_hidden = _config_bool(data, "show_hidden") or False
    if no_color is None:
        no_color = _config_bool(data, "no_color") or False
    if style is None:
        style = _config_str(data, "style") or DEFAULT_STYLE
    return BrowserConfig(
        start_path=start_path,
        viewer_command=resolve_viewer_command(viewer, data),
        show_hidden=show_hidden,
        style=style,
        no_color=no_color,
    )
