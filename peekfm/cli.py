"""Command-line front door for peekfm.

Parses CLI options, builds the session config, and starts the browser.
Fatal browser errors become a non-zero exit with the error message.
"""

from __future__ import annotations

import argparse
import os

from .config import build_config
from .controller import run_browser
from .debug import configure_logging, get_logger
from .errors import BrowserError


def _start_path(raw: str | None) -> str:
    if raw is None:
        return "~"
    if raw.startswith("~"):
        return raw
    return os.path.abspath(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peekfm",
        description="Browse directories in the terminal with a live preview pane.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to start in. Defaults to your home directory.")
    parser.add_argument(
        "-a",
        "--all",
        dest="show_hidden",
        action="store_true",
        default=None,
        help="Start with hidden entries shown (toggle with 'a').",
    )
    parser.add_argument("--viewer", default=None, help="Command used to open files (default: $VISUAL, $EDITOR, vi).")
    parser.add_argument("--style", default=None, help="Pygments style name for file previews.")
    parser.add_argument(
        "--no-color",
        dest="no_color",
        action="store_true",
        default=None,
        help="Disable syntax highlighting in file previews.",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    parser.add_argument("--log-file", default=None, help="Log file path (default: $PEEKFM_LOG or a temp file).")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run an interactive session."""
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug, log_path=args.log_file)
    log = get_logger("cli")

    config = build_config(
        _start_path(args.path),
        viewer=args.viewer,
        show_hidden=args.show_hidden,
        style=args.style,
        no_color=args.no_color,
    )
    log.debug("config: %s", config)
    try:
        run_browser(config)
    except BrowserError as exc:
        log.error("fatal: %s", exc)
        raise SystemExit(f"peekfm: {exc}") from exc
    except Exception:
        log.exception("unexpected failure")
        raise


if __name__ == "__main__":
    main()
