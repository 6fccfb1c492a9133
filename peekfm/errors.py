"""Error taxonomy for the browser.

Navigation failures are tolerated by the controller; terminal failures and
anything outside this module are fatal.
"""

from __future__ import annotations


class BrowserError(Exception):
    """Base class for every error the browser raises on purpose."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class NavigationError(BrowserError):
    """A move could not be applied; the cursor is unchanged."""


class PathNotFound(NavigationError):
    pass


class NotADirectory(NavigationError):
    pass


class PermissionDenied(BrowserError):
    pass


class EmptyDirectory(BrowserError):
    """Carrier for the empty-directory sentinel; never fatal."""


class ExternalProcessFailure(BrowserError):
    """The external viewer could not be launched or exited non-zero."""

    def __init__(self, message: str, path: str | None = None, returncode: int | None = None) -> None:
        super().__init__(message, path)
        self.returncode = returncode


class TerminalDriverFailure(BrowserError):
    pass


def translate_os_error(exc: OSError, path: str) -> Exception:
    """Map an ``OSError`` onto the browser taxonomy.

    Errors without a browser counterpart are returned unchanged so callers can
    re-raise them as-is.
    """
    detail = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return PathNotFound(f"{path}: {detail}", path)
    if isinstance(exc, NotADirectoryError):
        return NotADirectory(f"{path}: {detail}", path)
    if isinstance(exc, PermissionError):
        return PermissionDenied(f"{path}: {detail}", path)
    return exc


__all__ = [
    "BrowserError",
    "NavigationError",
    "PathNotFound",
    "NotADirectory",
    "PermissionDenied",
    "EmptyDirectory",
    "ExternalProcessFailure",
    "TerminalDriverFailure",
    "translate_os_error",
]
