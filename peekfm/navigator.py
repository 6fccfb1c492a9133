"""Path navigator: a validated current-directory cursor.

Every move either commits a directory that was readable at the moment of the
call or raises without touching the cursor. Listings are returned in raw
``os.scandir`` order; no sorting is applied.
"""

from __future__ import annotations

import contextlib
import os
import stat
import subprocess
from collections.abc import Callable, Sequence
from typing import ContextManager, NoReturn

from .debug import get_logger
from .errors import (
    ExternalProcessFailure,
    NotADirectory,
    PathNotFound,
    PermissionDenied,
    translate_os_error,
)

SEP = os.sep
CURRENT_DIR = "."
PARENT_DIR = ".."
PARENT_ENTRY = PARENT_DIR + SEP

PERMISSION_DENIED = "PERMISSION DENIED"
DIRECTORY_IS_EMPTY = "DIRECTORY IS EMPTY"
NO_LISTABLE_CONTENTS = "NO CONTENTS TO DISPLAY IN LIST MODE"
NOT_A_REGULAR_FILE = "NOT A REGULAR FILE"
SENTINEL_LINES = frozenset({PERMISSION_DENIED, DIRECTORY_IS_EMPTY, NO_LISTABLE_CONTENTS, NOT_A_REGULAR_FILE})

MAX_PREVIEW_LINE_CHARS = 4096
MAX_PREVIEW_CHARS = 64 * 1024

log = get_logger("navigator")


def _raise_os_error(exc: OSError, path: str) -> NoReturn:
    translated = translate_os_error(exc, path)
    if translated is exc:
        raise exc
    raise translated from exc


def is_directory_entry(line: str) -> bool:
    """Whether a display line names a directory (trailing separator marker)."""
    return line.endswith(SEP)


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def directory_exists(path: str) -> None:
    """Raise ``PathNotFound``/``NotADirectory`` unless ``path`` is a directory."""
    try:
        info = os.stat(path)
    except OSError as exc:
        _raise_os_error(exc, path)
    if not stat.S_ISDIR(info.st_mode):
        raise NotADirectory(f"{path}: not a directory", path)


def _ensure_readable(path: str) -> None:
    if not os.access(path, os.R_OK | os.X_OK):
        raise PermissionDenied(f"{path}: permission denied", path)


def _entry_is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _display_name(entry: os.DirEntry) -> str:
    return entry.name + SEP if _entry_is_dir(entry) else entry.name


def _strip_one_separator(name: str) -> str:
    if len(name) > 1 and name.endswith(SEP):
        return name[:-1]
    return name


class Navigator:
    """Current-directory cursor plus listing/preview queries relative to it."""

    def __init__(self, start_path: str = "~", viewer_command: Sequence[str] = ("vi",)) -> None:
        self.current_path = ""
        self.viewer_command = tuple(viewer_command)
        self.move_absolute(start_path)

    def get_path(self) -> str:
        """The cursor with exactly one trailing separator."""
        if self.current_path.endswith(SEP):
            return self.current_path
        return self.current_path + SEP

    def at_root(self) -> bool:
        return os.path.dirname(self.current_path) == self.current_path

    def _commit(self, path: str) -> None:
        log.debug("cursor %s -> %s", self.current_path or "<unset>", path)
        self.current_path = path

    def move_absolute(self, path: str) -> None:
        """Move to ``~``-prefixed or absolute ``path``."""
        expanded = os.path.expanduser(path) if path.startswith("~") else path
        if not expanded or not os.path.isabs(expanded):
            raise PathNotFound(f"{path or '<empty>'}: not an absolute path", path)
        candidate = os.path.normpath(expanded)
        # POSIX normpath keeps exactly two leading separators.
        if candidate.startswith(SEP + SEP):
            candidate = SEP + candidate.lstrip(SEP)
        directory_exists(candidate)
        _ensure_readable(candidate)
        self._commit(candidate)

    def move_one(self, name: str) -> None:
        """Move to the child directory ``name``, or to the parent for ``..``.

        ``.`` and ``..`` at the filesystem root are no-ops, not errors.
        """
        name = _strip_one_separator(name)
        if name in {"", CURRENT_DIR}:
            return
        if name == PARENT_DIR:
            if self.at_root():
                return
            cut = self.current_path.rfind(SEP)
            parent = self.current_path[:cut] if cut > 0 else self.current_path[: cut + 1]
            self._commit(parent or SEP)
            return
        if SEP in name:
            raise PathNotFound(f"{name}: not a single path segment", name)

        next_path = self.get_path() + name
        directory_exists(next_path)
        _ensure_readable(next_path)
        self._commit(next_path)

    def move_multiple(self, path: str) -> None:
        """Apply ``move_one`` to each separator-delimited segment of ``path``.

        Stops at the first failing segment. Segments applied before it stay
        applied; the cursor is not rolled back.
        """
        for segment in _strip_one_separator(path).split(SEP):
            self.move_one(segment)

    def _scan(self, path: str, include_hidden: bool, want: Callable[[os.DirEntry], bool]) -> list[str]:
        entries: list[str] = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    if not include_hidden and is_hidden(entry.name):
                        continue
                    if want(entry):
                        entries.append(_display_name(entry))
        except OSError as exc:
            _raise_os_error(exc, path)
        return entries

    def list(self, include_hidden: bool) -> list[str]:
        """List the current directory, prefixed with ``../`` unless at the root."""
        entries = [] if self.at_root() else [PARENT_ENTRY]
        entries.extend(self._scan(self.current_path, include_hidden, lambda _entry: True))
        return entries

    def list_directories(self, include_hidden: bool) -> list[str]:
        entries = [] if self.at_root() else [PARENT_ENTRY]
        entries.extend(self._scan(self.current_path, include_hidden, _entry_is_dir))
        return entries

    def list_files(self, include_hidden: bool) -> list[str]:
        return self._scan(self.current_path, include_hidden, lambda entry: not _entry_is_dir(entry))

    def list_first_n(self, name: str, n: int, include_hidden: bool) -> list[str]:
        """Preview listing of subdirectory ``name``: at most ``n`` entries.

        Permission problems and empty directories come back as sentinel lines.
        """
        if n <= 0:
            return []
        target = self.get_path() + _strip_one_separator(name)
        contents: list[str] = []
        seen_any = False
        try:
            with os.scandir(target) as it:
                for entry in it:
                    seen_any = True
                    if not include_hidden and is_hidden(entry.name):
                        continue
                    contents.append(_display_name(entry))
                    if len(contents) >= n:
                        break
        except PermissionError:
            return [PERMISSION_DENIED]
        except OSError as exc:
            _raise_os_error(exc, target)
        if not seen_any:
            return [DIRECTORY_IS_EMPTY]
        if not contents:
            return [NO_LISTABLE_CONTENTS]
        return contents

    def read_first_n(self, name: str, n: int) -> list[str]:
        """Return up to ``n`` lines of file ``name`` without line terminators.

        Only regular files are opened; pipes, devices and sockets yield the
        ``NOT A REGULAR FILE`` sentinel. At most ``MAX_PREVIEW_CHARS`` are read.
        """
        if n <= 0:
            return []
        target = self.get_path() + name
        try:
            info = os.stat(target)
        except OSError as exc:
            _raise_os_error(exc, target)
        if not stat.S_ISREG(info.st_mode):
            return [NOT_A_REGULAR_FILE]

        lines: list[str] = []
        budget = MAX_PREVIEW_CHARS
        try:
            with open(target, encoding="utf-8", errors="replace") as handle:
                while len(lines) < n and budget > 0:
                    line = handle.readline(min(MAX_PREVIEW_LINE_CHARS, budget))
                    if not line:
                        break
                    budget -= len(line)
                    if line.endswith("\n"):
                        lines.append(line[:-1])
                        continue
                    lines.append(line)
                    # Over-long line: discard the remainder up to its terminator.
                    while line and not line.endswith("\n") and budget > 0:
                        line = handle.readline(min(MAX_PREVIEW_LINE_CHARS, budget))
                        budget -= len(line)
        except OSError as exc:
            _raise_os_error(exc, target)
        return lines

    def view_externally(
        self,
        name: str,
        handoff: Callable[[], ContextManager[object]] = contextlib.nullcontext,
    ) -> None:
        """Run the viewer on ``name`` and block until it exits.

        ``handoff`` brackets the child process; the controller uses it to give
        the viewer a cooked terminal and to park the input reader.
        """
        target = self.get_path() + name
        command = [*self.viewer_command, target]
        log.info("launching viewer: %s", command)
        with handoff():
            try:
                completed = subprocess.run(command, check=False)
            except OSError as exc:
                raise ExternalProcessFailure(f"cannot launch {command[0]}: {exc}", target) from exc
        if completed.returncode != 0:
            log.warning("viewer %s exited with status %d", command[0], completed.returncode)
            raise ExternalProcessFailure(
                f"{command[0]} exited with status {completed.returncode}",
                target,
                completed.returncode,
            )
