"""Semantic events and the producer thread that emits them.

The producer is the only reader of stdin. It polls for keys with a short
timeout so it can also notice terminal resizes, and pushes events into a
single order-preserving queue consumed by the controller.
"""

from __future__ import annotations

import contextlib
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Queue
from typing import Union

from .debug import get_logger
from .input import read_key
from .screen import terminal_size

POLL_INTERVAL_MS = 50
SUSPEND_ACK_SECONDS = 2.0

DOWN = 1
UP = -1

log = get_logger("events")


@dataclass(frozen=True)
class Reselect:
    direction: int


@dataclass(frozen=True)
class Select:
    pass


@dataclass(frozen=True)
class ToggleHidden:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Resize:
    pass


@dataclass(frozen=True)
class DriverError:
    """The terminal driver reported a failure; always fatal."""

    message: str


Event = Union[Reselect, Select, ToggleHidden, Quit, Resize, DriverError]

KEY_EVENTS: dict[str, Event] = {
    "UP": Reselect(UP),
    "DOWN": Reselect(DOWN),
    "RIGHT": Select(),
    "ENTER_CR": Select(),
    "ENTER_LF": Select(),
    "q": Quit(),
    "Q": Quit(),
    "a": ToggleHidden(),
    "A": ToggleHidden(),
}


def translate_key(key: str) -> Event | None:
    """Map a key token to its event; unbound keys yield ``None``."""
    return KEY_EVENTS.get(key)


class EventSource:
    """Producer side of the event queue.

    ``suspended()`` parks the producer so another process can own stdin; the
    producer acknowledges before the block body runs.
    """

    def __init__(
        self,
        stdin_fd: int,
        *,
        key_reader: Callable[..., str] = read_key,
        size_probe: Callable[[], tuple[int, int]] = terminal_size,
        poll_interval_ms: int = POLL_INTERVAL_MS,
    ) -> None:
        self.stdin_fd = stdin_fd
        self._read_key = key_reader
        self._size_probe = size_probe
        self._poll_interval_ms = poll_interval_ms
        self._queue: Queue[Event] = Queue()
        self._active = threading.Event()
        self._active.set()
        self._parked = threading.Event()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name="peekfm-event-source",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        self._active.set()

    def put(self, event: Event) -> None:
        self._queue.put(event)

    def get(self, timeout: float | None = None) -> Event:
        """Block until the next event is available."""
        return self._queue.get(timeout=timeout)

    def _run(self) -> None:
        last_size = self._size_probe()
        while not self._stopped.is_set():
            if not self._active.is_set():
                self._parked.set()
                self._active.wait()
                # Anything may have happened to the terminal while parked.
                last_size = self._size_probe()
                continue
            try:
                key = self._read_key(self.stdin_fd, timeout_ms=self._poll_interval_ms)
                size = self._size_probe()
            except (OSError, EOFError) as exc:
                log.error("terminal input failed: %s", exc)
                self._queue.put(DriverError(str(exc) or type(exc).__name__))
                return
            if size != last_size:
                last_size = size
                self._queue.put(Resize())
            event = translate_key(key) if key else None
            if event is not None:
                self._queue.put(event)

    def pause(self) -> None:
        """Stop reading stdin and wait for the producer to acknowledge."""
        self._parked.clear()
        self._active.clear()
        thread = self._thread
        if thread is None or not thread.is_alive():
            return
        if not self._parked.wait(SUSPEND_ACK_SECONDS):
            log.warning("event source did not park within %.1fs", SUSPEND_ACK_SECONDS)

    def resume(self) -> None:
        self._active.set()

    @contextlib.contextmanager
    def suspended(self):
        self.pause()
        try:
            yield
        finally:
            self.resume()
