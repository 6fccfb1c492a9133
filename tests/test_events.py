"""Event translation and producer-thread tests."""

from __future__ import annotations

import threading
import unittest

from peekfm.events import (
    DOWN,
    UP,
    DriverError,
    EventSource,
    Quit,
    Reselect,
    Resize,
    Select,
    ToggleHidden,
    translate_key,
)


class TranslateKeyTests(unittest.TestCase):
    def test_bound_keys(self) -> None:
        self.assertEqual(translate_key("UP"), Reselect(UP))
        self.assertEqual(translate_key("DOWN"), Reselect(DOWN))
        for key in ("RIGHT", "ENTER_CR", "ENTER_LF"):
            self.assertEqual(translate_key(key), Select())
        self.assertEqual(translate_key("q"), Quit())
        self.assertEqual(translate_key("a"), ToggleHidden())

    def test_unbound_keys_are_ignored(self) -> None:
        for key in ("LEFT", "ESC", "x", "TAB", ""):
            self.assertIsNone(translate_key(key))


class ScriptedKeys:
    """Key reader that replays a script, then raises ``EOFError``."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = list(keys)
        self.calls = 0

    def __call__(self, _fd: int, timeout_ms: int | None = None) -> str:
        self.calls += 1
        if not self.keys:
            raise EOFError("terminal input closed")
        return self.keys.pop(0)


def _drain(source: EventSource) -> list:
    events = []
    while True:
        event = source.get(timeout=2)
        events.append(event)
        if isinstance(event, DriverError):
            return events


class EventSourceTests(unittest.TestCase):
    def test_keys_become_events_in_order(self) -> None:
        source = EventSource(
            -1,
            key_reader=ScriptedKeys(["DOWN", "", "x", "RIGHT", "a", "q"]),
            size_probe=lambda: (24, 80),
        )
        source.start()
        events = _drain(source)
        source.stop()

        self.assertEqual(events[:-1], [Reselect(DOWN), Select(), ToggleHidden(), Quit()])
        self.assertIsInstance(events[-1], DriverError)
        self.assertIn("closed", events[-1].message)

    def test_size_change_emits_resize_once(self) -> None:
        sizes = iter([(24, 80), (24, 80), (30, 100), (30, 100)])
        source = EventSource(
            -1,
            key_reader=ScriptedKeys(["", "", "DOWN"]),
            size_probe=lambda: next(sizes, (30, 100)),
        )
        source.start()
        events = _drain(source)
        source.stop()

        self.assertEqual(events[:-1], [Resize(), Reselect(DOWN)])

    def test_read_failure_is_reported_as_driver_error(self) -> None:
        def failing_reader(_fd: int, timeout_ms: int | None = None) -> str:
            raise OSError(5, "Input/output error")

        source = EventSource(-1, key_reader=failing_reader, size_probe=lambda: (24, 80))
        source.start()
        event = source.get(timeout=2)
        source.stop()

        self.assertIsInstance(event, DriverError)

    def test_suspended_parks_reader_until_resumed(self) -> None:
        release = threading.Event()
        reads_while_parked: list[int] = []
        parked = threading.Event()

        def reader(_fd: int, timeout_ms: int | None = None) -> str:
            if parked.is_set():
                reads_while_parked.append(1)
            if release.wait(0.01):
                raise EOFError("done")
            return ""

        source = EventSource(-1, key_reader=reader, size_probe=lambda: (24, 80))
        source.start()
        with source.suspended():
            parked.set()
            release.wait(0.1)
            parked.clear()
        release.set()
        event = source.get(timeout=2)
        source.stop()

        self.assertEqual(reads_while_parked, [])
        self.assertIsInstance(event, DriverError)

    def test_pause_without_thread_returns_immediately(self) -> None:
        source = EventSource(-1)
        with source.suspended():
            pass
        source.put(Quit())
        self.assertEqual(source.get(timeout=1), Quit())


if __name__ == "__main__":
    unittest.main()
