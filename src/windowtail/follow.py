"""Follow mode: keep a window live while the file grows.

Each poll cycle reads whatever was appended since the previous cycle from the
same open stream, reconciles it with the last line seen so far and hands the
renumbered batch to a renderer. A background watcher only raises a "changed"
flag; the loop consumes it with check-and-clear and paces itself to a fixed
polling rate.
"""
from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from typing import IO, Any, Callable, List, Optional, Tuple

from .logutil import get_logger
from .position import Direction, FromBegin, FromEnd
from .scanner import TERMINATORS, Line, ScanError, scan_observed, scan_window
from .window import Window

Renderer = Callable[[List[Line]], None]


def _boundary(batch: List[Line], direction: Direction) -> int:
    """Position in ``batch`` of the line read first (adjacent to older content)."""
    return 0 if direction is Direction.TOP_TO_BOTTOM else len(batch) - 1


def _newest(batch: List[Line], direction: Direction) -> Line:
    return batch[-1] if direction is Direction.TOP_TO_BOTTOM else batch[0]


def reconcile(
    previous_last: Optional[Line],
    batch: List[Line],
    direction: Direction = Direction.TOP_TO_BOTTOM,
) -> Tuple[List[Line], Optional[Line]]:
    """Renumber a freshly scanned ``batch`` against ``previous_last``.

    If ``previous_last`` was unterminated and the batch begins with nothing but
    the rest of its terminator, that terminator is appended to
    ``previous_last.content`` in place and dropped from the batch. Returns the
    adjusted batch and the new last line (``previous_last`` when nothing new
    was read).
    """
    adjusted = list(batch)
    shift = 0
    if previous_last is not None:
        shift = previous_last.index
        if adjusted and not previous_last.terminated:
            boundary = _boundary(adjusted, direction)
            if adjusted[boundary].content in TERMINATORS:
                previous_last.content += adjusted.pop(boundary).content
                shift -= 1
    adjusted = [Line(line.index + shift, line.content) for line in adjusted]
    if not adjusted:
        return adjusted, previous_last
    return adjusted, _newest(adjusted, direction)


@dataclass
class TailState:
    stream: IO[Any]
    last: Optional[Line] = None

    def update(self, batch: List[Line], direction: Direction = Direction.TOP_TO_BOTTOM) -> List[Line]:
        adjusted, self.last = reconcile(self.last, batch, direction)
        return adjusted


def skip_to_end(state: TailState, encoding: str = "utf-8") -> None:
    """Consume the rest of the stream without output, keeping numbering intact."""
    tail_only = Window(FromEnd(1), FromEnd(0))
    state.update(scan_window(state.stream, tail_only, encoding=encoding))


class FramePacer:
    """Sleep out whatever is left of the current frame at ``rate_hz``."""

    def __init__(
        self,
        rate_hz: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate_hz <= 0:
            raise ValueError(f"rate must be positive, got {rate_hz!r}")
        self.frame = 1.0 / rate_hz
        self._clock = clock
        self._sleep = sleep
        self._frame_start = clock()

    def sleep_remaining_frame(self) -> float:
        remaining = self.frame - (self._clock() - self._frame_start)
        if remaining > 0:
            self._sleep(remaining)
        self._frame_start = self._clock()
        return max(0.0, remaining)


class ChangeWatcher:
    """Poll a path's size and mtime from a daemon thread; set ``changed`` on difference."""

    def __init__(self, path: str, changed: threading.Event, interval: float = 0.1) -> None:
        self.path = path
        self.changed = changed
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._signature = self._stat()

    def _stat(self) -> Optional[Tuple[int, int]]:
        try:
            st = os.stat(self.path)
        except OSError:
            return None
        return st.st_size, st.st_mtime_ns

    def check(self) -> bool:
        signature = self._stat()
        if signature is not None and signature != self._signature:
            self._signature = signature
            self.changed.set()
            return True
        return False

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.check()

    def start(self) -> "ChangeWatcher":
        if self._thread is not None:
            raise RuntimeError("watcher already started")
        self._thread = threading.Thread(target=self._loop, name="windowtail-watcher", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None


class Follower:
    """Own the open stream and its TailState for the lifetime of a follow session."""

    def __init__(
        self,
        stream: IO[Any],
        direction: Direction,
        render: Renderer,
        changed: threading.Event,
        pacer: FramePacer,
        encoding: str = "utf-8",
    ) -> None:
        self.state = TailState(stream)
        self.direction = direction
        self.render = render
        self.changed = changed
        self.pacer = pacer
        self.encoding = encoding
        self.log = get_logger()

    def prime(self, window: Window) -> List[Line]:
        """Read the initial window and leave the cursor at end of stream.

        A failure while skipping past the window keeps the window lines: the
        part of the remainder that was read is counted into the state and the
        change flag is raised so the follow loop retries the rest.
        """
        lines, last = scan_observed(self.state.stream, window, encoding=self.encoding)
        self.state.last = last
        try:
            skip_to_end(self.state, encoding=self.encoding)
        except ScanError as exc:
            self.log.warning("read failed at line %d after the initial window: %s", exc.error_line, exc.__cause__ or exc)
            self.state.update(exc.lines)
            self.changed.set()
        return lines

    def poll_once(self) -> List[Line]:
        if not self.changed.is_set():
            return []
        self.changed.clear()
        everything = Window(FromBegin(0), FromEnd(0), self.direction)
        try:
            batch = scan_window(self.state.stream, everything, encoding=self.encoding)
        except ScanError as exc:
            self.log.warning("read failed at line %d while following: %s", exc.error_line, exc.__cause__ or exc)
            # lines before the failure were consumed from the stream
            batch = exc.lines
            # retry the remainder next cycle
            self.changed.set()
        adjusted = self.state.update(batch, self.direction)
        if adjusted:
            self.log.debug("read %d new line(s); last index %d", len(adjusted), self.state.last.index)
            self.render(adjusted)
        return adjusted

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        while stop_event is None or not stop_event.is_set():
            self.poll_once()
            self.pacer.sleep_remaining_frame()


__all__ = [
    "ChangeWatcher",
    "Follower",
    "FramePacer",
    "TailState",
    "reconcile",
    "skip_to_end",
]
