"""Single forward pass over a line stream, keeping only the requested window.

The stream is never rewound. Lines are read one at a time with
``readline()`` so the caller's file cursor ends exactly after the last line
consumed; follow mode relies on that to pick up appended data on the next
call.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import IO, Any, Deque, List, Optional, Tuple, Union

from .position import Direction, FromBegin, FromEnd, Position
from .window import Window, resolve

TERMINATORS = ("\r\n", "\n")


@dataclass
class Line:
    index: int  # 1-based ordinal within the scan, not a byte offset
    content: str  # includes the trailing terminator when present

    @property
    def terminated(self) -> bool:
        return self.content.endswith("\n")


class ScanError(Exception):
    """A read failed mid-scan.

    ``lines`` holds everything retained before the failure, already in output
    order, so callers can still show it. ``error_line`` is the ordinal of the
    read that failed.
    """

    def __init__(self, lines: List[Line], error_line: int, message: Optional[str] = None) -> None:
        self.lines = lines
        self.error_line = error_line
        super().__init__(message or f"read failed at line {error_line} ({len(lines)} lines retained)")


def _decode(raw: Union[bytes, str], encoding: str) -> str:
    if isinstance(raw, bytes):
        return raw.decode(encoding, errors="replace")
    return raw


def _ordered(lines: List[Line], direction: Direction) -> List[Line]:
    if direction is Direction.BOTTOM_TO_TOP:
        lines.reverse()
    return lines


def scan_observed(stream: IO[Any], window: Window, encoding: str = "utf-8") -> Tuple[List[Line], Optional[Line]]:
    """Scan ``stream`` forward; return the selected lines and the last line read.

    ``window`` must already be in scan order (see :func:`windowtail.window.resolve`).
    The second item is the final line consumed from the stream whether or not
    the window kept it; follow mode numbers later reads from it.
    Raises :class:`ScanError` carrying the partial result when a read fails.
    """
    if window.is_empty:
        return [], None
    start, stop = window.start, window.stop
    retained: Deque[Line] = deque(maxlen=window.capacity)
    # A bottom-anchored start can only be settled at end of stream, so the
    # scan may stop early only when both bounds count from the top.
    early_stop = stop.offset if isinstance(start, FromBegin) and isinstance(stop, FromBegin) else None
    line_count = 0
    last_raw: Union[bytes, str, None] = None
    while True:
        if early_stop is not None and line_count >= early_stop:
            break
        try:
            raw = stream.readline()
        except (OSError, ValueError) as exc:
            raise ScanError(_ordered(list(retained), window.direction), line_count + 1) from exc
        if not raw:
            break
        line_count += 1
        last_raw = raw
        if isinstance(start, FromBegin) and line_count <= start.offset:
            continue
        if isinstance(stop, FromBegin) and line_count > stop.offset:
            continue
        retained.append(Line(line_count, _decode(raw, encoding)))

    lines = list(retained)
    if isinstance(start, FromEnd):
        lines = [line for line in lines if line.index > line_count - start.offset]
    if isinstance(stop, FromEnd) and stop.offset:
        lines = [line for line in lines if line.index <= line_count - stop.offset]
    last = Line(line_count, _decode(last_raw, encoding)) if last_raw is not None else None
    return _ordered(lines, window.direction), last


def scan_window(stream: IO[Any], window: Window, encoding: str = "utf-8") -> List[Line]:
    """Scan ``stream`` forward and return the lines ``window`` selects."""
    return scan_observed(stream, window, encoding=encoding)[0]


def scan(
    stream: IO[Any],
    start: Position,
    stop: Position,
    direction: Direction = Direction.TOP_TO_BOTTOM,
    encoding: str = "utf-8",
) -> List[Line]:
    """Resolve ``(start, stop, direction)`` and scan ``stream`` once."""
    return scan_window(stream, resolve(start, stop, direction), encoding=encoding)


__all__ = ["Line", "ScanError", "TERMINATORS", "scan", "scan_observed", "scan_window"]
