"""Window resolution: turn (start, stop, direction) into forward-scan bounds.

The scanner only ever reads forward, so a bottom-to-top request is flipped
into the equivalent top-to-bottom bounds here and the scanner reverses its
output at the end. Emptiness is decided from the anchors alone, before any
I/O, whenever both bounds share an anchor. Mixed anchors depend on the
stream length and are left to the scanner.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .position import Direction, FromBegin, FromEnd, Position


@dataclass(frozen=True)
class Window:
    start: Position
    stop: Position
    direction: Direction = Direction.TOP_TO_BOTTOM

    @property
    def is_empty(self) -> bool:
        return _degenerate(self.start, self.stop)

    @property
    def capacity(self) -> Optional[int]:
        """Upper bound on lines the scanner has to retain (None = unbounded)."""
        if isinstance(self.start, FromEnd):
            return self.start.offset
        return None


def _degenerate(start: Position, stop: Position) -> bool:
    if isinstance(start, FromBegin) and isinstance(stop, FromBegin):
        return start.offset >= stop.offset
    if isinstance(start, FromEnd) and isinstance(stop, FromEnd):
        return start.offset <= stop.offset
    return False


def resolve(start: Position, stop: Position, direction: Direction = Direction.TOP_TO_BOTTOM) -> Window:
    """Canonicalize a request into scan order.

    For ``BOTTOM_TO_TOP`` the bounds are swapped, except when both are
    ``FromBegin`` and already ascending: a reversed head stays anchored at the
    top of the stream.
    """
    if direction is Direction.BOTTOM_TO_TOP:
        keep = (
            isinstance(start, FromBegin)
            and isinstance(stop, FromBegin)
            and start.offset <= stop.offset
        )
        if not keep:
            start, stop = stop, start
    return Window(start, stop, direction)


def initial_bounds(n: int, head: bool = False) -> Tuple[Position, Position, Direction]:
    """Bounds for "first n lines" (head) or "last n lines" (tail)."""
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise ValueError(f"line count must be a positive integer, got {n!r}")
    if head:
        return FromBegin(0), FromBegin(n), Direction.TOP_TO_BOTTOM
    return FromEnd(0), FromEnd(n), Direction.BOTTOM_TO_TOP


__all__ = ["Window", "resolve", "initial_bounds"]
