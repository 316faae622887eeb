"""Line positions anchored to either end of a stream.

A position never knows the stream length. ``FromBegin(n)`` counts ``n`` lines
down from the top, ``FromEnd(n)`` counts ``n`` lines up from the bottom:

    FromBegin(0) -> boundary before the first line
    FromEnd(0)   -> boundary after the last line
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True, order=True)
class FromBegin:
    offset: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")


@dataclass(frozen=True, order=True)
class FromEnd:
    offset: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")


Position = Union[FromBegin, FromEnd]


class Direction(Enum):
    TOP_TO_BOTTOM = "top-to-bottom"
    BOTTOM_TO_TOP = "bottom-to-top"

    def reversed(self) -> "Direction":
        if self is Direction.TOP_TO_BOTTOM:
            return Direction.BOTTOM_TO_TOP
        return Direction.TOP_TO_BOTTOM


__all__ = ["FromBegin", "FromEnd", "Position", "Direction"]
