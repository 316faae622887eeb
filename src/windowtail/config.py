from dataclasses import dataclass
from typing import Optional, Tuple

from .position import Direction, Position
from .window import initial_bounds


@dataclass
class TailConfig:
    # Number of lines in the initial window
    lines: int = 10
    # Take the window from the top of the file instead of the bottom
    head: bool = False
    # Print the window in the opposite order
    reverse: bool = False
    # Keep printing lines appended after the initial window
    follow: bool = True
    # Polling frequency (Hz) for the follow loop and the wait-for-file retry
    rate_hz: float = 10.0
    # Wait for an inaccessible file to appear instead of failing
    wait: bool = True
    # Colorize output when rich is available
    color: bool = True
    encoding: str = "utf-8"
    # Explicit bounds; override lines/head when set
    start: Optional[Position] = None
    stop: Optional[Position] = None
    direction: Optional[Direction] = None

    def validate(self) -> None:
        if isinstance(self.lines, bool) or not isinstance(self.lines, int) or self.lines <= 0:
            raise ValueError(f"lines must be a positive integer, got {self.lines!r}")
        if self.rate_hz <= 0:
            raise ValueError(f"rate must be positive, got {self.rate_hz!r}")

    def bounds(self) -> Tuple[Position, Position, Direction]:
        start, stop, direction = initial_bounds(self.lines, self.head)
        if self.start is not None:
            start = self.start
        if self.stop is not None:
            stop = self.stop
        if self.direction is not None:
            direction = self.direction
        return start, stop, direction
