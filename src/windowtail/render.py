"""Presentation of line batches: ``index:<TAB>content``, one line per entry."""
from __future__ import annotations

import sys
from typing import IO, List, Optional, TYPE_CHECKING

from .position import Direction
from .scanner import Line

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import COLOR_SYSTEMS as _COLOR_SYSTEMS
    from rich.console import Console as _Console
    from rich.style import Style as _Style
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import COLOR_SYSTEMS as _COLOR_SYSTEMS  # type: ignore
        from rich.console import Console as _Console  # type: ignore
        from rich.style import Style as _Style  # type: ignore
    except Exception:  # noqa: BLE001
        _COLOR_SYSTEMS = {}  # type: ignore
        _Console = None  # type: ignore
        _Style = None  # type: ignore

ConsoleType = Optional["_Console"]

INDEX_STYLE = "dim cyan"


def make_console(color: bool = True) -> ConsoleType:
    if not color or _Console is None:
        return None
    return _Console(highlight=False, soft_wrap=True)


def display_order(batch: List[Line], direction: Direction, reverse: bool = False) -> List[Line]:
    """Put ``batch`` back into file order, then flip it if ``reverse`` is set.

    Scanner output for ``BOTTOM_TO_TOP`` arrives newest first; display is
    chronological unless the caller asks otherwise.
    """
    ordered = list(batch)
    if direction is Direction.BOTTOM_TO_TOP:
        ordered.reverse()
    if reverse:
        ordered.reverse()
    return ordered


def _index_prefix(line: Line, console: ConsoleType) -> str:
    prefix = f"{line.index}:"
    if console is None or console.color_system is None:
        return prefix
    # Only the prefix is styled; content bytes go out untouched (tabs, trailing blanks, \r\n)
    style = _Style.parse(INDEX_STYLE)
    return style.render(prefix, color_system=_COLOR_SYSTEMS[console.color_system])


def format_line(line: Line, console: ConsoleType = None) -> str:
    text = f"{_index_prefix(line, console)}\t{line.content}"
    if not text.endswith("\n"):
        text += "\n"
    return text


def render(
    batch: List[Line],
    direction: Direction = Direction.TOP_TO_BOTTOM,
    reverse: bool = False,
    out: Optional[IO[str]] = None,
    console: ConsoleType = None,
) -> None:
    lines = display_order(batch, direction, reverse)
    if console is not None:
        out = console.file
    out = out or sys.stdout
    out.write("".join(format_line(line, console) for line in lines))
    out.flush()


__all__ = ["INDEX_STYLE", "display_order", "format_line", "make_console", "render"]
