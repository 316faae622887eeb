"""Path checks and the wait-for-file retry loop used before tailing starts."""
from __future__ import annotations

import os
import threading
import time
from pathlib import Path
from typing import Optional

from .follow import FramePacer
from .logutil import get_logger

_TRIM = "\\/."


class FileAccessError(Exception):
    """The target exists as a path but could not be opened for reading."""

    def __init__(self, path: Path, source: OSError) -> None:
        self.path = path
        self.source = source
        super().__init__(f'Unable to access file: "{path}"')


def _readable(path: Path) -> Optional[OSError]:
    try:
        with open(path, "rb"):
            return None
    except OSError as exc:
        return exc


def validate_path(raw: str) -> Path:
    """Normalize ``raw`` to an absolute path of a readable regular file.

    Raises ValueError for an empty path or a directory and FileAccessError
    when the file cannot be opened (the caller may choose to wait for it).
    """
    if not raw or not raw.strip():
        raise ValueError("Supplied path is empty!")
    text = raw
    if not Path(text).is_absolute() and not text.startswith("."):
        text = "./" + text.lstrip().lstrip(_TRIM)
    path = Path(os.path.abspath(text))
    if path.is_dir():
        raise ValueError(f'The path "{path}" points to a directory. It should point to a file.')
    error = _readable(path)
    if error is not None:
        raise FileAccessError(path, error)
    return path


def wait_for_file(
    path: Path,
    rate_hz: float = 10.0,
    stop_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
    pacer: Optional[FramePacer] = None,
) -> bool:
    """Block until ``path`` can be opened for reading.

    Returns False if ``stop_event`` is set or ``timeout`` seconds pass first.
    """
    pacer = pacer or FramePacer(rate_hz)
    deadline = None if timeout is None else time.monotonic() + timeout
    log = get_logger()
    while True:
        error = _readable(path)
        if error is None:
            return True
        log.debug("still waiting for %s: %s", path, error)
        if stop_event is not None and stop_event.is_set():
            return False
        if deadline is not None and time.monotonic() >= deadline:
            return False
        pacer.sleep_remaining_frame()


__all__ = ["FileAccessError", "validate_path", "wait_for_file"]
