"""Windowed line reading with follow mode.

Expose a single source of truth for the version. Prefer reading from
importlib.metadata so that an editable install or wheel always reports
the version declared in pyproject.toml. Fallback to a hardcoded string
to avoid import errors when metadata is unavailable (e.g. direct source
usage without installation).
"""

from __future__ import annotations

from importlib import metadata as _metadata

from .position import Direction, FromBegin, FromEnd, Position
from .scanner import Line, ScanError, scan
from .follow import reconcile
from .render import render
from .window import initial_bounds, resolve

__all__ = [
	"__version__",
	"Direction",
	"FromBegin",
	"FromEnd",
	"Line",
	"Position",
	"ScanError",
	"initial_bounds",
	"reconcile",
	"render",
	"resolve",
	"scan",
]

_FALLBACK_VERSION = "0.1.0"  # MUST match pyproject.toml [project].version

try:  # pragma: no cover - success path covered indirectly via CLI test
	__version__ = _metadata.version("windowtail")  # type: ignore[assignment]
except Exception:  # pragma: no cover - fallback exercised if metadata missing
	__version__ = _FALLBACK_VERSION
