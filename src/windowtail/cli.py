import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import TailConfig
from .follow import ChangeWatcher, Follower, FramePacer
from .logutil import get_logger, set_verbose
from .paths import FileAccessError, validate_path, wait_for_file
from .position import Direction, FromBegin, FromEnd, Position
from .render import make_console, render
from .scanner import Line, ScanError, scan_window
from .window import resolve


def _position(offset: Optional[int], from_end: bool) -> Optional[Position]:
    if offset is None:
        return None
    return FromEnd(offset) if from_end else FromBegin(offset)


def config_from_args(args: argparse.Namespace) -> TailConfig:
    cfg = TailConfig(
        lines=args.lines,
        head=args.head,
        reverse=args.reverse,
        follow=not args.no_follow,
        rate_hz=args.rate,
        wait=not args.no_wait,
        color=not args.no_color,
        encoding=args.encoding,
    )
    cfg.start = _position(args.start, args.start_from_end)
    cfg.stop = _position(args.stop, args.stop_from_end)
    if args.direction:
        cfg.direction = Direction(args.direction)
    cfg.validate()
    return cfg


def _open_target(raw: str, cfg: TailConfig) -> Optional[Path]:
    try:
        return validate_path(raw)
    except ValueError as exc:
        print(f"[windowtail] {exc}", file=sys.stderr)
        return None
    except FileAccessError as exc:
        print(f"[windowtail] {exc}: {exc.source}", file=sys.stderr)
        if not cfg.wait:
            return None
        print("Waiting for file to become accessible.", file=sys.stderr, flush=True)
        if not wait_for_file(exc.path, cfg.rate_hz):
            return None
        return exc.path


def cmd_tail(path: Path, cfg: TailConfig) -> int:
    log = get_logger()
    start, stop, direction = cfg.bounds()
    window = resolve(start, stop, direction)
    console = make_console(cfg.color)

    def show(batch: List[Line]) -> None:
        render(batch, direction, cfg.reverse, console=console)

    # Install SIGTERM handler so external terminate() ends the follow loop cleanly
    def _sigterm_handler(signum, frame):  # pragma: no cover - exercised indirectly
        raise KeyboardInterrupt
    try:
        signal.signal(signal.SIGTERM, _sigterm_handler)
    except Exception:  # noqa: BLE001 - signal may not be available (non-main thread)
        pass

    with open(path, "rb") as stream:
        changed = threading.Event()
        # Snapshot size/mtime before the first read so nothing appended in between is missed
        watcher = ChangeWatcher(str(path), changed, interval=1.0 / cfg.rate_hz)
        follower = Follower(stream, direction, show, changed, FramePacer(cfg.rate_hz), encoding=cfg.encoding)
        try:
            if cfg.follow:
                lines = follower.prime(window)
            else:
                lines = scan_window(stream, window, encoding=cfg.encoding)
        except ScanError as exc:
            show(exc.lines)
            detail = f"{exc}: {exc.__cause__}" if exc.__cause__ is not None else str(exc)
            print(f"[windowtail] {detail}", file=sys.stderr)
            return 1
        show(lines)
        if not cfg.follow:
            return 0

        log.debug("following %s at %.1f Hz", path, cfg.rate_hz)
        watcher.start()
        try:
            follower.run()
        except KeyboardInterrupt:
            pass
        finally:
            watcher.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="windowtail",
        description="Print a window of lines from a file and keep printing lines written to it.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"windowtail {__version__}",
        help="Show version and exit",
    )
    parser.add_argument("file", help="The file to monitor")
    parser.add_argument("-n", "--lines", type=int, default=10, help="Number of lines in the initial window (default 10)")
    parser.add_argument("--head", action="store_true", help="Take the initial window from the top of the file")
    parser.add_argument("--reverse", action="store_true", help="Print lines in reverse order")
    parser.add_argument("--no-follow", action="store_true", help="Print the initial window and exit")
    parser.add_argument("--rate", type=float, default=10.0, help="Polling rate in Hz while following (default 10)")
    parser.add_argument("--no-wait", action="store_true", help="Fail instead of waiting for an inaccessible file")
    parser.add_argument("--no-color", action="store_true", help="Disable colorized output even if rich present")
    parser.add_argument("--encoding", default="utf-8", help="Text encoding of the file (undecodable bytes are replaced)")
    parser.add_argument("--start", type=int, help="Explicit window start offset (overrides -n/--head)")
    parser.add_argument("--start-from-end", action="store_true", help="Count --start from the end of the file")
    parser.add_argument("--stop", type=int, help="Explicit window stop offset (overrides -n/--head)")
    parser.add_argument("--stop-from-end", action="store_true", help="Count --stop from the end of the file")
    parser.add_argument(
        "--direction",
        choices=[d.value for d in Direction],
        help="Selection direction for explicit bounds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)
    try:
        cfg = config_from_args(args)
    except ValueError as exc:
        print(f"[windowtail] {exc}", file=sys.stderr)
        return 2
    try:
        path = _open_target(args.file, cfg)
    except KeyboardInterrupt:
        return 130
    if path is None:
        return 2
    try:
        return cmd_tail(path, cfg)
    except OSError as exc:
        print(f"[windowtail] could not read {path}: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
