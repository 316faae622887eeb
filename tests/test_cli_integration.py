import re
import subprocess
import sys
import threading
import time
from pathlib import Path


def run_cli(args, cwd=None):
    proc = subprocess.run([sys.executable, "-m", "windowtail.cli", *args], capture_output=True, text=True, cwd=cwd)
    return proc


def make_log(tmp_path: Path, count: int = 12) -> Path:
    p = tmp_path / "app.log"
    p.write_text("".join(f"line {i}\n" for i in range(1, count + 1)), encoding="utf-8")
    return p


def expected(indices):
    return "".join(f"{i}:\tline {i}\n" for i in indices)


def test_default_prints_last_ten_lines(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "--no-follow", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == expected(range(3, 13))


def test_head_window(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "-n", "2", "--head", "--no-follow", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == expected([1, 2])


def test_reverse_flag(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "-n", "3", "--reverse", "--no-follow", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == expected([12, 11, 10])


def test_explicit_bounds(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "--start", "1", "--stop", "3", "--no-follow", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == expected([2, 3])

    proc = run_cli([
        str(log),
        "--start", "4", "--start-from-end",
        "--stop", "1", "--stop-from-end",
        "--direction", "top-to-bottom",
        "--no-follow",
        "--no-color",
    ])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == expected([9, 10, 11])


def test_empty_window_prints_nothing(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "--start", "3", "--stop", "3", "--no-follow", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == ""


def test_default_color_output_keeps_line_bytes(tmp_path):
    log = tmp_path / "app.log"
    log.write_bytes(b"alpha\nbeta  \r\n\tgamma")
    proc = subprocess.run(
        [sys.executable, "-m", "windowtail.cli", str(log), "-n", "3", "--no-follow"],
        capture_output=True,
    )
    assert proc.returncode == 0, proc.stderr
    plain = re.sub(rb"\x1b\[[0-9;]*m", b"", proc.stdout)
    assert plain == b"1:\talpha\n2:\tbeta  \r\n3:\t\tgamma\n"


def test_missing_file_without_wait(tmp_path):
    proc = run_cli([str(tmp_path / "missing.log"), "--no-wait", "--no-follow"])
    assert proc.returncode == 2
    assert "Unable to access file" in proc.stderr


def test_directory_rejected(tmp_path):
    proc = run_cli([str(tmp_path), "--no-follow"])
    assert proc.returncode == 2
    assert "directory" in proc.stderr


def test_invalid_line_count(tmp_path):
    log = make_log(tmp_path)
    proc = run_cli([str(log), "-n", "0", "--no-follow"])
    assert proc.returncode == 2
    assert "positive" in proc.stderr


def test_follow_prints_appended_lines(tmp_path):
    log = make_log(tmp_path, count=3)
    proc = subprocess.Popen(
        [sys.executable, "-m", "windowtail.cli", str(log), "-n", "1", "--rate", "50", "--no-color"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    collected = []

    def reader():
        for line in proc.stdout:
            collected.append(line)

    t = threading.Thread(target=reader, daemon=True)
    t.start()
    try:
        deadline = time.time() + 10.0
        while time.time() < deadline and not collected:
            time.sleep(0.02)
        assert collected == ["3:\tline 3\n"], proc.stderr.read() if proc.poll() is not None else collected
        with log.open("a", encoding="utf-8") as h:
            h.write("fresh")
        time.sleep(0.2)
        with log.open("a", encoding="utf-8") as h:
            h.write("\nnext\n")
        deadline = time.time() + 5.0
        while time.time() < deadline and len(collected) < 3:
            time.sleep(0.02)
    finally:
        proc.terminate()
        proc.wait(timeout=5)
        t.join(timeout=1.0)

    assert collected == ["3:\tline 3\n", "4:\tfresh\n", "5:\tnext\n"]


def test_initial_read_failure_reports_partial_lines(tmp_path, monkeypatch, capsys):
    from windowtail import cli
    from windowtail.scanner import Line, ScanError

    log = make_log(tmp_path, count=3)

    def failing_scan(stream, window, encoding="utf-8"):
        raise ScanError([Line(1, "line 1\n")], 2)

    monkeypatch.setattr(cli, "scan_window", failing_scan)
    monkeypatch.setattr(cli.signal, "signal", lambda *args: None)
    assert cli.main([str(log), "--no-follow", "--no-color"]) == 1
    out, err = capsys.readouterr()
    assert out == expected([1])
    assert "read failed at line 2" in err
    assert "None" not in err
