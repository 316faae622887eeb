import threading
import time

import pytest

from windowtail.paths import FileAccessError, validate_path, wait_for_file


@pytest.mark.parametrize("raw", ["", "   "])
def test_empty_path_rejected(raw):
    with pytest.raises(ValueError, match="empty"):
        validate_path(raw)


def test_directory_rejected(tmp_path):
    with pytest.raises(ValueError, match="directory"):
        validate_path(str(tmp_path))


def test_missing_file_is_access_error(tmp_path):
    target = tmp_path / "nope.log"
    with pytest.raises(FileAccessError) as info:
        validate_path(str(target))
    assert info.value.path == target
    assert isinstance(info.value.source, OSError)
    assert "Unable to access file" in str(info.value)


def test_relative_path_made_absolute(tmp_path, monkeypatch):
    (tmp_path / "app.log").write_text("x\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    for raw in ["app.log", "  app.log", "./app.log"]:
        resolved = validate_path(raw)
        assert resolved.is_absolute()
        assert resolved.resolve() == (tmp_path / "app.log").resolve()


def test_wait_for_file_returns_once_created(tmp_path):
    target = tmp_path / "late.log"

    def create():
        time.sleep(0.05)
        target.write_text("hi\n", encoding="utf-8")

    t = threading.Thread(target=create, daemon=True)
    t.start()
    assert wait_for_file(target, rate_hz=100.0, timeout=2.0) is True
    t.join(timeout=1.0)


def test_wait_for_file_times_out(tmp_path):
    assert wait_for_file(tmp_path / "never.log", rate_hz=100.0, timeout=0.05) is False


def test_wait_for_file_honours_stop_event(tmp_path):
    stop = threading.Event()
    stop.set()
    assert wait_for_file(tmp_path / "never.log", rate_hz=100.0, stop_event=stop) is False
