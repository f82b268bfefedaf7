"""Tests for top log discovery."""

import logging
import os

import pytest

from top2csv.discovery import find_top_logs, is_top_log
from top2csv.errors import DiscoveryError


@pytest.mark.parametrize("name", ["top.log", "top.log.0", "top.log.9"])
def test_is_top_log(name):
    assert is_top_log(name)


@pytest.mark.parametrize(
    "name", ["top.log.10", "top.log-mem.csv", "xtop.log", "top.logs", "top.log.a", "top_log"]
)
def test_is_not_top_log(name):
    assert not is_top_log(name)


def test_find_recursive(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "top.log").write_text("")
    (tmp_path / "a" / "top.log.1").write_text("")
    (tmp_path / "a" / "b" / "top.log").write_text("")
    (tmp_path / "a" / "b" / "top.log-mem.csv").write_text("")
    (tmp_path / "a" / "other.log").write_text("")

    found = [path.relative_to(tmp_path).as_posix() for path in find_top_logs(tmp_path)]

    assert found == ["top.log", "a/top.log.1", "a/b/top.log"]


def test_directory_named_like_log_is_skipped(tmp_path):
    (tmp_path / "top.log").mkdir()
    assert list(find_top_logs(tmp_path)) == []


def test_missing_root(tmp_path):
    with pytest.raises(DiscoveryError, match="Error accessing path"):
        list(find_top_logs(tmp_path / "missing"))


def test_root_is_file(tmp_path):
    path = tmp_path / "top.log"
    path.write_text("")
    with pytest.raises(DiscoveryError, match="is not a directory"):
        list(find_top_logs(path))


def test_unreadable_directory_is_reported(tmp_path, monkeypatch, caplog):
    """Test a directory os.walk cannot list produces a warning, not silence."""
    (tmp_path / "top.log").write_text("")
    real_walk = os.walk

    def walk_with_denied_dir(top, onerror=None):
        onerror(PermissionError(13, "Permission denied", str(tmp_path / "locked")))
        yield from real_walk(top, onerror=onerror)

    monkeypatch.setattr("top2csv.discovery.os.walk", walk_with_denied_dir)

    with caplog.at_level(logging.WARNING):
        found = list(find_top_logs(tmp_path))

    assert found == [tmp_path / "top.log"]
    assert "Not searched" in caplog.text
    assert "locked" in caplog.text
