"""Tests for helpers, configuration and progress counters."""

import logging
from pathlib import Path

import pytest

from rangeget.config import DownloadConfig
from rangeget.errors import InvalidConnectionCount
from rangeget.logging_setup import setup_logging
from rangeget.progress import ProgressTracker
from rangeget.utils import (clamp_connections, filename_from_url, format_bytes, is_valid_url,
                            parse_connections)


@pytest.mark.parametrize("url, expected", [
    ("https://example.com/pub/file.tar.gz", "file.tar.gz"),
    ("https://example.com/pub/file.tar.gz?token=1#frag", "file.tar.gz"),
    ("https://example.com/dir/", "dir"),
    ("https://example.com/", ""),
    ("https://example.com", ""),
    ("https://example.com/a/..", ""),
])
def test_filename_from_url(url, expected):
    assert filename_from_url(url) == expected


@pytest.mark.parametrize("size, expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1024, "1.00 KiB"),
    (1536, "1.50 KiB"),
    (5 * 1024 ** 3, "5.00 GiB"),
])
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


def test_is_valid_url():
    assert is_valid_url("http://example.com/x")
    assert not is_valid_url("example.com/x")
    assert not is_valid_url("")


@pytest.mark.parametrize("text, expected", [("1", 1), (" 4 ", 4), ("8", 8), ("12", 8), ("0", 1), ("-2", 1)])
def test_parse_connections(text, expected):
    assert parse_connections(text) == expected


@pytest.mark.parametrize("text", ["abc", "", "4.5"])
def test_parse_connections_rejects_non_integers(text):
    with pytest.raises(InvalidConnectionCount):
        parse_connections(text)


def test_clamp_honours_custom_limit():
    assert clamp_connections(6, limit=4) == 4


class TestConfig:
    def test_defaults(self):
        config = DownloadConfig()
        assert config.parts_dir == Path(".") / "parts"
        assert config.max_connections_limit == 8
        assert config.chunk_size == 8192
        assert config.user_agent.startswith("RangeGet/")

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RANGEGET_WORK_DIR", str(tmp_path))
        monkeypatch.setenv("RANGEGET_PARTS_DIR", "segments")
        monkeypatch.setenv("RANGEGET_CHUNK_SIZE", "65536")
        monkeypatch.setenv("RANGEGET_LOG_LEVEL", "debug")

        config = DownloadConfig.from_env()

        assert config.parts_dir == tmp_path / "segments"
        assert config.chunk_size == 65536
        assert config.log_level == "DEBUG"

    def test_from_env_rejects_bad_numbers(self, monkeypatch):
        monkeypatch.setenv("RANGEGET_READ_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="RANGEGET_READ_TIMEOUT"):
            DownloadConfig.from_env()


class TestProgressTracker:
    def test_aggregates_parts(self):
        seen = []
        tracker = ProgressTracker(lambda done, total: seen.append((done, total)))

        tracker.start(1, 100)
        tracker.start(2, 100, completed=40)
        tracker.report(1, 30)
        tracker.report(2, 60)

        assert tracker.downloaded == 130
        assert tracker.total == 200
        assert seen[-1] == (130, 200)

    def test_set_total_grows_bound(self):
        tracker = ProgressTracker()
        tracker.start(1, 0)
        tracker.report(1, 10)
        tracker.set_total(1, 10)
        assert tracker.total == 10


def test_setup_logging_replaces_handler():
    logger = setup_logging("DEBUG")
    setup_logging(logging.INFO)

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    logger.removeHandler(logger.handlers[0])


@pytest.mark.parametrize("name", ["RANGEGET_CONNECT_TIMEOUT", "RANGEGET_READ_TIMEOUT", "RANGEGET_CHUNK_SIZE"])
@pytest.mark.parametrize("value", ["0", "-5"])
def test_from_env_rejects_non_positive_numbers(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        DownloadConfig.from_env()
