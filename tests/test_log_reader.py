"""
Tests for LogReader: one-day-bounded retrieval and purge-by-age.

A fixed clock keeps the lookback arithmetic deterministic.
"""

from __future__ import annotations

import json
from concurrent.futures import Future
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from updates_log.exceptions.exceptions import LogStoreError
from updates_log.runtime.reader.log_reader import MAX_LOOKBACK, LogReader
from updates_log.runtime.store.log_store import LogStore


NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _epoch(when: datetime) -> int:
    return int(when.timestamp())


def _entry_line(when: datetime, message: str = "m", **extra) -> str:
    data = {
        "timestamp": _epoch(when),
        "message": message,
        "code": "None",
        "level": "info",
    }
    data.update(extra)
    return json.dumps(data)


@pytest.fixture
def store(tmp_path: Path):
    log_store = LogStore(tmp_path / "updates-logs.txt")
    yield log_store
    log_store.close()


@pytest.fixture
def reader(store: LogStore) -> LogReader:
    return LogReader(store, clock=lambda: NOW)


def _write(store: LogStore, *lines: str) -> None:
    for line in lines:
        store.append_entry(line)
    store.read_entries().result()


def _messages(records) -> list[str]:
    return [r["message"] for r in records]


# ---------------------------------------------------------------------------
# get_log_entries / get_log_entry_strings
# ---------------------------------------------------------------------------

def test_lookback_is_clamped_to_one_day(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW - timedelta(days=2), "two days"),
        _entry_line(NOW - MAX_LOOKBACK, "exactly one day"),
        _entry_line(NOW - timedelta(hours=23), "23 hours"),
        _entry_line(NOW - timedelta(hours=1), "1 hour"),
    )

    records = reader.get_log_entries(newer_than=datetime(1970, 1, 2, tzinfo=timezone.utc))

    assert _messages(records) == ["exactly one day", "23 hours", "1 hour"]


def test_newer_than_inside_window_is_respected(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW - timedelta(hours=3), "old"),
        _entry_line(NOW - timedelta(hours=2), "boundary"),
        _entry_line(NOW - timedelta(minutes=5), "recent"),
    )

    records = reader.get_log_entries(newer_than=NOW - timedelta(hours=2))

    assert _messages(records) == ["boundary", "recent"]
    for record in records:
        assert record["timestamp"] >= _epoch(NOW - timedelta(hours=2))


def test_undecodable_lines_are_skipped(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        "garbage",
        _entry_line(NOW, "first"),
        '{"timestamp": 1}',
        _entry_line(NOW, "second"),
    )

    assert _messages(reader.get_log_entries(newer_than=NOW - timedelta(hours=1))) == [
        "first",
        "second",
    ]


def test_records_omit_absent_optional_fields(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW, "plain"),
        _entry_line(NOW, "ids", updateId="u-1", assetId="a-1"),
    )

    plain, ids = reader.get_log_entries(newer_than=NOW - timedelta(hours=1))

    assert set(plain) == {"timestamp", "message", "code", "level"}
    assert ids["updateId"] == "u-1"
    assert ids["assetId"] == "a-1"
    assert "stacktrace" not in ids


def test_entry_strings_use_same_window(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW - timedelta(days=3), "too old"),
        "not an entry",
        _entry_line(NOW - timedelta(minutes=1), "fresh", updateId="u-9"),
    )

    strings = reader.get_log_entry_strings(newer_than=NOW - timedelta(days=10))

    assert len(strings) == 1
    assert json.loads(strings[0]) == json.loads(
        _entry_line(NOW - timedelta(minutes=1), "fresh", updateId="u-9")
    )


def test_empty_store_returns_no_entries(reader: LogReader) -> None:
    assert reader.get_log_entries(newer_than=NOW - timedelta(hours=1)) == []
    assert reader.get_log_entry_strings(newer_than=NOW - timedelta(hours=1)) == []


# ---------------------------------------------------------------------------
# purge_log_entries
# ---------------------------------------------------------------------------

def test_purge_drops_older_and_corrupt_entries(store: LogStore, reader: LogReader) -> None:
    cutoff = NOW - timedelta(hours=6)
    _write(
        store,
        _entry_line(cutoff - timedelta(seconds=1), "just before"),
        "corrupt line",
        _entry_line(cutoff, "at cutoff"),
        _entry_line(NOW, "now"),
    )

    reader.purge_log_entries(older_than=cutoff)

    remaining = store.read_entries().result()
    assert [json.loads(line)["message"] for line in remaining] == ["at cutoff", "now"]


def test_purge_is_not_clamped(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW - timedelta(days=5), "five days"),
        _entry_line(NOW - timedelta(days=2), "two days"),
    )

    reader.purge_log_entries(older_than=NOW - timedelta(days=3))

    remaining = store.read_entries().result()
    assert [json.loads(line)["message"] for line in remaining] == ["two days"]


def test_purge_everything_deletes_file(store: LogStore, reader: LogReader) -> None:
    _write(store, _entry_line(NOW - timedelta(hours=1)), "junk")

    reader.purge_log_entries(older_than=NOW)

    assert not store.file_path.exists()
    assert store.read_entries().result() == []


def test_purge_before_epoch_accepts_any_cutoff(store: LogStore, reader: LogReader) -> None:
    _write(store, _entry_line(NOW - timedelta(days=2), "old"), "junk", _entry_line(NOW, "now"))

    reader.purge_log_entries_before(0)
    remaining = store.read_entries().result()
    assert [json.loads(line)["message"] for line in remaining] == ["old", "now"]

    # Far past any representable datetime.
    reader.purge_log_entries_before(10**12)
    assert not store.file_path.exists()


def test_purge_expired_entries_uses_lookback(store: LogStore, reader: LogReader) -> None:
    _write(
        store,
        _entry_line(NOW - timedelta(hours=25), "expired"),
        _entry_line(NOW - timedelta(hours=2), "kept"),
    )

    reader.purge_expired_entries()

    remaining = store.read_entries().result()
    assert [json.loads(line)["message"] for line in remaining] == ["kept"]


# ---------------------------------------------------------------------------
# Failure propagation
# ---------------------------------------------------------------------------

def _failed_future() -> Future:
    future: Future = Future()
    future.set_exception(LogStoreError("read", "/nowhere", "permission denied"))
    return future


def test_store_failures_propagate_from_every_call() -> None:
    log_store = MagicMock(spec=LogStore)
    log_store.read_entries.side_effect = lambda: _failed_future()
    log_store.filter_entries.side_effect = lambda keep: _failed_future()
    reader = LogReader(log_store, clock=lambda: NOW)

    with pytest.raises(LogStoreError):
        reader.get_log_entries(newer_than=NOW)
    with pytest.raises(LogStoreError):
        reader.get_log_entry_strings(newer_than=NOW)
    with pytest.raises(LogStoreError):
        reader.purge_log_entries(older_than=NOW)
