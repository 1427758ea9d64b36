"""LogReader implementation.

Responsible for:
- returning decoded entries newer than a given time, with the lookback
  clamped to MAX_LOOKBACK (one day) no matter what the caller asks for
- purging entries older than a given time (no clamping)

The reader never touches the log file itself. Each call submits one
operation to the LogStore and blocks the calling thread (never the store's
worker) until the returned future completes. A private lock makes the
reader handle one such call at a time.

Store failures (LogStoreError) are logged and re-raised by every call;
surfaces decide how to present them.
"""

import logging
import threading
from concurrent.futures import Future
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ...exceptions.exceptions import LogStoreError
from ..models.log_models import LogEntry
from ..store.log_store import LogStore


logger = logging.getLogger(__name__)

MAX_LOOKBACK = timedelta(days=1)
MAX_LOOKBACK_MS = int(MAX_LOOKBACK.total_seconds() * 1000)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _epoch_seconds(when: datetime) -> int:
    return int(when.timestamp())


class LogReader:
    """Window-bounded retrieval and age-based purge on top of a LogStore.

    Parameters
    ----------
    log_store:
        Store that owns the log file.
    clock:
        Returns "now". Defaults to the current UTC time; tests pass a
        fixed clock.
    """

    def __init__(
        self,
        log_store: LogStore,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.log_store = log_store
        self._clock = clock or _utcnow
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def get_log_entries(self, newer_than: datetime) -> List[Dict[str, Any]]:
        """Return entries newer than `newer_than` as field-keyed records.

        Absent optional fields (updateId, assetId, stacktrace) are omitted
        from each record. At most one day of history is returned.
        """
        return [entry.as_dict() for entry in self._entries_newer_than(newer_than)]

    def get_log_entry_strings(self, newer_than: datetime) -> List[str]:
        """Same window as get_log_entries(), each entry as its JSON line."""
        return [
            entry.to_json_string() for entry in self._entries_newer_than(newer_than)
        ]

    # ------------------------------------------------------------------
    # Purge
    # ------------------------------------------------------------------

    def purge_log_entries(self, older_than: datetime) -> None:
        """Delete every entry written before `older_than`.

        Lines that do not decode as entries are deleted too.
        """
        self.purge_log_entries_before(_epoch_seconds(older_than))

    def purge_log_entries_before(self, epoch: int) -> None:
        """Delete every entry whose timestamp is below `epoch` (seconds).

        Any non-negative epoch is accepted; one past every stored
        timestamp empties the log.
        """

        def keep(line: str) -> bool:
            entry = LogEntry.create_from(line)
            return entry is not None and entry.timestamp >= epoch

        self._wait("purge_log_entries", lambda: self.log_store.filter_entries(keep))

    def purge_expired_entries(self) -> None:
        """Delete everything older than the maximum lookback window."""
        self.purge_log_entries(older_than=self._clock() - MAX_LOOKBACK)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _earliest_allowed(self, newer_than: datetime) -> int:
        earliest = _epoch_seconds(self._clock() - MAX_LOOKBACK)
        return max(_epoch_seconds(newer_than), earliest)

    def _entries_newer_than(self, newer_than: datetime) -> List[LogEntry]:
        epoch = self._earliest_allowed(newer_than)
        lines = self._wait("get_log_entries", self.log_store.read_entries)

        entries: List[LogEntry] = []
        for line in lines:
            entry = LogEntry.create_from(line)
            if entry is not None and entry.timestamp >= epoch:
                entries.append(entry)
        return entries

    def _wait(self, operation: str, submit: Callable[[], "Future[T]"]) -> T:
        with self._lock:
            try:
                return submit().result()
            except LogStoreError as e:
                logger.warning("[LOG_READER] %s failed: %s", operation, e)
                raise
