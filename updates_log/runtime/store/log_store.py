"""
LogStore: append-only persistence of log entry lines in a single flat file.

The file holds newline-delimited strings:

    <data_dir>/updates-logs.txt

Every operation is submitted to a single-worker executor and returns a
concurrent.futures.Future, so file operations for one store run strictly
one at a time and in submission order. Two concurrent appends can never
interleave their read-modify-write cycles.

Writes are all-or-nothing: content is written to a temporary file in the
same directory and moved over the log file with os.replace(). A write that
would leave no lines deletes the file instead, so "empty" and "absent"
look the same to the next read.
"""

import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Union

from ...exceptions.exceptions import LogStoreClosedError, LogStoreError


logger = logging.getLogger(__name__)

LogFilter = Callable[[str], bool]


class LogStore:
    """Serialized read / append / filter / clear over one log file.

    Parameters
    ----------
    file_path:
        Location of the log file. The file and its parent directory are
        created lazily on the first operation that needs them.
    """

    def __init__(self, file_path: Union[str, Path]) -> None:
        self.file_path = Path(file_path)
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="updates-log-store",
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_entries(self) -> "Future[List[str]]":
        """Read all entries from the log file, oldest first."""
        return self._submit("read", self._read_file_sync)

    def append_entry(self, entry: str) -> "Future[None]":
        """Append one entry to the end of the log file."""

        def _append() -> None:
            contents = self._read_file_sync()
            contents.append(entry)
            self._write_file_sync(contents)

        return self._submit("append", _append)

    def filter_entries(self, keep: LogFilter) -> "Future[None]":
        """Remove every entry for which keep(entry) is false."""

        def _filter() -> None:
            contents = self._read_file_sync()
            self._write_file_sync([entry for entry in contents if keep(entry)])

        return self._submit("filter", _filter)

    def clear_entries(self) -> "Future[None]":
        """Delete the log file. Succeeds if it does not exist."""
        return self._submit("clear", self._delete_file_sync)

    def close(self) -> None:
        """Wait for pending operations, then stop accepting new ones."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "LogStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Executor plumbing
    # ------------------------------------------------------------------

    def _submit(self, operation: str, fn: Callable[[], object]) -> Future:
        try:
            return self._executor.submit(self._run, operation, fn)
        except RuntimeError as e:
            # ThreadPoolExecutor refuses new work after shutdown().
            raise LogStoreClosedError(self.file_path) from e

    def _run(self, operation: str, fn: Callable[[], object]):
        try:
            return fn()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(
                "[LOG_STORE] %s failed for %s: %r", operation, self.file_path, e
            )
            raise LogStoreError(operation, self.file_path, str(e)) from e

    # ------------------------------------------------------------------
    # File helpers (only ever run on the executor thread)
    # ------------------------------------------------------------------

    def _ensure_file_exists(self) -> None:
        if not self.file_path.exists():
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.touch()

    def _read_file_sync(self) -> List[str]:
        self._ensure_file_exists()
        # newline="" keeps the content byte-for-byte; lines are split on "\n" only.
        with self.file_path.open("r", encoding="utf-8", newline="") as f:
            return _string_to_list(f.read())

    def _write_file_sync(self, contents: List[str]) -> None:
        if not contents:
            self._delete_file_sync()
            return

        directory = self.file_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.file_path.name}.",
            suffix=".tmp",
            dir=str(directory),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write("\n".join(contents))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.file_path)
        except BaseException:
            # The log file itself was never touched; drop the partial copy.
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _delete_file_sync(self) -> None:
        try:
            self.file_path.unlink()
        except FileNotFoundError:
            pass


def _string_to_list(contents: str) -> List[str]:
    """Split file content into entries; empty content means no entries."""
    if not contents:
        return []
    return contents.split("\n")
