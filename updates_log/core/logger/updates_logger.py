"""
core.logger.updates_logger

Write structured update log entries into a LogStore.

Each call builds a LogEntry stamped with the current epoch second,
encodes it as one JSON line and appends it through the store:

    logger = UpdatesLogger(log_store)
    logger.warn("Asset download failed", code=UpdatesErrorCode.ASSETS_FAILED_TO_LOAD,
                update_id="...", asset_id="...")

error() and fatal() also record the caller's stack. Every entry is
mirrored to the stdlib logger "updates_log.updates" so it shows up in
regular process logs as well.
"""

from __future__ import annotations

import logging
import time
import traceback
from concurrent.futures import Future
from typing import Dict, List, Optional

from updates_log.runtime.models.log_models import LogEntry, LogLevel, UpdatesErrorCode
from updates_log.runtime.store.log_store import LogStore


MIRROR_LOGGER_NAME = "updates_log.updates"

# Stdlib logging has no trace/fatal; map onto the closest levels.
_STDLIB_LEVELS: Dict[LogLevel, int] = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}

_LEVELS_WITH_STACKTRACE = (LogLevel.ERROR, LogLevel.FATAL)


class UpdatesLogger:
    """Append LogEntry lines to a LogStore, one per call."""

    def __init__(self, log_store: LogStore) -> None:
        self.log_store = log_store
        self._mirror = logging.getLogger(MIRROR_LOGGER_NAME)

    def trace(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
              update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.TRACE, message, code, update_id, asset_id)

    def debug(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
              update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.DEBUG, message, code, update_id, asset_id)

    def info(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
             update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.INFO, message, code, update_id, asset_id)

    def warn(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
             update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.WARN, message, code, update_id, asset_id)

    def error(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
              update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.ERROR, message, code, update_id, asset_id)

    def fatal(self, message: str, code: UpdatesErrorCode = UpdatesErrorCode.NONE,
              update_id: Optional[str] = None, asset_id: Optional[str] = None) -> Future:
        return self._emit(LogLevel.FATAL, message, code, update_id, asset_id)

    def log(
        self,
        level: LogLevel,
        message: str,
        code: UpdatesErrorCode = UpdatesErrorCode.NONE,
        update_id: Optional[str] = None,
        asset_id: Optional[str] = None,
    ) -> Future:
        """Build an entry for `level` and append it. Returns the append future."""
        return self._emit(level, message, code, update_id, asset_id)

    def _emit(
        self,
        level: LogLevel,
        message: str,
        code: UpdatesErrorCode,
        update_id: Optional[str],
        asset_id: Optional[str],
    ) -> Future:
        # Called directly by every public method, so the caller is always
        # exactly two frames above this one.
        entry = LogEntry(
            timestamp=int(time.time()),
            message=message,
            code=code,
            level=level,
            update_id=update_id,
            asset_id=asset_id,
            stacktrace=_current_stack() if level in _LEVELS_WITH_STACKTRACE else None,
        )
        self._mirror.log(
            _STDLIB_LEVELS[level],
            "[%s] %s (updateId=%s assetId=%s)",
            code.value,
            message,
            update_id,
            asset_id,
        )
        return self.log_store.append_entry(entry.to_json_string())


def _current_stack() -> List[str]:
    # Drop _current_stack, _emit and the public method so the trace ends
    # at the caller.
    frames = traceback.extract_stack()[:-3]
    return [f"{f.filename}:{f.lineno} in {f.name}" for f in frames]
