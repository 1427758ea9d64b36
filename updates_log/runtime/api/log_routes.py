"""HTTP routes for reading and pruning the update logs.

Exposes endpoints like:

- GET    /logs/entries        -> decoded entries newer than now - max_age_ms
- GET    /logs/entry_strings  -> same window, entries as JSON strings
- POST   /logs/purge          -> delete entries older than an epoch second
- DELETE /logs/entries        -> delete the whole log file
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ...exceptions.exceptions import LogStoreError
from ..models.api_models import (
    LogEntriesResponse,
    LogEntryStringsResponse,
    PurgeRequest,
    StatusResponse,
)
from ..reader.log_reader import MAX_LOOKBACK_MS, LogReader
from ..store.log_store import LogStore


logger = logging.getLogger(__name__)

# Router for all log-related endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_LOG_STORE: Optional[LogStore] = None
_LOG_READER: Optional[LogReader] = None
_DEFAULT_MAX_AGE_MS: int = 3_600_000


def init_routes(
    log_store: LogStore,
    log_reader: LogReader,
    default_max_age_ms: int = 3_600_000,
) -> None:
    """Initialize module-level references used by the route handlers."""
    global _LOG_STORE, _LOG_READER, _DEFAULT_MAX_AGE_MS
    _LOG_STORE = log_store
    _LOG_READER = log_reader
    _DEFAULT_MAX_AGE_MS = default_max_age_ms


def _require_log_store() -> LogStore:
    if _LOG_STORE is None:
        raise HTTPException(
            status_code=500,
            detail="LogStore is not configured on the server.",
        )
    return _LOG_STORE


def _require_log_reader() -> LogReader:
    if _LOG_READER is None:
        raise HTTPException(
            status_code=500,
            detail="LogReader is not configured on the server.",
        )
    return _LOG_READER


def _newer_than(max_age_ms: Optional[int]) -> datetime:
    if max_age_ms is None:
        max_age_ms = _DEFAULT_MAX_AGE_MS
    # The reader never looks back further than MAX_LOOKBACK_MS.
    max_age_ms = min(max_age_ms, MAX_LOOKBACK_MS)
    return datetime.now(timezone.utc) - timedelta(milliseconds=max_age_ms)


def _store_failure(route: str, e: LogStoreError) -> HTTPException:
    logger.warning("[LOGS_API] %s failed: operation=%s path=%s reason=%r",
                   route, e.operation, e.path, e.details)
    return HTTPException(status_code=500, detail=str(e))


# Handlers are plain `def` so FastAPI runs the blocking reader calls in its
# threadpool instead of on the event loop.

@router.get("/entries", response_model=LogEntriesResponse)
def read_entries(max_age_ms: Optional[int] = Query(default=None, ge=0)) -> LogEntriesResponse:
    """Return decoded entries from the last `max_age_ms` milliseconds.

    The reader caps the window at one day regardless of `max_age_ms`.
    """
    reader = _require_log_reader()
    try:
        entries = reader.get_log_entries(newer_than=_newer_than(max_age_ms))
    except LogStoreError as e:
        raise _store_failure("GET /entries", e)
    return LogEntriesResponse(entries=entries)


@router.get("/entry_strings", response_model=LogEntryStringsResponse)
def read_entry_strings(
    max_age_ms: Optional[int] = Query(default=None, ge=0),
) -> LogEntryStringsResponse:
    """Return the same window as /entries, each entry as its JSON line."""
    reader = _require_log_reader()
    try:
        entries = reader.get_log_entry_strings(newer_than=_newer_than(max_age_ms))
    except LogStoreError as e:
        raise _store_failure("GET /entry_strings", e)
    return LogEntryStringsResponse(entries=entries)


@router.post("/purge", response_model=StatusResponse)
def purge_entries(request: PurgeRequest) -> StatusResponse:
    """Delete every entry older than `older_than` (epoch seconds)."""
    reader = _require_log_reader()
    try:
        reader.purge_log_entries_before(request.older_than)
    except LogStoreError as e:
        raise _store_failure("POST /purge", e)
    return StatusResponse()


@router.delete("/entries", response_model=StatusResponse)
def clear_entries() -> StatusResponse:
    """Delete the log file."""
    log_store = _require_log_store()
    try:
        log_store.clear_entries().result()
    except LogStoreError as e:
        raise _store_failure("DELETE /entries", e)
    return StatusResponse()


# --------------------------------------------------------
# Endpoint: GET /healthz
# --------------------------------------------------------
@router.get("/healthz")
def health_check():
    """
    Simple health check endpoint for uptime monitoring.
    """
    return {"status": "ok"}
