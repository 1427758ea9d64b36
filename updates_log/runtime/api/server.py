"""
FastAPI application entry point for the updates-log runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (LogStore, LogReader, UpdatesLogger)
- purge entries older than one day on startup (if enabled)
- include log routes under /logs

Start it with:

    uvicorn updates_log.runtime.api.server:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from updates_log.configs.settings import settings
from updates_log.core.logger.updates_logger import UpdatesLogger
from updates_log.exceptions.exceptions import LogStoreError
from updates_log.runtime.reader.log_reader import LogReader
from updates_log.runtime.store.log_store import LogStore
from . import log_routes


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared singletons
# ---------------------------------------------------------------------------

# One store per log file; everything else goes through it.
log_store = LogStore(settings.log_file_path)

log_reader = LogReader(log_store)

# Entry producer for code embedded in this process.
updates_logger = UpdatesLogger(log_store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.purge_on_startup:
        try:
            await run_in_threadpool(log_reader.purge_expired_entries)
        except LogStoreError:
            # Housekeeping only; the server can still serve reads.
            logger.exception("[LOGS_API] Startup purge failed for %s", log_store.file_path)
    # The store is a module-level singleton shared by every start of `app`;
    # its worker thread is joined at interpreter exit.
    yield


# ---------------------------------------------------------------------------
# FastAPI app + route registration
# ---------------------------------------------------------------------------

app = FastAPI(title="updates-log Runtime", lifespan=lifespan)

# Initialize the router module with our shared objects, then include it.
log_routes.init_routes(
    log_store=log_store,
    log_reader=log_reader,
    default_max_age_ms=settings.default_max_age_ms,
)
app.include_router(log_routes.router, prefix="/logs")
