#!/usr/bin/env python3
"""
updates-log CLI

Inspect and prune the update log file from a shell.

Commands:

1) read
   - Print entries from the last --max-age-ms milliseconds (capped at one
     day) as JSON lines. With --raw, print the stored entry strings.

2) append
   - Write one entry through UpdatesLogger (level, code and ids optional).

3) purge
   - Delete entries older than --older-than (epoch seconds) or older than
     --max-age-ms milliseconds ago.

4) clear
   - Delete the whole log file.

The HTTP API is started separately, e.g.:

    uvicorn updates_log.runtime.api.server:app
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from updates_log.configs.settings import settings
from updates_log.core.logger.updates_logger import UpdatesLogger
from updates_log.exceptions.exceptions import LogStoreError
from updates_log.runtime.models.log_models import LogLevel, UpdatesErrorCode
from updates_log.runtime.reader.log_reader import MAX_LOOKBACK_MS, LogReader
from updates_log.runtime.store.log_store import LogStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_read(log_store: LogStore, max_age_ms: int, raw: bool) -> None:
    """Print entries newer than now - max_age_ms, one per line."""
    reader = LogReader(log_store)
    newer_than = _now() - timedelta(milliseconds=min(max_age_ms, MAX_LOOKBACK_MS))

    if raw:
        for line in reader.get_log_entry_strings(newer_than=newer_than):
            print(line)
        return

    for record in reader.get_log_entries(newer_than=newer_than):
        print(json.dumps(record, ensure_ascii=False))


def cmd_append(
    log_store: LogStore,
    message: str,
    level: str,
    code: str,
    update_id: Optional[str],
    asset_id: Optional[str],
) -> None:
    """Append one entry and wait until it is on disk."""
    updates_logger = UpdatesLogger(log_store)
    updates_logger.log(
        LogLevel(level),
        message,
        code=UpdatesErrorCode(code),
        update_id=update_id,
        asset_id=asset_id,
    ).result()
    print(f"[updates-log] ✓ Appended {level} entry → {log_store.file_path}")


def cmd_purge(
    log_store: LogStore,
    older_than: Optional[int],
    max_age_ms: Optional[int],
) -> None:
    """Delete entries older than an epoch second or a relative age."""
    if older_than is not None:
        cutoff = older_than
    else:
        cutoff = max(0, int(time.time()) - max_age_ms // 1000)

    LogReader(log_store).purge_log_entries_before(cutoff)
    print(f"[updates-log] ✓ Purged entries older than epoch {cutoff}")


def cmd_clear(log_store: LogStore) -> None:
    """Delete the log file."""
    log_store.clear_entries().result()
    print(f"[updates-log] ✓ Cleared {log_store.file_path}")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="updates-log CLI")
    parser.add_argument(
        "--log-file",
        default=str(settings.log_file_path),
        help=(
            "Path to the log file "
            "(default: UPDATES_LOG_DATA_DIR/UPDATES_LOG_FILENAME)"
        ),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # read
    p_read = subparsers.add_parser("read", help="Print recent log entries")
    p_read.add_argument(
        "--max-age-ms",
        type=_non_negative_int,
        default=settings.default_max_age_ms,
        help="How far back to read, in milliseconds (capped at one day)",
    )
    p_read.add_argument(
        "--raw",
        action="store_true",
        help="Print stored JSON strings instead of decoded records",
    )

    # append
    p_append = subparsers.add_parser("append", help="Append one log entry")
    p_append.add_argument("message", help="Log message text")
    p_append.add_argument(
        "--level",
        choices=[lvl.value for lvl in LogLevel],
        default=LogLevel.INFO.value,
    )
    p_append.add_argument(
        "--code",
        choices=[c.value for c in UpdatesErrorCode],
        default=UpdatesErrorCode.NONE.value,
    )
    p_append.add_argument("--update-id", default=None)
    p_append.add_argument("--asset-id", default=None)

    # purge
    p_purge = subparsers.add_parser("purge", help="Delete entries older than a cutoff")
    cutoff = p_purge.add_mutually_exclusive_group(required=True)
    cutoff.add_argument(
        "--older-than",
        type=_non_negative_int,
        help="Cutoff as seconds since epoch",
    )
    cutoff.add_argument(
        "--max-age-ms",
        type=_non_negative_int,
        help="Cutoff as milliseconds before now",
    )

    # clear
    subparsers.add_parser("clear", help="Delete the log file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)

    command: str = args.command

    with LogStore(args.log_file) as log_store:
        try:
            if command == "read":
                cmd_read(log_store, max_age_ms=args.max_age_ms, raw=args.raw)
            elif command == "append":
                cmd_append(
                    log_store,
                    message=args.message,
                    level=args.level,
                    code=args.code,
                    update_id=args.update_id,
                    asset_id=args.asset_id,
                )
            elif command == "purge":
                cmd_purge(
                    log_store,
                    older_than=args.older_than,
                    max_age_ms=args.max_age_ms,
                )
            elif command == "clear":
                cmd_clear(log_store)
            else:
                parser.error(f"Unknown command: {command}")
        except LogStoreError as e:
            print(f"[updates-log] ✗ {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
