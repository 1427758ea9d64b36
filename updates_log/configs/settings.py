from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Central configuration for updates-log.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties. Only the HTTP app and the CLI read
    these; LogStore and LogReader are always given explicit arguments.
    """

    def __init__(self) -> None:
        # Log file location (application-private storage)
        self._data_dir = Path(
            os.getenv("UPDATES_LOG_DATA_DIR", str(Path.home() / ".updates_log"))
        ).expanduser()
        self._log_filename = os.getenv("UPDATES_LOG_FILENAME", "updates-logs.txt")

        # Read window used by the surfaces when the caller does not pass one
        self._default_max_age_ms = int(
            os.getenv("UPDATES_LOG_DEFAULT_MAX_AGE_MS", "3600000")
        )

        # Housekeeping + diagnostics
        self._purge_on_startup = _env_bool("UPDATES_LOG_PURGE_ON_STARTUP", True)
        self._log_level = os.getenv("UPDATES_LOG_LEVEL", "INFO").upper()

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def log_filename(self) -> str:
        return self._log_filename

    @property
    def log_file_path(self) -> Path:
        return self._data_dir / self._log_filename

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------

    @property
    def default_max_age_ms(self) -> int:
        return self._default_max_age_ms

    @property
    def purge_on_startup(self) -> bool:
        return self._purge_on_startup

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
