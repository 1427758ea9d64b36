"""
Log entry models for the updates-log runtime.

These describe:
- LogLevel enum (trace ... fatal)
- UpdatesErrorCode enum (category tag attached to every entry)
- LogEntry, plus its one-line JSON encoding used in the log file
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class UpdatesErrorCode(str, Enum):
    NONE = "None"
    NO_UPDATES_AVAILABLE = "NoUpdatesAvailable"
    UPDATE_ASSETS_NOT_AVAILABLE = "UpdateAssetsNotAvailable"
    UPDATE_SERVER_UNREACHABLE = "UpdateServerUnreachable"
    UPDATE_HAS_INVALID_SIGNATURE = "UpdateHasInvalidSignature"
    UPDATE_CODE_SIGNING_ERROR = "UpdateCodeSigningError"
    UPDATE_FAILED_TO_LOAD = "UpdateFailedToLoad"
    ASSETS_FAILED_TO_LOAD = "AssetsFailedToLoad"
    JS_RUNTIME_ERROR = "JSRuntimeError"
    INITIALIZATION_ERROR = "InitializationError"
    UNKNOWN = "Unknown"


class LogEntry(BaseModel):
    """A single decoded log record.

    Optional fields are None when absent. They are left out of both the
    encoded line and as_dict(), so an absent stacktrace and an empty one
    stay distinguishable.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestamp: int = Field(ge=0)  # seconds since epoch
    message: str
    code: UpdatesErrorCode
    level: LogLevel
    update_id: Optional[str] = Field(default=None, alias="updateId")
    asset_id: Optional[str] = Field(default=None, alias="assetId")
    stacktrace: Optional[List[str]] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return the field-keyed record, with absent optional fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_json_string(self) -> str:
        """Encode this entry as one line of compact JSON."""
        return json.dumps(self.as_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def create_from(cls, line: str) -> Optional["LogEntry"]:
        """Decode a stored line, or return None if it is not a valid entry."""
        try:
            data = json.loads(line)
        except (TypeError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None
