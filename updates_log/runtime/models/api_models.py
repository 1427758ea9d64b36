"""
HTTP request/response models for the updates-log runtime API.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List


class LogEntriesResponse(BaseModel):
    """
    Decoded entries, oldest first.

    Each record carries timestamp, message, code and level; updateId,
    assetId and stacktrace appear only when the entry has them.
    """
    entries: List[Dict[str, Any]]


class LogEntryStringsResponse(BaseModel):
    entries: List[str]


class PurgeRequest(BaseModel):
    older_than: int = Field(ge=0)  # seconds since epoch


class StatusResponse(BaseModel):
    status: str = "ok"
