"""
Runtime package for updates-log.

This package contains:
- API layer (FastAPI server + routes)
- Store (serialized flat-file LogStore)
- Reader (windowed retrieval and purge)
- Models (Pydantic models for entries and requests)
"""
