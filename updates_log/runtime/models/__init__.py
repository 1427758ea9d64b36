"""
Pydantic datamodels used by the updates-log runtime.

Split into:
- log_models: LogEntry + LogLevel + UpdatesErrorCode
- api_models: HTTP request/response schemas
"""
