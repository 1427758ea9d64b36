"""
Custom exceptions for the updates-log store and reader.

These exceptions are intentionally simple and descriptive.
They are used across:

  - runtime/store/
  - runtime/reader/
  - runtime/api/ and cli/

Placing them in their own package (updates_log/exceptions/) avoids
circular imports and keeps exception types consistent across modules.
"""


class LogStoreError(Exception):
    """
    Raised when the file system refuses a read, write or delete on the
    log file (permissions, disk failure, undecodable content).

    The original OSError / UnicodeDecodeError is chained as __cause__.
    The log file is left at its last durable state.
    """

    def __init__(self, operation, path, details=None):
        self.operation = operation
        self.path = path
        self.details = details or "I/O failure."
        msg = f"Log store {operation} failed for {path}: {self.details}"
        super().__init__(msg)


class LogStoreClosedError(Exception):
    """
    Raised when an operation is submitted to a LogStore after close().
    """

    def __init__(self, path):
        self.path = path
        super().__init__(f"Log store for {path} is closed")
