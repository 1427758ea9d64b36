"""
Read side of the updates-log runtime.

Includes:
- LogReader: one-day-bounded retrieval and age-based purge over a LogStore
"""
