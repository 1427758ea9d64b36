"""
Storage abstractions for the updates-log runtime.

Includes:
- LogStore: serialized, all-or-nothing access to the flat log file
"""
