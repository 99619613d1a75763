# src/simbl/tasklog/__init__.py

"""
Task event log.

Two formats coexist:
- embedded (legacy): a `task-log` section at the end of each task's content
- centralized: one JSON record per line in `.simbl/log.ndjson`

`migrate` moves a store from the first to the second, once.
"""

from .log_models import FileLogEntry, LogEntry

__all__ = ["FileLogEntry", "LogEntry"]
