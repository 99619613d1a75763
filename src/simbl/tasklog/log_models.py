# src/simbl/tasklog/log_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


def as_utc(ts: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One line of an embedded (legacy) task log."""
    timestamp: datetime
    message: str


@dataclass(frozen=True, slots=True)
class FileLogEntry:
    """One record of the centralized log file."""
    task_id: str
    timestamp: datetime
    message: str
