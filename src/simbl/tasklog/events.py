# src/simbl/tasklog/events.py

"""
Record a task event ("Task created", "Content updated", ...) in whichever
log the project currently uses.

- centralized (config logVersion == 2): one record appended to log.ndjson,
  written immediately
- legacy: the entry is added to the task's embedded log; the caller still
  has to save the document
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from ..tasks.task_models import Task
from . import file_log
from .embedded import append_embedded, append_or_batch_embedded
from .log_models import FileLogEntry, utc_now

logger = logging.getLogger(__name__)


def log_event(
    simbl_dir: str | Path,
    task: Task,
    message: str,
    *,
    centralized: bool,
    batch: bool = False,
    ts: datetime | None = None,
) -> None:
    """`batch` only applies to embedded logs; log.ndjson is never rewritten."""
    ts = utc_now() if ts is None else ts

    if centralized:
        file_log.append(simbl_dir, FileLogEntry(task_id=task.id, timestamp=ts, message=message))
        return

    if batch:
        task.content = append_or_batch_embedded(task.content, message, ts=ts)
    else:
        task.content = append_embedded(task.content, message, ts)
    logger.debug("Embedded log entry task=%s message=%r", task.id, message)
