# src/simbl/tasklog/file_log.py

"""
Centralized task log: `<simbl_dir>/log.ndjson`, one JSON object per line:

    {"taskId":"task-1","timestamp":"2025-12-20T18:49:44.000Z","message":"Task created"}

Writers only ever append a whole line with O_APPEND, so several processes
can log at once without locking. Readers skip any line they cannot use,
including a torn last line from a writer still in progress.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from .log_models import FileLogEntry, as_utc

logger = logging.getLogger(__name__)

LOG_FILE = "log.ndjson"


def log_path(simbl_dir: str | Path) -> Path:
    return Path(simbl_dir) / LOG_FILE


def format_timestamp(ts: datetime) -> str:
    """Millisecond ISO-8601 in UTC with a `Z` suffix."""
    return as_utc(ts).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def encode_entry(entry: FileLogEntry) -> str:
    record = {
        "taskId": entry.task_id,
        "timestamp": format_timestamp(entry.timestamp),
        "message": entry.message,
    }
    return json.dumps(record, ensure_ascii=False, separators=(",", ":")) + "\n"


def decode_line(line: str) -> FileLogEntry | None:
    """None for anything that is not a complete record."""
    try:
        raw = json.loads(line)
    except ValueError:
        return None
    if not isinstance(raw, dict):
        return None

    task_id = raw.get("taskId")
    timestamp = raw.get("timestamp")
    message = raw.get("message")
    if not (isinstance(task_id, str) and isinstance(timestamp, str) and isinstance(message, str)):
        return None

    try:
        ts = as_utc(datetime.fromisoformat(timestamp))
    except ValueError:
        return None

    return FileLogEntry(task_id=task_id, timestamp=ts, message=message)


def append(simbl_dir: str | Path, entry: FileLogEntry) -> None:
    """Append exactly one line; never rewrites the file."""
    append_many(simbl_dir, [entry])


def append_many(simbl_dir: str | Path, entries: Sequence[FileLogEntry]) -> None:
    """
    Append several lines with a single write, so either all of them land or
    (barring a short write, which raises) none do.
    """
    if not entries:
        return
    data = "".join(encode_entry(e) for e in entries).encode("utf-8")
    path = log_path(simbl_dir)

    fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
    try:
        written = os.write(fd, data)
    finally:
        os.close(fd)

    if written != len(data):
        raise OSError(f"short write to {path}: {written}/{len(data)} bytes")

    logger.debug("Logged %d record(s) to %s", len(entries), path)


def read_all(simbl_dir: str | Path) -> list[FileLogEntry]:
    """Every usable record, in file order."""
    path = log_path(simbl_dir)
    if not path.exists():
        return []

    # errors="replace": a torn multi-byte char must not fail the whole read.
    text = path.read_text(encoding="utf-8", errors="replace")

    entries: list[FileLogEntry] = []
    skipped = 0
    # Split on "\n" only; messages may contain other Unicode line breaks.
    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        entry = decode_line(line)
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)

    if skipped:
        logger.debug("Skipped %d malformed line(s) in %s", skipped, path)
    return entries


def for_task(simbl_dir: str | Path, task_id: str) -> list[FileLogEntry]:
    """Records of one task, newest first."""
    entries = [e for e in read_all(simbl_dir) if e.task_id == task_id]
    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries
