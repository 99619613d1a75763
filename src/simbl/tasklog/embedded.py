# src/simbl/tasklog/embedded.py

"""
Legacy task log embedded at the end of task content:

    ***

    task-log

    - 2025-12-17T14:32:00Z | Message here
    - 2025-12-17T14:30:00Z | Another message

Entries are newest-first, second precision, UTC. New code writes to the
centralized log (file_log.py); these helpers stay for reading old stores
and for the migration.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime

from ..config import get_settings
from .log_models import LogEntry, as_utc, utc_now

LOG_SECTION_MARKER = "***\n\ntask-log\n"

# Also matches a marker at the very start (task with no user content).
LOG_SECTION_RE = re.compile(r"(?:^|\n)\*\*\*\n\ntask-log\n")

LOG_ENTRY_RE = re.compile(r"^- (\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z) \| (.+)$")

_TS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _format_timestamp(ts: datetime) -> str:
    return as_utc(ts).strftime(_TS_FORMAT)


def _parse_timestamp(raw: str) -> datetime | None:
    try:
        return as_utc(datetime.strptime(raw, _TS_FORMAT))
    except ValueError:
        return None


def _format_entry(ts: datetime, message: str) -> str:
    return f"- {_format_timestamp(ts)} | {message}"


def has_embedded_log(content: str) -> bool:
    return bool(content) and LOG_SECTION_RE.search(content) is not None


def parse_embedded(content: str) -> list[LogEntry]:
    """Entries below the marker, in file order (newest first). Non-entry lines are skipped."""
    if not content:
        return []

    m = LOG_SECTION_RE.search(content)
    if m is None:
        return []

    entries: list[LogEntry] = []
    for line in content[m.end():].split("\n"):
        em = LOG_ENTRY_RE.match(line.strip())
        if em is None:
            continue
        ts = _parse_timestamp(em.group(1))
        if ts is None:
            continue
        entries.append(LogEntry(timestamp=ts, message=em.group(2)))

    return entries


def strip_embedded(content: str) -> str:
    """User content without the log section."""
    if not content:
        return ""

    m = LOG_SECTION_RE.search(content)
    if m is None:
        return content

    return content[: m.start()].rstrip()


def split_embedded(content: str) -> tuple[str, str]:
    """
    (user content, log section). The log part keeps its leading newline so
    join_embedded(user, log) puts it back; it is "" when there is no log.
    """
    m = LOG_SECTION_RE.search(content or "")
    if m is None:
        return content or "", ""
    return content[: m.start()].rstrip(), "\n" + content[m.start() :].lstrip("\n")


def join_embedded(user_content: str, log_section: str) -> str:
    if not user_content:
        return log_section.lstrip("\n")
    return user_content + log_section


def serialize_embedded_entries(entries: Iterable[LogEntry]) -> str:
    return "\n".join(_format_entry(e.timestamp, e.message) for e in entries)


def _compose(user_content: str, entry_lines: list[str]) -> str:
    body = "\n".join(entry_lines)
    if user_content:
        return f"{user_content}\n{LOG_SECTION_MARKER}\n{body}"
    return f"{LOG_SECTION_MARKER}\n{body}"


def append_embedded(content: str, message: str, ts: datetime | None = None) -> str:
    """Put a new entry on top, creating the log section if needed."""
    ts = utc_now() if ts is None else ts

    entry_lines = [_format_entry(ts, message)]
    entry_lines.extend(_format_entry(e.timestamp, e.message) for e in parse_embedded(content))

    return _compose(strip_embedded(content), entry_lines)


def append_or_batch_embedded(
    content: str,
    message: str,
    window_minutes: float | None = None,
    ts: datetime | None = None,
) -> str:
    """
    Like append_embedded, but if the newest entry has exactly the same message
    and is younger than the window, only its timestamp moves to `ts`.

    Keeps "Content updated" from piling up during a burst of edits.
    """
    ts = utc_now() if ts is None else ts
    if window_minutes is None:
        window_minutes = get_settings().batch_minutes

    existing = parse_embedded(content)
    if not existing:
        return append_embedded(content, message, ts)

    newest = existing[0]
    minutes = (as_utc(ts) - newest.timestamp).total_seconds() / 60

    # Exact string match only: "Added tag [a]" and "Added tag [b]" never merge.
    if minutes < window_minutes and newest.message == message:
        entry_lines = [_format_entry(ts, message)]
        entry_lines.extend(_format_entry(e.timestamp, e.message) for e in existing[1:])
        return _compose(strip_embedded(content), entry_lines)

    return append_embedded(content, message, ts)
