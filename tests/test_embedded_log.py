# tests/test_embedded_log.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from simbl.tasklog.embedded import (
    append_embedded,
    append_or_batch_embedded,
    has_embedded_log,
    join_embedded,
    parse_embedded,
    serialize_embedded_entries,
    split_embedded,
    strip_embedded,
)
from simbl.tasklog.log_models import LogEntry

T0 = datetime(2025, 12, 17, 14, 30, 0, tzinfo=UTC)

CONTENT = """### Description

Do the thing.

***

task-log

- 2025-12-17T14:32:00Z | Title updated
- 2025-12-17T14:30:00Z | Task created"""


def test_parse_entries_newest_first() -> None:
    entries = parse_embedded(CONTENT)

    assert entries == [
        LogEntry(datetime(2025, 12, 17, 14, 32, tzinfo=UTC), "Title updated"),
        LogEntry(T0, "Task created"),
    ]


def test_parse_skips_lines_that_are_not_entries() -> None:
    content = "***\n\ntask-log\n\n- not an entry\n- 2025-13-40T99:00:00Z | bad date\n- 2025-12-17T14:30:00Z | ok"

    assert parse_embedded(content) == [LogEntry(T0, "ok")]


def test_no_marker_means_no_entries() -> None:
    assert parse_embedded("") == []
    assert parse_embedded("Plain content\n\n- 2025-12-17T14:30:00Z | looks like an entry") == []
    assert not has_embedded_log("Plain content")
    assert has_embedded_log(CONTENT)


def test_strip_returns_user_content() -> None:
    assert strip_embedded(CONTENT) == "### Description\n\nDo the thing."
    assert strip_embedded("no log here  ") == "no log here  "
    assert strip_embedded("***\n\ntask-log\n\n- 2025-12-17T14:30:00Z | x") == ""


def test_append_to_empty_content_creates_marker() -> None:
    out = append_embedded("", "Task created", T0)

    assert out == "***\n\ntask-log\n\n- 2025-12-17T14:30:00Z | Task created"


def test_append_puts_new_entry_first() -> None:
    out = append_embedded("Some text", "Task created", T0)
    out = append_embedded(out, "Added tag [x]", T0 + timedelta(minutes=1))

    assert out == (
        "Some text\n***\n\ntask-log\n\n"
        "- 2025-12-17T14:31:00Z | Added tag [x]\n"
        "- 2025-12-17T14:30:00Z | Task created"
    )
    assert strip_embedded(out) == "Some text"


def test_batch_within_window_moves_timestamp() -> None:
    c = append_or_batch_embedded("", "Content updated", 30, T0)
    c = append_or_batch_embedded(c, "Content updated", 30, T0 + timedelta(minutes=5))

    assert parse_embedded(c) == [LogEntry(T0 + timedelta(minutes=5), "Content updated")]


def test_batch_outside_window_appends() -> None:
    c = append_or_batch_embedded("", "Content updated", 30, T0)
    c = append_or_batch_embedded(c, "Content updated", 30, T0 + timedelta(minutes=40))

    assert [e.timestamp for e in parse_embedded(c)] == [T0 + timedelta(minutes=40), T0]


def test_batch_requires_identical_message() -> None:
    c = append_or_batch_embedded("", "Added tag [a]", 30, T0)
    c = append_or_batch_embedded(c, "Added tag [b]", 30, T0 + timedelta(minutes=1))

    assert [e.message for e in parse_embedded(c)] == ["Added tag [b]", "Added tag [a]"]


def test_batch_only_touches_newest_entry() -> None:
    c = append_embedded("", "Content updated", T0)
    c = append_embedded(c, "Title updated", T0 + timedelta(minutes=1))
    c = append_or_batch_embedded(c, "Content updated", 30, T0 + timedelta(minutes=2))

    assert [e.message for e in parse_embedded(c)] == ["Content updated", "Title updated", "Content updated"]


def test_batch_default_window_is_thirty_minutes() -> None:
    c = append_or_batch_embedded("", "Content updated", ts=T0)
    c = append_or_batch_embedded(c, "Content updated", ts=T0 + timedelta(minutes=29))
    assert len(parse_embedded(c)) == 1

    c = append_or_batch_embedded(c, "Content updated", ts=T0 + timedelta(minutes=60))
    assert len(parse_embedded(c)) == 2


def test_naive_timestamps_are_utc() -> None:
    out = append_embedded("", "x", datetime(2025, 1, 2, 3, 4, 5))

    assert out.endswith("- 2025-01-02T03:04:05Z | x")


def test_serialize_entries() -> None:
    assert serialize_embedded_entries(parse_embedded(CONTENT)) == (
        "- 2025-12-17T14:32:00Z | Title updated\n- 2025-12-17T14:30:00Z | Task created"
    )
    assert serialize_embedded_entries([]) == ""


def test_split_and_join_embedded() -> None:
    content = "Body\n***\n\ntask-log\n\n- 2025-12-17T14:30:00Z | Task created"

    user, log = split_embedded(content)
    assert user == "Body"
    assert join_embedded(user, log) == content
    assert join_embedded("", log) == "***\n\ntask-log\n\n- 2025-12-17T14:30:00Z | Task created"

    assert split_embedded("No log") == ("No log", "")
    assert split_embedded("") == ("", "")
