# tests/test_ids.py

from __future__ import annotations

from simbl.tasks.document import parse
from simbl.tasks.ids import extract_id_number, find_max_id_number, is_valid_id, next_id


def test_extract_and_max() -> None:
    assert extract_id_number("task-42") == 42
    assert extract_id_number("abc-1") == 1
    assert extract_id_number("misc") is None
    assert find_max_id_number(["task-2", "misc", "task-10"]) == 10
    assert find_max_id_number([]) == 0


def test_next_id_considers_archive(sample_text: str) -> None:
    doc = parse(sample_text)

    assert next_id("task", doc) == "task-4"
    assert next_id("task", doc, "# Archived Tasks\n\n## task-17 Old\n") == "task-18"


def test_is_valid_id() -> None:
    assert is_valid_id("task-1", "task")
    assert not is_valid_id("smb-1", "task")
    assert not is_valid_id("task-1x", "task")
    assert is_valid_id("a.b-3", "a.b")
    assert not is_valid_id("axb-3", "a.b")
    assert is_valid_id("abc-12")
    assert not is_valid_id("12-abc")
