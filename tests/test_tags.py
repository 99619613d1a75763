# tests/test_tags.py

from __future__ import annotations

import pytest

from simbl.tasks.tags import (
    TagInfo,
    TagKind,
    classify,
    derive_status,
    fold,
    format_tag_line,
    parse_tag_line,
)
from simbl.tasks.task_models import ReservedTags, Section, TaskStatus


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("p1", TagInfo(TagKind.PRIORITY, 1)),
        ("p9", TagInfo(TagKind.PRIORITY, 9)),
        ("project:auth", TagInfo(TagKind.PROJECT, "auth")),
        ("child-of-task-3", TagInfo(TagKind.CHILD_OF, "task-3")),
        ("depends-on-task-4", TagInfo(TagKind.DEPENDS_ON, "task-4")),
        ("in-progress", TagInfo(TagKind.IN_PROGRESS)),
        ("canceled", TagInfo(TagKind.CANCELED)),
        ("refined", TagInfo(TagKind.REFINED)),
        ("p0", TagInfo(TagKind.CUSTOM, "p0")),
        ("p10", TagInfo(TagKind.CUSTOM, "p10")),
        ("project:", TagInfo(TagKind.CUSTOM, "project:")),
        ("design", TagInfo(TagKind.CUSTOM, "design")),
    ],
)
def test_classify(tag: str, expected: TagInfo) -> None:
    assert classify(tag) == expected


def test_fold_priority_last_occurrence_wins() -> None:
    assert fold(["p2", "p1"]).priority == 1
    assert fold(["p1", "x", "p7"]).priority == 7


def test_fold_flags_are_ored() -> None:
    reserved = fold(["in-progress", "in-progress"])

    assert reserved.in_progress is True
    assert reserved.canceled is False
    assert reserved.refined is False


def test_fold_dependencies_keep_duplicates_and_parent_overwrites() -> None:
    reserved = fold(["depends-on-a", "child-of-x", "depends-on-a", "child-of-y", "depends-on-b"])

    assert reserved.depends_on == ["a", "a", "b"]
    assert reserved.parent_id == "y"


def test_fold_empty() -> None:
    assert fold([]) == ReservedTags()


@pytest.mark.parametrize(
    ("section", "reserved", "expected"),
    [
        (Section.DONE, ReservedTags(canceled=True), TaskStatus.CANCELED),
        (Section.BACKLOG, ReservedTags(canceled=True, in_progress=True), TaskStatus.CANCELED),
        (Section.BACKLOG, ReservedTags(in_progress=True), TaskStatus.IN_PROGRESS),
        (Section.DONE, ReservedTags(in_progress=True), TaskStatus.DONE),
        (Section.DONE, ReservedTags(), TaskStatus.DONE),
        (Section.BACKLOG, ReservedTags(), TaskStatus.BACKLOG),
    ],
)
def test_derive_status(section: Section, reserved: ReservedTags, expected: TaskStatus) -> None:
    assert derive_status(section, reserved) is expected


def test_derive_status_accepts_plain_strings() -> None:
    assert derive_status("done", ReservedTags()) == "done"


def test_tag_line_parse_and_format() -> None:
    tags = parse_tag_line("[p1][design] [project:auth] trailing")

    assert tags == ["p1", "design", "project:auth"]
    assert format_tag_line(tags) == "[p1][design][project:auth]"
    assert format_tag_line([]) == ""
