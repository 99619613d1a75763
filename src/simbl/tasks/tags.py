# src/simbl/tasks/tags.py

"""
Reserved tag semantics.

Tags are raw strings from the tag line (`[p1][design][child-of-task-3]`).
A handful of patterns carry meaning; everything else is a custom tag.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .task_models import ReservedTags, Section, TaskStatus

PRIORITY_RE = re.compile(r"^p([1-9])$")
PROJECT_RE = re.compile(r"^project:(.+)$")
CHILD_OF_RE = re.compile(r"^child-of-(.+)$")
DEPENDS_ON_RE = re.compile(r"^depends-on-(.+)$")
TAG_TOKEN_RE = re.compile(r"\[([^\]]+)\]")

IN_PROGRESS_TAG = "in-progress"
CANCELED_TAG = "canceled"
REFINED_TAG = "refined"

CHILD_OF_PREFIX = "child-of-"
DEPENDS_ON_PREFIX = "depends-on-"


class TagKind(StrEnum):
    PRIORITY = "priority"
    PROJECT = "project"
    CHILD_OF = "child-of"
    DEPENDS_ON = "depends-on"
    IN_PROGRESS = "in-progress"
    CANCELED = "canceled"
    REFINED = "refined"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class TagInfo:
    kind: TagKind
    # int for priority, str for project/child-of/depends-on/custom, None for flags.
    value: int | str | None = None


_FLAG_TAGS = {
    IN_PROGRESS_TAG: TagKind.IN_PROGRESS,
    CANCELED_TAG: TagKind.CANCELED,
    REFINED_TAG: TagKind.REFINED,
}


def classify(tag: str) -> TagInfo:
    m = PRIORITY_RE.match(tag)
    if m:
        return TagInfo(TagKind.PRIORITY, int(m.group(1)))

    m = PROJECT_RE.match(tag)
    if m:
        return TagInfo(TagKind.PROJECT, m.group(1))

    m = CHILD_OF_RE.match(tag)
    if m:
        return TagInfo(TagKind.CHILD_OF, m.group(1))

    m = DEPENDS_ON_RE.match(tag)
    if m:
        return TagInfo(TagKind.DEPENDS_ON, m.group(1))

    flag = _FLAG_TAGS.get(tag)
    if flag is not None:
        return TagInfo(flag)

    return TagInfo(TagKind.CUSTOM, tag)


def is_priority_tag(tag: str) -> bool:
    return PRIORITY_RE.match(tag) is not None


def fold(tags: Iterable[str]) -> ReservedTags:
    """
    Fold raw tags into ReservedTags, in tag order.

    - priority / project / child-of: last occurrence wins
    - depends-on: every occurrence appended (duplicates kept)
    - flags: OR'd

    Several priority tags are tolerated here; tag replacement call sites
    strip the old one and append the new one, and rely on last-wins.
    """
    reserved = ReservedTags()

    for tag in tags:
        info = classify(tag)
        if info.kind is TagKind.PRIORITY:
            reserved.priority = int(info.value)  # type: ignore[arg-type]
        elif info.kind is TagKind.PROJECT:
            reserved.project = str(info.value)
        elif info.kind is TagKind.CHILD_OF:
            reserved.parent_id = str(info.value)
        elif info.kind is TagKind.DEPENDS_ON:
            reserved.depends_on.append(str(info.value))
        elif info.kind is TagKind.IN_PROGRESS:
            reserved.in_progress = True
        elif info.kind is TagKind.CANCELED:
            reserved.canceled = True
        elif info.kind is TagKind.REFINED:
            reserved.refined = True

    return reserved


def derive_status(section: Section | str, reserved: ReservedTags) -> TaskStatus:
    if reserved.canceled:
        return TaskStatus.CANCELED
    if Section(section) is Section.DONE:
        return TaskStatus.DONE
    if reserved.in_progress:
        return TaskStatus.IN_PROGRESS
    return TaskStatus.BACKLOG


def parse_tag_line(line: str) -> list[str]:
    """`[p1][design][project:auth]` -> ["p1", "design", "project:auth"]"""
    return TAG_TOKEN_RE.findall(line)


def format_tag_line(tags: Iterable[str]) -> str:
    return "".join(f"[{t}]" for t in tags)
