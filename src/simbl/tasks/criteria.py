# src/simbl/tasks/criteria.py

"""
Acceptance criteria: a checklist kept inside task content.

    ##### Acceptance Criteria

    - [ ] Parser handles CRLF
    - [x] Round-trip is byte-identical

The section runs from its header (H5, or H6 after a heading shift) to the
next heading or thematic break. Lines that are not checkbox items are
ignored when reading and dropped when the section is rewritten.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..tasklog.embedded import join_embedded, split_embedded
from .task_models import Task

logger = logging.getLogger(__name__)

AC_HEADER = "##### Acceptance Criteria"
_AC_HEADERS = {AC_HEADER, "###### Acceptance Criteria"}
_SECTION_END = {"***", "---", "___"}

_CHECKBOX_RE = re.compile(r"^- \[([ xX])\] (.+)$")


@dataclass(slots=True)
class AcceptanceCriterion:
    index: int  # 1-based
    text: str
    met: bool = False


def _find_section(lines: list[str]) -> tuple[int, int] | None:
    """(header line, first line after the section) or None."""
    start = next((i for i, line in enumerate(lines) if line.strip() in _AC_HEADERS), None)
    if start is None:
        return None

    for i in range(start + 1, len(lines)):
        stripped = lines[i].strip()
        if stripped.startswith("#") or stripped in _SECTION_END:
            return start, i
    return start, len(lines)


def parse_acceptance_criteria(content: str) -> list[AcceptanceCriterion]:
    lines = content.split("\n")
    section = _find_section(lines)
    if section is None:
        return []

    criteria: list[AcceptanceCriterion] = []
    for line in lines[section[0] + 1 : section[1]]:
        m = _CHECKBOX_RE.match(line)
        if m:
            criteria.append(
                AcceptanceCriterion(index=len(criteria) + 1, text=m.group(2), met=m.group(1).lower() == "x")
            )
    return criteria


def serialize_acceptance_criteria(criteria: list[AcceptanceCriterion]) -> str:
    if not criteria:
        return ""
    lines = [AC_HEADER, ""]
    lines.extend(f"- [{'x' if c.met else ' '}] {c.text}" for c in criteria)
    return "\n".join(lines)


def with_criteria(content: str, criteria: list[AcceptanceCriterion]) -> str:
    """
    Content with its criteria section replaced by `criteria`.

    A missing section is added after the user content (above a legacy
    embedded log, if any); an empty list removes the section. Everything
    outside the section is kept as is.
    """
    lines = content.split("\n")
    section = _find_section(lines)
    ac_text = serialize_acceptance_criteria(criteria)

    if section is None:
        if not criteria:
            return content
        # A new section goes above a legacy embedded log, never inside it.
        user, log = split_embedded(content)
        user = user.rstrip()
        return join_embedded(f"{user}\n\n{ac_text}" if user else ac_text, log)

    before = "\n".join(lines[: section[0]]).rstrip()
    after = "\n".join(lines[section[1] :]).strip("\n")
    return "\n\n".join(part for part in (before, ac_text, after) if part)


# ---- task-level edits ----

def _reindexed(criteria: list[AcceptanceCriterion]) -> list[AcceptanceCriterion]:
    for i, c in enumerate(criteria, start=1):
        c.index = i
    return criteria


def _checked_index(criteria: list[AcceptanceCriterion], index: int) -> AcceptanceCriterion:
    if index < 1 or index > len(criteria):
        raise ValueError(f"Invalid criterion index {index}; task has {len(criteria)} criteria")
    return criteria[index - 1]


def add_criteria(task: Task, *texts: str) -> list[AcceptanceCriterion]:
    """Append unchecked criteria; returns the full list."""
    cleaned = [t.strip() for t in texts if t.strip()]
    if not cleaned:
        raise ValueError("At least one acceptance criterion is required")

    criteria = parse_acceptance_criteria(task.content)
    criteria.extend(AcceptanceCriterion(index=0, text=t) for t in cleaned)
    _reindexed(criteria)

    task.content = with_criteria(task.content, criteria)
    logger.debug("Added %d criteria to task=%s", len(cleaned), task.id)
    return criteria


def set_criterion_met(task: Task, index: int, met: bool = True) -> bool:
    """Check or uncheck one criterion. False when it already had that state."""
    criteria = parse_acceptance_criteria(task.content)
    criterion = _checked_index(criteria, index)
    if criterion.met == met:
        return False

    criterion.met = met
    task.content = with_criteria(task.content, criteria)
    return True


def update_criterion(task: Task, index: int, text: str) -> None:
    text = text.strip()
    if not text:
        raise ValueError("Criterion text must not be empty")

    criteria = parse_acceptance_criteria(task.content)
    _checked_index(criteria, index).text = text
    task.content = with_criteria(task.content, criteria)


def delete_criterion(task: Task, index: int) -> AcceptanceCriterion:
    criteria = parse_acceptance_criteria(task.content)
    _checked_index(criteria, index)
    removed = criteria.pop(index - 1)

    task.content = with_criteria(task.content, _reindexed(criteria))
    return removed
