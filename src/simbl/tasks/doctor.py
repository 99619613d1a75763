# src/simbl/tasks/doctor.py

"""
Read-only health report for tasks.md.

Nothing here repairs the document. Duplicate ids, several priority tags,
dangling references and cycles are legal to parse; they are reported so a
human can fix them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..core.errors import DocumentParseError
from ..core.ports import BlockCodec
from ..markdown.blocks import BlockKind, default_codec
from .document import get_all_tasks, parse
from .ids import is_valid_id
from .relations import find_all_cycles
from .tags import is_priority_tag

_ALLOWED_SECTIONS = ("backlog", "done")


class IssueLevel(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Issue:
    level: IssueLevel
    message: str
    task_id: str | None = None


def validate_document(text: str, prefix: str, *, codec: BlockCodec | None = None) -> list[Issue]:
    codec = codec or default_codec()
    issues: list[Issue] = []

    try:
        blocks = codec.tokenize(text)
        file = parse(text, codec=codec)
    except DocumentParseError as exc:
        return [Issue(IssueLevel.ERROR, f"Failed to parse tasks file: {exc}")]

    h1_texts = [b.text.strip().lower() for b in blocks if b.kind is BlockKind.HEADING and b.depth == 1]

    for name in _ALLOWED_SECTIONS:
        if name not in h1_texts:
            issues.append(Issue(IssueLevel.ERROR, f'Missing required H1 heading "# {name.capitalize()}"'))

    for h1 in h1_texts:
        if h1 not in _ALLOWED_SECTIONS:
            issues.append(
                Issue(
                    IssueLevel.ERROR,
                    f'Unexpected H1 heading "# {h1}" - only "Backlog" and "Done" are allowed',
                )
            )

    tasks = get_all_tasks(file)
    known_ids = {t.id for t in tasks}
    seen: set[str] = set()

    for task in tasks:
        if not is_valid_id(task.id, prefix):
            issues.append(
                Issue(IssueLevel.WARNING, f'Task ID "{task.id}" doesn\'t match expected format "{prefix}-N"', task.id)
            )

        if task.id in seen:
            issues.append(Issue(IssueLevel.ERROR, f'Duplicate task ID "{task.id}"', task.id))
        seen.add(task.id)

        priorities = [t for t in task.tags if is_priority_tag(t)]
        if len(priorities) > 1:
            issues.append(
                Issue(IssueLevel.ERROR, f"Task has multiple priority tags: {', '.join(priorities)}", task.id)
            )

        parent = task.reserved.parent_id
        if parent and parent not in known_ids:
            issues.append(Issue(IssueLevel.WARNING, f'Parent task "{parent}" not found', task.id))

        for dep in task.reserved.depends_on:
            if dep not in known_ids:
                issues.append(Issue(IssueLevel.WARNING, f'Dependency task "{dep}" not found', task.id))

    for cycle in find_all_cycles(tasks):
        issues.append(Issue(IssueLevel.ERROR, f"Circular dependency detected: {' -> '.join(cycle)}"))

    return issues
