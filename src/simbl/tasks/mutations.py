# src/simbl/tasks/mutations.py

"""
In-place edits on tasks and documents.

Every helper edits the raw tag list and then recomputes reserved tags and
status, so callers never touch ReservedTags directly. Edge-creating edits
(set_parent, add_dependency) run the cycle check first and leave the
document untouched when they refuse.

Helpers return a short human message describing the change (suitable for the
task log), or None when nothing changed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..core.errors import CycleError, InvalidRelationError, TaskNotFoundError, TaskStateError
from ..tasklog.embedded import join_embedded, split_embedded
from .document import find_task_by_id, get_all_tasks
from .ids import next_id
from .relations import would_create_cycle
from .tags import (
    CANCELED_TAG,
    CHILD_OF_PREFIX,
    DEPENDS_ON_PREFIX,
    IN_PROGRESS_TAG,
    PROJECT_RE,
    derive_status,
    fold,
    is_priority_tag,
)
from .task_models import Section, SimblFile, Task

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#{1,6})(?=[ \t])", re.MULTILINE)


def refresh(task: Task) -> None:
    """Recompute reserved tags and status from tags + section."""
    task.reserved = fold(task.tags)
    task.status = derive_status(task.section, task.reserved)


def _clean_tag(tag: str) -> str:
    # Users often type the brackets: "[p1]" -> "p1".
    cleaned = tag.strip()
    if cleaned.startswith("["):
        cleaned = cleaned[1:]
    if cleaned.endswith("]"):
        cleaned = cleaned[:-1]
    cleaned = cleaned.strip()
    if not cleaned or "[" in cleaned or "]" in cleaned:
        raise ValueError(f"invalid tag: {tag!r}")
    return cleaned


def _require(file: SimblFile, task_id: str) -> Task:
    task = find_task_by_id(file, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


# ---- tags ----

def add_tag(task: Task, tag: str) -> str | None:
    """
    Append a tag. Adding a priority strips every existing priority tag
    first, so a task keeps at most one.
    """
    tag = _clean_tag(tag)
    if tag in task.tags:
        return None

    previous: str | None = None
    if is_priority_tag(tag):
        old = [t for t in task.tags if is_priority_tag(t)]
        if old:
            previous = old[-1]
            task.tags = [t for t in task.tags if not is_priority_tag(t)]

    task.tags.append(tag)
    refresh(task)

    if previous is not None:
        return f"Priority changed from [{previous}] to [{tag}]"
    return f"Added tag [{tag}]"


def remove_tag(task: Task, tag: str) -> str | None:
    tag = _clean_tag(tag)
    if tag not in task.tags:
        return None

    task.tags = [t for t in task.tags if t != tag]
    refresh(task)
    return f"Removed tag [{tag}]"


def set_priority(task: Task, priority: int) -> str | None:
    if not 1 <= int(priority) <= 9:
        raise ValueError("priority must be between 1 and 9")
    return add_tag(task, f"p{int(priority)}")


# ---- relations ----

def set_parent(file: SimblFile, task_id: str, parent_id: str) -> str:
    task = _require(file, task_id)

    if parent_id == task_id:
        raise InvalidRelationError("A task cannot be its own parent")
    _require(file, parent_id)

    if would_create_cycle(task_id, parent_id, get_all_tasks(file)):
        logger.info("Refused parent %s -> %s: cycle", task_id, parent_id)
        raise CycleError(task_id, parent_id)

    task.tags = [t for t in task.tags if not t.startswith(CHILD_OF_PREFIX)]
    task.tags.append(f"{CHILD_OF_PREFIX}{parent_id}")
    refresh(task)
    return f"Parent set to {parent_id}"


def add_dependency(file: SimblFile, task_id: str, dep_id: str) -> str:
    task = _require(file, task_id)

    if dep_id == task_id:
        raise InvalidRelationError("A task cannot depend on itself")
    _require(file, dep_id)

    if dep_id in task.reserved.depends_on:
        raise InvalidRelationError(f'Task "{task_id}" already depends on "{dep_id}"')

    if would_create_cycle(task_id, dep_id, get_all_tasks(file)):
        logger.info("Refused dependency %s -> %s: cycle", task_id, dep_id)
        raise CycleError(task_id, dep_id)

    task.tags.append(f"{DEPENDS_ON_PREFIX}{dep_id}")
    refresh(task)
    return f"Added dependency on {dep_id}"


def remove_parent(file: SimblFile, task_id: str) -> str | None:
    task = _require(file, task_id)
    if task.reserved.parent_id is None:
        return None

    old = task.reserved.parent_id
    task.tags = [t for t in task.tags if not t.startswith(CHILD_OF_PREFIX)]
    refresh(task)
    return f"Removed parent {old}"


def remove_dependency(file: SimblFile, task_id: str, dep_id: str) -> str | None:
    task = _require(file, task_id)
    tag = f"{DEPENDS_ON_PREFIX}{dep_id}"
    if tag not in task.tags:
        return None

    task.tags = [t for t in task.tags if t != tag]
    refresh(task)
    return f"Removed dependency on {dep_id}"


# ---- section moves ----

def _take_from_backlog(file: SimblFile, task_id: str, verb: str) -> Task:
    for i, task in enumerate(file.backlog):
        if task.id == task_id:
            return file.backlog.pop(i)
    if any(t.id == task_id for t in file.done):
        raise TaskStateError(f'Task "{task_id}" is already done; cannot {verb} it')
    raise TaskNotFoundError(task_id)


def mark_done(file: SimblFile, task_id: str) -> Task:
    """Move a backlog task to the top of Done (most recent first)."""
    task = _take_from_backlog(file, task_id, "complete")

    task.section = Section.DONE
    task.tags = [t for t in task.tags if t != IN_PROGRESS_TAG]
    refresh(task)

    file.done.insert(0, task)
    return task


def cancel_task(file: SimblFile, task_id: str) -> Task:
    """Tag as [canceled] and move to the top of Done."""
    task = _take_from_backlog(file, task_id, "cancel")

    task.section = Section.DONE
    task.tags = [t for t in task.tags if t != IN_PROGRESS_TAG]
    if CANCELED_TAG not in task.tags:
        task.tags.append(CANCELED_TAG)
    refresh(task)

    file.done.insert(0, task)
    return task


# ---- content ----

def normalize_headings(text: str) -> str:
    """
    Shift headings down two levels (H1 -> H3, capped at H6).

    Task content must not contain H1/H2: those would start a section or a task.
    """
    return _HEADING_RE.sub(lambda m: "#" * min(len(m.group(1)) + 2, 6), text)


def _normalized_body(text: str) -> str:
    return normalize_headings(text.strip("\n"))


# ---- create / update ----

def create_task(
    file: SimblFile,
    title: str,
    *,
    prefix: str,
    tags: Iterable[str] = (),
    content: str | None = None,
    priority: int | None = None,
    project: str | None = None,
    archive_text: str | None = None,
) -> Task:
    """
    Append a new task to the end of Backlog and return it.

    The id is the next free `<prefix>-N` (archived ids included). `priority`
    and `project` replace any matching tag from `tags`; content is wrapped in
    a `### Description` section with its headings shifted below H2.
    Recording "Task created" is left to the caller (see simbl.tasklog.events).
    """
    title = title.strip()
    if not title:
        raise ValueError("Task title must not be empty")

    task_tags = [_clean_tag(t) for t in tags]
    if priority is not None:
        if not 1 <= priority <= 9:
            raise ValueError(f"priority must be 1-9, got {priority}")
        task_tags = [t for t in task_tags if not is_priority_tag(t)]
        task_tags.insert(0, f"p{priority}")
    if project:
        task_tags = [t for t in task_tags if not PROJECT_RE.match(t)]
        task_tags.append(f"project:{_clean_tag(project)}")

    body = ""
    if content and content.strip():
        body = f"### Description\n\n{_normalized_body(content)}"

    reserved = fold(task_tags)
    task = Task(
        id=next_id(prefix, file, archive_text),
        title=title,
        tags=task_tags,
        reserved=reserved,
        status=derive_status(Section.BACKLOG, reserved),
        content=body,
        section=Section.BACKLOG,
    )
    file.backlog.append(task)
    logger.info("Created task=%s title=%r", task.id, task.title)
    return task


def update_task(
    task: Task,
    *,
    title: str | None = None,
    content: str | None = None,
    append: str | None = None,
) -> list[str]:
    """
    Replace the title and/or content, or append to the content.

    Returns what changed ("title", "content", "content (appended)"). A legacy
    embedded log stays at the end of the content either way.
    """
    if title is None and content is None and append is None:
        raise ValueError("Provide title, content or append to update")

    changes: list[str] = []

    if title is not None:
        title = title.strip()
        if not title:
            raise ValueError("Task title must not be empty")
        task.title = title
        changes.append("title")

    user, log = split_embedded(task.content)

    if content is not None:
        user = _normalized_body(content)
        changes.append("content")

    if append is not None and append.strip():
        extra = _normalized_body(append)
        user = f"{user}\n\n{extra}" if user else extra
        changes.append("content (appended)")

    task.content = join_embedded(user, log)
    return changes


# ---- archive ----

def archive_tasks(file: SimblFile, archive: SimblFile, task_ids: Iterable[str]) -> list[Task]:
    """
    Move done tasks to the top of the archive's Done section.

    This is the only way a task leaves tasks.md. Every id is checked before
    anything moves: backlog tasks raise TaskStateError, unknown ids
    TaskNotFoundError.
    """
    wanted = list(dict.fromkeys(task_ids))
    done_ids = {t.id for t in file.done}

    for task_id in wanted:
        if task_id in done_ids:
            continue
        if any(t.id == task_id for t in file.backlog):
            raise TaskStateError(f'Task "{task_id}" is not done; only done tasks can be archived')
        raise TaskNotFoundError(task_id)

    selected = set(wanted)
    moved = [t for t in file.done if t.id in selected]
    file.done = [t for t in file.done if t.id not in selected]
    archive.done[:0] = moved

    logger.info("Archived %d task(s): %s", len(moved), ", ".join(t.id for t in moved))
    return moved
