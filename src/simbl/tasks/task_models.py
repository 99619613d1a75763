# src/simbl/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Section(StrEnum):
    BACKLOG = "backlog"
    DONE = "done"


class TaskStatus(StrEnum):
    """
    Workflow status. Always derived, never stored:
    - section decides backlog vs done
    - [in-progress] / [canceled] tags refine it
    """

    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    CANCELED = "canceled"


@dataclass(slots=True)
class ReservedTags:
    priority: int | None = None
    project: str | None = None
    parent_id: str | None = None
    depends_on: list[str] = field(default_factory=list)
    in_progress: bool = False
    canceled: bool = False
    refined: bool = False


@dataclass(slots=True)
class Task:
    id: str
    title: str
    tags: list[str]
    reserved: ReservedTags
    status: TaskStatus
    # Raw markdown below the tag line (H3+ sections, paragraphs, lists...).
    content: str
    section: Section


@dataclass(slots=True)
class SimblFile:
    backlog: list[Task] = field(default_factory=list)
    done: list[Task] = field(default_factory=list)
    # Anything before the first H1 heading.
    preamble: str | None = None

    def section_tasks(self, section: Section) -> list[Task]:
        return self.backlog if section is Section.BACKLOG else self.done
