# src/simbl/core/errors.py

from __future__ import annotations


class SimblError(Exception):
    """Base class for all simbl errors."""


class DocumentParseError(SimblError):
    """tasks.md could not be tokenized; treat the store as corrupt."""


class TaskNotFoundError(SimblError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f'Task "{task_id}" not found')
        self.task_id = task_id


class InvalidRelationError(SimblError):
    """A parent/dependency edit was refused before touching the document."""


class CycleError(InvalidRelationError):
    def __init__(self, subject_id: str, target_id: str) -> None:
        super().__init__(f'Linking "{subject_id}" to "{target_id}" would create a circular dependency')
        self.subject_id = subject_id
        self.target_id = target_id


class MigrationError(SimblError):
    """Backup creation or document write failed during log migration."""


class TaskStateError(SimblError):
    """The task is in the wrong section for the requested move."""
