# src/simbl/tasks/__init__.py

from .task_models import ReservedTags, Section, SimblFile, Task, TaskStatus

__all__ = ["ReservedTags", "Section", "SimblFile", "Task", "TaskStatus"]
