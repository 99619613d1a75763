# src/simbl/tasks/relations.py

"""
Parent / dependency graph checks.

Edges are task -> parent_id and task -> each depends_on id. Both walks
below are iterative (explicit stacks + id->task map), so deep chains do not
hit the interpreter recursion limit. Dangling ids are valid nodes with no
outgoing edges.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import Task


def _index(tasks: Iterable[Task]) -> dict[str, Task]:
    return {t.id: t for t in tasks}


def _edges(task: Task | None) -> list[str]:
    if task is None:
        return []
    out = list(task.reserved.depends_on)
    if task.reserved.parent_id:
        out.append(task.reserved.parent_id)
    return out


def would_create_cycle(from_id: str, to_id: str, tasks: Iterable[Task]) -> bool:
    """
    True if adding the edge from_id -> to_id would close a cycle, i.e. to_id
    already reaches from_id.

    Callers reject from_id == to_id before getting here.
    """
    by_id = _index(tasks)
    visited: set[str] = set()
    stack = [to_id]

    while stack:
        current = stack.pop()
        if current == from_id:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(_edges(by_id.get(current)))

    return False


def find_all_cycles(tasks: Iterable[Task]) -> list[list[str]]:
    """
    Every cycle met by a full-graph DFS, as id paths closed by the repeated id
    (["a", "b", "a"]). Read-only; used by the doctor report.
    """
    task_list = list(tasks)
    by_id = _index(task_list)
    visited: set[str] = set()
    cycles: list[list[str]] = []

    for root in task_list:
        if root.id in visited:
            continue

        visited.add(root.id)
        path = [root.id]
        on_path = {root.id}
        frames = [iter(_edges(by_id.get(root.id)))]

        while frames:
            nxt = next(frames[-1], None)
            if nxt is None:
                frames.pop()
                on_path.discard(path.pop())
                continue
            if nxt in on_path:
                cycles.append(path[path.index(nxt):] + [nxt])
                continue
            if nxt in visited:
                continue
            visited.add(nxt)
            path.append(nxt)
            on_path.add(nxt)
            frames.append(iter(_edges(by_id.get(nxt))))

    return cycles
