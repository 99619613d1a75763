# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from simbl.tasks.task_store import TaskStore

SAMPLE_DOCUMENT = """# Backlog

## task-1 Write the parser

[p2][in-progress][project:core]

Some description.

### Notes

- item 1
- item 2

## task-2

# Done

## task-3 Shipped it

[p1][canceled]
"""

LEGACY_DOCUMENT = """# Backlog

## smb-1 Test task

[p1]

### Description

Task content here

***

task-log

- 2025-12-20T19:00:00Z | Priority set to [p1]
- 2025-12-20T18:49:44Z | Task created

## smb-2 Plain task

Nothing logged here.

# Done

## smb-3 Finished

***

task-log

- 2025-12-21T09:00:00Z | Moved to Done
"""


@pytest.fixture()
def sample_text() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture()
def simbl_dir(tmp_path: Path) -> Path:
    """An empty `.simbl` directory inside the per-test tmp dir."""
    path = tmp_path / ".simbl"
    path.mkdir()
    return path


@pytest.fixture()
def store(simbl_dir: Path) -> TaskStore:
    s = TaskStore(simbl_dir)
    s.init(prefix="task")
    return s


@pytest.fixture()
def legacy_store(simbl_dir: Path) -> TaskStore:
    """Store with embedded logs and a config that predates logVersion."""
    (simbl_dir / "tasks.md").write_text(LEGACY_DOCUMENT, encoding="utf-8")
    (simbl_dir / "config.yaml").write_text("name: test\nprefix: smb\nwebPort: 3497\n", encoding="utf-8")
    return TaskStore(simbl_dir)


@pytest.fixture()
def restore_root_logging():
    """setup_logging() replaces root handlers; put the originals back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)
