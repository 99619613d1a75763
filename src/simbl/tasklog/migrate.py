# src/simbl/tasklog/migrate.py

"""
One-way migration: embedded task logs -> log.ndjson.

Steps:
1. short-circuit if config says logVersion == 2
2. back up tasks.md
3. for every task with an embedded log: append its entries to log.ndjson
   (file order; for_task() sorts on read) and strip the section
4. write tasks.md back if anything changed
5. persist logVersion = 2

Not safe against another process editing tasks.md at the same time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..core.errors import MigrationError
from ..core.ports import ProjectConfigStore
from ..project_config import LOG_VERSION_CENTRALIZED
from ..tasks.document import get_all_tasks
from ..tasks.task_store import TaskStore
from . import file_log
from .embedded import has_embedded_log, parse_embedded, strip_embedded
from .log_models import FileLogEntry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MigrationResult:
    tasks_migrated: int = 0
    entries_migrated: int = 0
    errors: list[str] = field(default_factory=list)
    backup_path: Path | None = None


def _stores(
    simbl_dir: str | Path,
    config_store: ProjectConfigStore | None,
) -> tuple[TaskStore, ProjectConfigStore]:
    store = TaskStore(simbl_dir)
    return store, (config_store or store.config_store())


def needs_migration(simbl_dir: str | Path, *, config_store: ProjectConfigStore | None = None) -> bool:
    """
    False once migrated or when there is no tasks.md; otherwise True iff some
    task still carries an embedded log. A missing logVersion counts as "not migrated".
    """
    store, cfg_store = _stores(simbl_dir, config_store)

    if cfg_store.load().log_version == LOG_VERSION_CENTRALIZED:
        return False
    if not store.exists():
        return False

    return any(has_embedded_log(t.content) for t in get_all_tasks(store.load()))


def migrate(
    simbl_dir: str | Path,
    *,
    config_store: ProjectConfigStore | None = None,
    now: datetime | None = None,
) -> MigrationResult:
    """
    Run the migration. Per-task failures land in `errors` and do not stop the
    pass; a failed backup or tasks.md write raises MigrationError.
    Running it again after success returns zero counts and touches nothing.
    """
    result = MigrationResult()
    store, cfg_store = _stores(simbl_dir, config_store)

    config = cfg_store.load()
    if config.log_version == LOG_VERSION_CENTRALIZED:
        logger.info("Task logs already centralized in %s", store.simbl_dir)
        return result

    if not store.exists():
        config.log_version = LOG_VERSION_CENTRALIZED
        cfg_store.save(config)
        logger.info("No tasks file in %s; marked logs as centralized", store.simbl_dir)
        return result

    try:
        result.backup_path = store.backup(now)
    except OSError as exc:
        raise MigrationError(f"could not back up {store.tasks_path}: {exc}") from exc

    document = store.load()
    modified = False

    for task in get_all_tasks(document):
        if not has_embedded_log(task.content):
            continue

        # One write per task: a failed task contributes no records and keeps its
        # embedded log.
        try:
            entries = parse_embedded(task.content)
            file_log.append_many(
                store.simbl_dir,
                [FileLogEntry(task_id=task.id, timestamp=e.timestamp, message=e.message) for e in entries],
            )
        except Exception as exc:
            logger.warning("Log migration failed for task=%s", task.id, exc_info=True)
            result.errors.append(f"{task.id}: {exc} (embedded log left in place)")
            continue

        result.entries_migrated += len(entries)

        task.content = strip_embedded(task.content)
        modified = True
        result.tasks_migrated += 1
        logger.debug("Migrated task=%s entries=%d", task.id, len(entries))

    if modified:
        try:
            store.save(document)
        except OSError as exc:
            raise MigrationError(f"could not write {store.tasks_path}: {exc}") from exc

    config.log_version = LOG_VERSION_CENTRALIZED
    cfg_store.save(config)

    logger.info(
        "Migrated task logs tasks=%d entries=%d errors=%d backup=%s",
        result.tasks_migrated,
        result.entries_migrated,
        len(result.errors),
        result.backup_path,
    )
    return result
