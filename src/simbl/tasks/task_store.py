# src/simbl/tasks/task_store.py

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

from ..config import get_settings
from ..core.ports import BlockCodec
from ..project_config import CONFIG_FILE, ProjectConfig, YamlProjectConfigStore
from ..tasklog.file_log import LOG_FILE
from ..tasklog.log_models import as_utc, utc_now
from .document import parse, serialize
from .task_models import SimblFile

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.md"
ARCHIVE_FILE = "tasks-archive.md"

EMPTY_TASKS = "# Backlog\n\n# Done\n"
EMPTY_ARCHIVE = "# Archived Tasks\n"


class TaskStore:
    """
    File-backed task store rooted at a `.simbl` directory.

    Every load() reads and parses tasks.md from scratch and every save()
    rewrites it; nothing is cached. Concurrent writers to tasks.md are the
    caller's problem (only log.ndjson is multi-writer safe).
    """

    def __init__(self, simbl_dir: str | Path | None = None, *, codec: BlockCodec | None = None) -> None:
        self._dir = Path(simbl_dir) if simbl_dir is not None else get_settings().simbl_dir
        self._codec = codec

    # ---- paths ----

    @property
    def simbl_dir(self) -> Path:
        return self._dir

    @property
    def tasks_path(self) -> Path:
        return self._dir / TASKS_FILE

    @property
    def archive_path(self) -> Path:
        return self._dir / ARCHIVE_FILE

    @property
    def config_path(self) -> Path:
        return self._dir / CONFIG_FILE

    @property
    def log_path(self) -> Path:
        return self._dir / LOG_FILE

    def config_store(self) -> YamlProjectConfigStore:
        return YamlProjectConfigStore(self.config_path)

    # ---- lifecycle ----

    def exists(self) -> bool:
        return self.tasks_path.exists()

    def init(self, *, prefix: str | None = None) -> None:
        """Create missing skeleton files; existing files are left alone."""
        self._dir.mkdir(parents=True, exist_ok=True)

        if not self.config_path.exists():
            self.config_store().save(ProjectConfig(prefix=prefix or get_settings().default_prefix))
        if not self.tasks_path.exists():
            self.tasks_path.write_text(EMPTY_TASKS, encoding="utf-8")
        if not self.archive_path.exists():
            self.archive_path.write_text(EMPTY_ARCHIVE, encoding="utf-8")

        logger.info("TaskStore ready dir=%s", self._dir)

    # ---- document ----

    def read_text(self) -> str:
        return self.tasks_path.read_text(encoding="utf-8")

    def load(self) -> SimblFile:
        """Raises DocumentParseError for a corrupt tasks.md."""
        file = parse(self.read_text(), codec=self._codec)
        logger.debug("Loaded %s backlog=%d done=%d", self.tasks_path, len(file.backlog), len(file.done))
        return file

    def save(self, file: SimblFile) -> None:
        self.tasks_path.write_text(serialize(file), encoding="utf-8")
        logger.debug("Saved %s backlog=%d done=%d", self.tasks_path, len(file.backlog), len(file.done))

    def read_archive_text(self) -> str | None:
        if not self.archive_path.exists():
            return None
        return self.archive_path.read_text(encoding="utf-8")

    def load_archive(self) -> SimblFile:
        """Archived tasks; a missing archive reads as empty."""
        text = self.read_archive_text()
        return SimblFile() if text is None else parse(text, codec=self._codec)

    def save_archive(self, file: SimblFile) -> None:
        self.archive_path.write_text(serialize(file), encoding="utf-8")
        logger.debug("Saved %s done=%d", self.archive_path, len(file.done))

    def backup(self, now: datetime | None = None) -> Path:
        """Timestamped copy of tasks.md, e.g. tasks.md.backup.2025-12-20T18-49-44."""
        stamp = as_utc(now or utc_now()).strftime("%Y-%m-%dT%H-%M-%S")
        target = self.tasks_path.with_name(f"{TASKS_FILE}.backup.{stamp}")
        shutil.copy2(self.tasks_path, target)
        logger.info("Backed up %s -> %s", self.tasks_path, target)
        return target
