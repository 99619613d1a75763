# src/simbl/project_config.py

"""
Per-project config stored next to the tasks (`.simbl/config.yaml`).

Known keys:
- prefix: task id prefix (task-1, task-2, ...)
- logVersion: 2 once embedded task logs were moved to log.ndjson

Unknown keys (name, webPort, ...) belong to other tools and are written
back untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import get_settings

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"

# Value of logVersion once the centralized log is authoritative.
LOG_VERSION_CENTRALIZED = 2


def _as_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True)
class ProjectConfig:
    prefix: str = "task"
    # None means "never migrated".
    log_version: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def logs_centralized(self) -> bool:
        return self.log_version == LOG_VERSION_CENTRALIZED

    @staticmethod
    def from_dict(data: dict[str, Any], *, default_prefix: str = "task") -> "ProjectConfig":
        extra = {k: v for k, v in data.items() if k not in ("prefix", "logVersion")}
        prefix = data.get("prefix")
        return ProjectConfig(
            prefix=str(prefix) if prefix else default_prefix,
            log_version=_as_int(data.get("logVersion")),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out["prefix"] = self.prefix
        if self.log_version is not None:
            out["logVersion"] = self.log_version
        return out


class YamlProjectConfigStore:
    """ProjectConfigStore backed by a YAML file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ProjectConfig:
        default_prefix = get_settings().default_prefix
        if not self._path.exists():
            return ProjectConfig(prefix=default_prefix)

        try:
            data = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError):
            logger.warning("Unreadable project config %s; using defaults.", self._path, exc_info=True)
            return ProjectConfig(prefix=default_prefix)

        if not isinstance(data, dict):
            return ProjectConfig(prefix=default_prefix)
        return ProjectConfig.from_dict(data, default_prefix=default_prefix)

    def save(self, config: ProjectConfig) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        text = yaml.safe_dump(config.to_dict(), sort_keys=False, indent=2, allow_unicode=True)
        self._path.write_text(text, encoding="utf-8")
        logger.debug("Saved project config %s", self._path)
