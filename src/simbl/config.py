# src/simbl/config.py

"""Process settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process.
- Nothing here is required: every value has a default.
- Per-project state (id prefix, log version) lives in config.yaml, see project_config.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SIMBL"

# Local .env never overrides values already present in the environment.
load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- logging ----
    log_level: str
    log_dir: Path

    # ---- store ----
    simbl_dir: Path
    default_prefix: str

    # ---- task log ----
    batch_minutes: int

    @staticmethod
    def from_env() -> "Settings":
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_dir = _env_path(_k("LOG_DIR"), Path(".local/simbl"))

        simbl_dir = _env_path(_k("DIR"), Path(".simbl"))
        default_prefix = _env(_k("DEFAULT_PREFIX"), "task").strip() or "task"

        batch_minutes = _env_int(_k("BATCH_MINUTES"), 30)
        if batch_minutes < 0:
            batch_minutes = 30

        return Settings(
            log_level=log_level,
            log_dir=log_dir,
            simbl_dir=simbl_dir,
            default_prefix=default_prefix,
            batch_minutes=batch_minutes,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
