# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from simbl.config import Settings
from simbl.project_config import ProjectConfig, YamlProjectConfigStore

_ENV_VARS = (
    "SIMBL_LOG_LEVEL",
    "SIMBL_LOG_DIR",
    "SIMBL_DIR",
    "SIMBL_DEFAULT_PREFIX",
    "SIMBL_BATCH_MINUTES",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()

    assert s.log_level == "INFO"
    assert s.log_dir == Path(".local/simbl")
    assert s.simbl_dir == Path(".simbl")
    assert s.default_prefix == "task"
    assert s.batch_minutes == 30


def test_settings_from_env(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("SIMBL_LOG_LEVEL", "debug")
    clean_env.setenv("SIMBL_DIR", str(tmp_path / "proj"))
    clean_env.setenv("SIMBL_DEFAULT_PREFIX", "smb")
    clean_env.setenv("SIMBL_BATCH_MINUTES", "5")

    s = Settings.from_env()

    assert s.log_level == "debug"
    assert s.simbl_dir == tmp_path / "proj"
    assert s.default_prefix == "smb"
    assert s.batch_minutes == 5


@pytest.mark.parametrize("raw", ["soon", "-3", "  "])
def test_bad_batch_minutes_fall_back(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("SIMBL_BATCH_MINUTES", raw)
    assert Settings.from_env().batch_minutes == 30


def test_project_config_round_trip_keeps_foreign_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("name: demo\nprefix: smb\nwebPort: 3497\n", encoding="utf-8")
    store = YamlProjectConfigStore(path)

    config = store.load()
    assert config.prefix == "smb"
    assert config.log_version is None
    assert not config.logs_centralized

    config.log_version = 2
    store.save(config)

    again = store.load()
    assert again.logs_centralized
    assert again.extra == {"name": "demo", "webPort": 3497}
    assert path.read_text(encoding="utf-8").splitlines() == [
        "name: demo",
        "webPort: 3497",
        "prefix: smb",
        "logVersion: 2",
    ]


@pytest.mark.parametrize("text", ["", "- just\n- a list\n", "prefix: [unclosed\n"])
def test_unusable_config_gives_defaults(tmp_path: Path, text: str) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")

    config = YamlProjectConfigStore(path).load()

    assert config.log_version is None
    assert config.extra == {}


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    config = YamlProjectConfigStore(tmp_path / "nope.yaml").load()
    assert config.log_version is None


def test_log_version_must_be_a_number() -> None:
    assert ProjectConfig.from_dict({"logVersion": "2"}).log_version == 2
    assert ProjectConfig.from_dict({"logVersion": "two"}).log_version is None
    assert ProjectConfig.from_dict({"logVersion": True}).log_version is None
