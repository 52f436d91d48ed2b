# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from taskdesk.config import Settings

_VARS = (
    "TASKDESK_APP_NAME",
    "TASKDESK_LOG_LEVEL",
    "TASKDESK_LOG_FILE",
    "TASKDESK_DATA_DIR",
    "TASKDESK_STORAGE_BACKEND",
    "TASKDESK_STORE_PATH",
    "TASKDESK_STORAGE_KEY",
    "TASKDESK_STORAGE_QUOTA_BYTES",
    "TASKDESK_DEFAULT_FILTER",
    "TASKDESK_CONFIRM_DELETE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env(load_env_file=False)
    assert s.app_name == "taskdesk"
    assert s.log_file == Path(".local/taskdesk") / "taskdesk.log"
    assert s.storage_backend == "json"
    assert s.store_path == Path(".local/taskdesk") / "store.json"
    assert s.storage_key == "tasks"
    assert s.storage_quota_bytes == 5 * 1024 * 1024
    assert s.default_filter == "all"
    assert s.confirm_delete is True


def test_env_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDESK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDESK_STORAGE_BACKEND", "SQLite")
    monkeypatch.setenv("TASKDESK_STORAGE_QUOTA_BYTES", "0")
    monkeypatch.setenv("TASKDESK_CONFIRM_DELETE", "no")
    monkeypatch.setenv("TASKDESK_DEFAULT_FILTER", "pending")

    s = Settings.from_env(load_env_file=False)
    assert s.storage_backend == "sqlite"
    assert s.store_path == tmp_path / "store.sqlite3"
    assert s.log_file == tmp_path / "taskdesk.log"
    assert s.storage_quota_bytes == 0
    assert s.confirm_delete is False
    assert s.default_filter == "pending"


def test_bad_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("TASKDESK_STORAGE_BACKEND", "redis")
    monkeypatch.setenv("TASKDESK_STORAGE_QUOTA_BYTES", "lots")

    s = Settings.from_env(load_env_file=False)
    assert s.storage_backend == "json"
    assert s.storage_quota_bytes == 5 * 1024 * 1024


def test_dotenv_file_is_read(monkeypatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("TASKDESK_APP_NAME=from-dotenv\n", "utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        s = Settings.from_env()
    finally:
        # load_dotenv writes into os.environ directly
        os.environ.pop("TASKDESK_APP_NAME", None)
    assert s.app_name == "from-dotenv"
