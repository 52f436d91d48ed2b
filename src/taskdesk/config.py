# src/taskdesk/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
- Paths default under a gitignored local data dir.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .storage.kv_store import DEFAULT_QUOTA_BYTES

ENV_PREFIX = "TASKDESK"

STORAGE_BACKENDS = ("json", "sqlite")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_file: Path

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    store_path: Path
    storage_key: str
    storage_quota_bytes: int

    # ---- UI defaults ----
    default_filter: str
    confirm_delete: bool

    @staticmethod
    def from_env(*, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            # .env is looked up from the working directory, not from this file.
            load_dotenv(find_dotenv(usecwd=True), override=False)

        app_name = _env(_k("APP_NAME"), "taskdesk").strip() or "taskdesk"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdesk"))
        log_file = _env_path(_k("LOG_FILE"), data_dir / "taskdesk.log")

        storage_backend = _env(_k("STORAGE_BACKEND"), "json").strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            storage_backend = "json"

        default_name = "store.sqlite3" if storage_backend == "sqlite" else "store.json"
        store_path = _env_path(_k("STORE_PATH"), data_dir / default_name)

        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"
        storage_quota_bytes = _env_int(_k("STORAGE_QUOTA_BYTES"), DEFAULT_QUOTA_BYTES)

        default_filter = _env(_k("DEFAULT_FILTER"), "all").strip().lower() or "all"
        confirm_delete = _env_bool(_k("CONFIRM_DELETE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_file=log_file,
            data_dir=data_dir,
            storage_backend=storage_backend,
            store_path=store_path,
            storage_key=storage_key,
            storage_quota_bytes=storage_quota_bytes,
            default_filter=default_filter,
            confirm_delete=confirm_delete,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
