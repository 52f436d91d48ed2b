# src/taskdesk/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and front ends swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Opaque single-key storage (browser-localStorage-like).

    - get() returns None for a missing key
    - set() raises KVStoreError (e.g. StorageQuotaExceeded) when the write is rejected
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def close(self) -> None: ...


class TaskPersistencePort(Protocol):
    def load(self) -> list[Any]: ...
    def save(self, tasks: Sequence[Any]) -> None: ...
