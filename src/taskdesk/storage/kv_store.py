# src/taskdesk/storage/kv_store.py

"""
Shared pieces for the opaque key-value stores.

A store maps string keys to string values. Reads return None for missing
keys. Writes may be rejected (quota, I/O) with KVStoreError.
"""

from __future__ import annotations

from collections.abc import Mapping

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class KVStoreError(Exception):
    """The key-value store could not complete an operation."""


class StorageQuotaExceeded(KVStoreError):
    def __init__(self, needed: int, quota: int) -> None:
        super().__init__(f"Storage quota exceeded: {needed} bytes needed, quota is {quota} bytes")
        self.needed = needed
        self.quota = quota


def entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


def check_quota(entries: Mapping[str, str], key: str, value: str, quota_bytes: int) -> None:
    """
    Raise StorageQuotaExceeded if writing key=value would push the store
    past quota_bytes. A quota of 0 (or less) means unlimited.
    """
    if quota_bytes <= 0:
        return
    needed = entry_size(key, value)
    needed += sum(entry_size(k, v) for k, v in entries.items() if k != key)
    if needed > quota_bytes:
        raise StorageQuotaExceeded(needed, quota_bytes)
