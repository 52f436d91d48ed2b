"""
Opaque key-value stores behind the task persistence adapter.

- json_store.py: one JSON object on disk
- sqlite_store.py: one SQLite row per key
"""
