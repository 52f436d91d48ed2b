# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file
in the working directory). This file exists to make the repo self-documenting.
"""

ENV_VARS = {
    # App / logging
    "TASKDESK_APP_NAME": "App display name, used as the REPL prompt (default: taskdesk).",
    "TASKDESK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKDESK_LOG_FILE": "Log file path (default: <data_dir>/taskdesk.log).",
    # Storage
    "TASKDESK_DATA_DIR": "Local data directory for the store and the log file (default: .local/taskdesk).",
    "TASKDESK_STORAGE_BACKEND": "Key-value backend: json | sqlite (default: json).",
    "TASKDESK_STORE_PATH": (
        "Store file (default: <data_dir>/store.json or <data_dir>/store.sqlite3 by backend)."
    ),
    "TASKDESK_STORAGE_KEY": "Key the task list is stored under (default: tasks).",
    "TASKDESK_STORAGE_QUOTA_BYTES": "Max bytes the store may hold; 0 disables (default: 5242880).",
    # UI
    "TASKDESK_DEFAULT_FILTER": "Filter at startup: all | pending | completed | today | this-week.",
    "TASKDESK_CONFIRM_DELETE": "Ask y/N before /rm (true/false, default: true).",
}
