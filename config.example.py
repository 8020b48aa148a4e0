# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real backend ids. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: TaskFlow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Remote backend
    "TASKFLOW_API_BASE_URL": "Record backend base URL. Empty => offline in-memory demo backend.",
    "TASKFLOW_CANVAS_ID": "Project/canvas id sent as the X-Canvas-Id header.",
    "TASKFLOW_TASK_TABLE": "Task collection name (default: task17).",
    "TASKFLOW_PAGE_SIZE": "Max tasks fetched per load (default: 100).",
    "TASKFLOW_HTTP_TIMEOUT_SECONDS": "Per-request timeout (default: 10).",
    # UI
    "TASKFLOW_NOTIFY_DISMISS_SECONDS": "Status banner lifetime (default: 3).",
    "TASKFLOW_DARK_MODE": "Dark palette until the user picks one with /theme (true/false).",
    # Paths (gitignored)
    "TASKFLOW_DATA_DIR": "Local data directory: logs + preferences (default: .local/taskflow).",
    "TASKFLOW_PREFS_PATH": "Preferences JSON path (default: <data_dir>/prefs.json).",
}
