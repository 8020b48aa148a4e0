# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- An empty API base URL means "run against the offline demo backend".
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASKFLOW"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
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

    # ---- Remote backend ----
    api_base_url: str
    canvas_id: str
    task_table: str
    page_size: int
    http_timeout_seconds: float

    # ---- UI behaviour ----
    notify_dismiss_seconds: float
    dark_mode_default: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    prefs_path: Path

    @property
    def offline(self) -> bool:
        return not self.api_base_url.strip()

    @staticmethod
    def from_env() -> "Settings":
        _load_dotenv_if_available()

        app_name = _env(_k("APP_NAME"), "TaskFlow") or "TaskFlow"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        api_base_url = _env(_k("API_BASE_URL"), "").strip().rstrip("/")
        canvas_id = _env(_k("CANVAS_ID"), "").strip()
        task_table = _env(_k("TASK_TABLE"), "task17").strip() or "task17"
        page_size = max(1, _env_int(_k("PAGE_SIZE"), 100))
        http_timeout_seconds = max(1.0, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0))

        notify_dismiss_seconds = max(0.1, _env_float(_k("NOTIFY_DISMISS_SECONDS"), 3.0))
        dark_mode_default = _env_bool(_k("DARK_MODE"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        prefs_path = _env_path(_k("PREFS_PATH"), data_dir / "prefs.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            canvas_id=canvas_id,
            task_table=task_table,
            page_size=page_size,
            http_timeout_seconds=http_timeout_seconds,
            notify_dismiss_seconds=notify_dismiss_seconds,
            dark_mode_default=dark_mode_default,
            data_dir=data_dir,
            prefs_path=prefs_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
