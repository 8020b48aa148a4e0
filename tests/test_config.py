# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskflow import config


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    import os

    for key in list(os.environ):
        if key.startswith(config.ENV_PREFIX + "_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(config, "_load_dotenv_if_available", lambda: None)
    return monkeypatch


def test_defaults_run_offline(clean_env: pytest.MonkeyPatch) -> None:
    s = config.Settings.from_env()

    assert s.offline
    assert s.task_table == "task17"
    assert s.page_size == 100
    assert s.notify_dismiss_seconds == 3.0
    assert s.dark_mode_default is False
    assert s.prefs_path == Path(".local/taskflow") / "prefs.json"


def test_env_overrides_and_bad_numbers(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKFLOW_API_BASE_URL", "https://api.example.test/v1/")
    clean_env.setenv("TASKFLOW_PAGE_SIZE", "oops")
    clean_env.setenv("TASKFLOW_NOTIFY_DISMISS_SECONDS", "1.5")
    clean_env.setenv("TASKFLOW_DARK_MODE", "yes")
    clean_env.setenv("TASKFLOW_DATA_DIR", str(tmp_path))

    s = config.Settings.from_env()

    assert not s.offline
    assert s.api_base_url == "https://api.example.test/v1"
    assert s.page_size == 100
    assert s.notify_dismiss_seconds == 1.5
    assert s.dark_mode_default is True
    assert s.prefs_path == tmp_path / "prefs.json"
