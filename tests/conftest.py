# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.backend.offline import OfflineBackend
from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState


@pytest.fixture(autouse=True)
def _no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    # rendered output is asserted as plain text
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        log_level="INFO",
        api_base_url="",
        canvas_id="",
        offline=True,
        task_table="task17",
        page_size=100,
        http_timeout_seconds=5.0,
        notify_dismiss_seconds=3.0,
        dark_mode_default=False,
        data_dir=tmp_path / "data",
        prefs_path=tmp_path / "data" / "prefs.json",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired against the in-memory offline backend."""
    return create_initial_state(settings=settings, backend=OfflineBackend())
