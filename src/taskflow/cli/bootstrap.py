# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (backend/auth/prefs/notifications).
"""

from __future__ import annotations

import logging

from ..auth.service import AuthService
from ..backend.client import ApperClient
from ..backend.offline import OfflineBackend
from ..config import get_settings
from ..core.notify import NotificationChannel
from ..core.ports import Backend
from ..core.state import AppState
from ..storage.local_store import LocalStore, Preferences

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_path.parent.mkdir(parents=True, exist_ok=True)


def create_backend(settings) -> Backend:
    if getattr(settings, "offline", False):
        logger.info("No backend URL configured; using the offline demo backend.")
        return OfflineBackend()

    return ApperClient(
        settings.api_base_url,
        settings.canvas_id,
        timeout_seconds=settings.http_timeout_seconds,
    )


def create_initial_state(*, settings=None, backend: Backend | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if backend is None:
        backend = create_backend(settings)

    prefs = Preferences(
        LocalStore(settings.prefs_path),
        dark_mode_default=settings.dark_mode_default,
    )

    return AppState(
        settings=settings,
        backend=backend,
        auth=AuthService(backend),
        prefs=prefs,
        notifications=NotificationChannel(dismiss_after=settings.notify_dismiss_seconds),
    )
