# src/taskflow/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..auth.service import AuthService, UserProfile
from ..storage.local_store import Preferences
from ..tasks.task_api import TaskApi
from ..tasks.task_form import FormController
from ..tasks.task_models import FilterCriteria
from ..tasks.task_store import TaskStore
from .notify import NotificationChannel
from .ports import Backend

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Everything the console needs, wired once by the bootstrap and passed around.

    The task store, its API client and the form only exist while a user is
    signed in: start_session() builds them, end_session() drops them.
    """

    settings: Any
    backend: Backend
    auth: AuthService
    prefs: Preferences
    notifications: NotificationChannel

    filters: FilterCriteria = field(default_factory=FilterCriteria)
    user: UserProfile | None = None
    store: TaskStore | None = None
    form: FormController | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def start_session(self, profile: UserProfile) -> TaskStore:
        if self.store is not None:
            self.end_session()

        api = TaskApi(
            self.backend,
            table=getattr(self.settings, "task_table", "task17"),
            page_size=getattr(self.settings, "page_size", 100),
        )
        self.user = profile
        self.form = FormController()
        self.store = TaskStore(api, form=self.form, notifications=self.notifications)
        self.filters = FilterCriteria()
        logger.info("Session started for %s", profile.email or profile.display_name)
        return self.store

    def end_session(self) -> None:
        if self.user is not None:
            logger.info("Session ended for %s", self.user.email or self.user.display_name)
        self.user = None
        self.store = None
        self.form = None
        self.filters = FilterCriteria()

    async def reload(self) -> bool:
        """Re-fetch the task list of the current session; filters and the open form are kept."""
        if self.user is None or self.store is None:
            return False
        return await self.store.load()

    async def aclose(self) -> None:
        self.end_session()
        self.notifications.close()
        await self.backend.aclose()
