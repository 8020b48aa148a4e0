# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import date

from ..core.errors import RemoteError, ValidationError
from ..core.notify import NotificationChannel
from ..core.ports import TaskGateway
from .task_form import FormController, ensure_valid
from .task_models import FilterCriteria, Task, TaskDraft, TaskStatus

logger = logging.getLogger(__name__)


def filter_tasks(tasks: Iterable[Task], criteria: FilterCriteria) -> list[Task]:
    """Ordered subsequence of `tasks` matching status, priority and title search."""
    return [t for t in tasks if criteria.matches(t)]


class TaskStore:
    """
    In-memory task collection for one authenticated session.

    Every mutation goes through the remote API first; local state only changes
    after the server confirmed it. A failed call leaves the collection as it was
    and is reported through the notification channel.

    Concurrency:
    - at most one mutation in flight (`busy`); the view disables mutating
      commands while busy, and a call that slips through raises RuntimeError
    - load() must not overlap with itself
    """

    def __init__(
        self,
        api: TaskGateway,
        *,
        form: FormController | None = None,
        notifications: NotificationChannel | None = None,
    ) -> None:
        self._api = api
        self._form = form
        self._notifications = notifications
        self._tasks: list[Task] = []
        self._loading = False
        self._mutating = False
        self.loaded = False
        self.load_error: RemoteError | None = None

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def busy(self) -> bool:
        return self._mutating or self._loading

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def counts(self) -> dict[TaskStatus, int]:
        c = Counter(t.status for t in self._tasks)
        return {s: c.get(s, 0) for s in TaskStatus}

    def derive(self, criteria: FilterCriteria) -> list[Task]:
        return filter_tasks(self._tasks, criteria)

    # ---- load ----

    async def load(self) -> bool:
        if self._loading:
            raise RuntimeError("TaskStore.load() is already in progress")

        self._loading = True
        try:
            tasks = await self._api.fetch_all()
        except RemoteError as e:
            logger.error("Task load failed status=%s: %s", e.status, e.message)
            self._tasks = []
            self.load_error = e
            self._notify_error(f"Failed to load tasks: {e.message}")
            return False
        finally:
            self._loading = False

        self._tasks = _dedupe(tasks)
        self.load_error = None
        self.loaded = True
        logger.info("TaskStore loaded %d tasks", len(self._tasks))
        return True

    # ---- mutations ----

    async def submit(
        self,
        draft: TaskDraft,
        editing_id: str | None = None,
        *,
        today: date | None = None,
        bind_form: bool = True,
    ) -> Task | None:
        """
        Create (no editing_id) or update (editing_id) a task from the draft.

        With bind_form=False the shared form is left alone: validation errors
        are not stored on it and it is not reset after success.

        Returns the server's task on success, None on validation or remote failure.
        """
        form = self._form if bind_form else None
        try:
            ensure_valid(draft, today=today)
        except ValidationError as e:
            if form is not None:
                form.errors = dict(e.errors)
            logger.debug("Submit blocked by validation: %s", e.errors)
            return None

        with self._mutation():
            try:
                if editing_id is not None:
                    task = await self._api.update(editing_id, draft)
                else:
                    task = await self._api.create(draft)
            except RemoteError as e:
                action = "update" if editing_id is not None else "create"
                logger.error("Task %s failed status=%s: %s", action, e.status, e.message)
                self._notify_error(f"Failed to {action} task: {e.message}")
                return None

        if editing_id is None:
            self._prepend(task)
            self._notify_success("Task created successfully")
        else:
            # The task may have vanished locally meanwhile; put it back at the head.
            if self.get(editing_id) is not None:
                self._replace(editing_id, task)
            else:
                self._prepend(task)
            self._notify_success("Task updated successfully")

        if form is not None:
            form.reset_after_submit()
        return task

    async def remove(self, task_id: str) -> bool:
        with self._mutation():
            try:
                await self._api.delete(task_id)
            except RemoteError as e:
                logger.error("Task delete failed id=%s status=%s: %s", task_id, e.status, e.message)
                self._notify_error(f"Failed to delete task: {e.message}")
                return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        if self._form is not None and self._form.editing_id == task_id:
            self._form.cancel()
        self._notify_success("Task deleted successfully")
        return True

    async def toggle_completion(self, task_id: str) -> Task | None:
        """completed -> pending; pending / in-progress -> completed. Only status is sent."""
        current = self.get(task_id)
        if current is None:
            logger.warning("toggle_completion: unknown task id=%s", task_id)
            self._notify_error(f"Task {task_id} not found")
            return None

        new_status = TaskStatus.PENDING if current.is_completed else TaskStatus.COMPLETED

        with self._mutation():
            try:
                task = await self._api.update(task_id, {"status": new_status})
            except RemoteError as e:
                logger.error("Task toggle failed id=%s status=%s: %s", task_id, e.status, e.message)
                self._notify_error(f"Failed to update task: {e.message}")
                return None

        self._replace(task_id, task)
        if task.is_completed:
            self._notify_success("Task marked as completed")
        else:
            self._notify_success("Task marked as pending")
        return task

    # ---- helpers ----

    def _mutation(self) -> _MutationGuard:
        return _MutationGuard(self)

    def _replace(self, task_id: str, task: Task) -> None:
        out: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                out.append(task)
            elif t.id != task.id:
                out.append(t)
        self._tasks = out

    def _prepend(self, task: Task) -> None:
        self._tasks = [task, *(t for t in self._tasks if t.id != task.id)]

    def _notify_success(self, message: str) -> None:
        if self._notifications is not None:
            self._notifications.success(message)

    def _notify_error(self, message: str) -> None:
        if self._notifications is not None:
            self._notifications.error(message)


class _MutationGuard:
    """Marks the store busy for the duration of one remote mutation."""

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def __enter__(self) -> None:
        if self._store.busy:
            raise RuntimeError("Another task change is still in progress")
        self._store._mutating = True

    def __exit__(self, *exc: object) -> None:
        self._store._mutating = False


def _dedupe(tasks: Iterable[Task]) -> list[Task]:
    seen: set[str] = set()
    out: list[Task] = []
    for t in tasks:
        if t.id in seen:
            logger.warning("Duplicate task id=%s in backend response; keeping first", t.id)
            continue
        seen.add(t.id)
        out.append(t)
    return out
