# tests/fakes.py

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from taskflow.core.errors import RemoteError
from taskflow.tasks.task_models import Task, TaskDraft, TaskPriority, TaskStatus

BASE_TIME = datetime(2026, 10, 1, 9, 0, 0).astimezone()


def make_task(
    task_id: str,
    title: str = "Task",
    *,
    status: TaskStatus = TaskStatus.PENDING,
    priority: TaskPriority = TaskPriority.MEDIUM,
    description: str = "",
    minutes: int = 0,
) -> Task:
    ts = BASE_TIME + timedelta(minutes=minutes)
    return Task(
        id=task_id,
        title=title,
        description=description,
        due_date=None,
        priority=priority,
        status=status,
        created_at=ts,
        updated_at=ts,
    )


@dataclass(slots=True)
class GatewayCall:
    op: str
    task_id: str | None = None
    values: dict[str, Any] = field(default_factory=dict)


class FakeTaskGateway:
    """
    In-memory TaskGateway for store tests.

    - Captures calls for assertions
    - `fail_next` makes the next call raise a RemoteError
    - `gate` (an asyncio.Event) holds every call until it is set, to overlap operations
    - ids are assigned sequentially ("101", "102", ...)
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.calls: list[GatewayCall] = []
        self.fail_next: RemoteError | None = None
        self.gate: asyncio.Event | None = None
        self._next_id = 101

    async def _maybe_fail(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_next is not None:
            err, self.fail_next = self.fail_next, None
            raise err

    async def fetch_all(self) -> list[Task]:
        self.calls.append(GatewayCall("fetch"))
        await self._maybe_fail()
        return list(self.tasks)

    async def create(self, draft: TaskDraft) -> Task:
        self.calls.append(GatewayCall("create", values=draft.as_fields()))
        await self._maybe_fail()
        task = Task(
            id=str(self._next_id),
            title=draft.title.strip(),
            description=draft.description,
            due_date=draft.due_date,
            priority=draft.priority,
            status=draft.status,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )
        self._next_id += 1
        self.tasks.insert(0, task)
        return task

    async def update(self, task_id: str, changes: TaskDraft | Mapping[str, Any]) -> Task:
        values = changes.as_fields() if isinstance(changes, TaskDraft) else dict(changes)
        self.calls.append(GatewayCall("update", task_id=task_id, values=values))
        await self._maybe_fail()
        current = next((t for t in self.tasks if t.id == task_id), None)
        if current is None:
            current = make_task(task_id)
        updated = Task(
            id=task_id,
            title=values.get("title", current.title),
            description=values.get("description", current.description),
            due_date=values.get("due_date", current.due_date),
            priority=TaskPriority(values.get("priority", current.priority)),
            status=TaskStatus(values.get("status", current.status)),
            created_at=current.created_at,
            updated_at=current.updated_at + timedelta(minutes=1),
        )
        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    async def delete(self, task_id: str) -> dict[str, Any]:
        self.calls.append(GatewayCall("delete", task_id=task_id))
        await self._maybe_fail()
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return {"success": True, "id": task_id}


class RecordingBackend:
    """
    Record/auth backend returning canned envelopes.

    `responses[op]` is returned as-is; an Exception instance is raised instead.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _reply(self, op: str, *args: Any) -> Any:
        self.calls.append((op, args))
        reply = self.responses.get(op, {"data": None})
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def fetch_records(self, table: str, params: Mapping[str, Any]) -> Any:
        return self._reply("fetch", table, dict(params))

    async def create_record(self, table: str, params: Mapping[str, Any]) -> Any:
        return self._reply("create", table, dict(params))

    async def update_record(self, table: str, record_id: str, params: Mapping[str, Any]) -> Any:
        return self._reply("update", table, record_id, dict(params))

    async def delete_record(self, table: str, record_id: str) -> Any:
        return self._reply("delete", table, record_id)

    async def login(self, email: str, password: str) -> Any:
        return self._reply("login", email, password)

    async def signup(self, name: str, email: str, password: str) -> Any:
        return self._reply("signup", name, email, password)

    async def logout(self) -> None:
        self._reply("logout")

    async def aclose(self) -> None:
        self.calls.append(("aclose", ()))


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
