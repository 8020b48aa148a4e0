# src/taskflow/tasks/task_api.py

"""
Remote task API.

Stateless translation between task operations and record calls against
a fixed backend collection. Keeps no task state between calls.

Mapping rules (wire record -> Task):
- title falls back to the generic Name column,
- missing description -> "", missing/invalid dueDate -> None,
- missing or unknown priority/status -> medium/pending,
- updated_at falls back to CreatedOn and never precedes created_at.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from ..core.errors import RemoteError, to_remote_error
from ..core.ports import Envelope, Record, RecordBackend
from .task_models import (
    EDITABLE_FIELDS,
    Task,
    TaskDraft,
    TaskPriority,
    TaskRecord,
    TaskStatus,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_TASK_TABLE = "task17"
DEFAULT_PAGE_SIZE = 100

FETCH_FIELDS = (
    "Id",
    "Name",
    "title",
    "description",
    "dueDate",
    "priority",
    "status",
    "CreatedOn",
    "ModifiedOn",
)


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts


def _parse_due_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def record_to_task(raw: Mapping[str, Any] | TaskRecord) -> Task:
    """Map a raw backend record into a validated domain Task."""
    record = raw if isinstance(raw, TaskRecord) else TaskRecord.model_validate(raw)

    created_at = _parse_timestamp(record.CreatedOn)
    updated_at = _parse_timestamp(record.ModifiedOn) or created_at
    if created_at is None:
        created_at = updated_at or utcnow()
    if updated_at is None or updated_at < created_at:
        updated_at = created_at

    return Task(
        id=str(record.Id),
        title=record.title or record.Name or "",
        description=record.description or "",
        due_date=_parse_due_date(record.dueDate),
        priority=TaskPriority.from_wire(record.priority),
        status=TaskStatus.from_wire(record.status),
        created_at=created_at,
        updated_at=updated_at,
    )


def fields_to_record(values: Mapping[str, Any]) -> Record:
    """
    Build the wire record for the given editable fields.

    Only the fields present in `values` are written; the title goes to both
    the generic Name column and the explicit title column.
    """
    unknown = set(values) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Not an editable task field: {', '.join(sorted(unknown))}")

    record: Record = {}
    if "title" in values:
        title = str(values["title"] or "").strip()
        record["Name"] = title
        record["title"] = title
    if "description" in values:
        record["description"] = str(values["description"] or "")
    if "due_date" in values:
        due = values["due_date"]
        record["dueDate"] = due.isoformat() if isinstance(due, date) else (due or "")
    if "priority" in values:
        record["priority"] = TaskPriority(values["priority"]).value
    if "status" in values:
        record["status"] = TaskStatus(values["status"]).value
    return record


def _unwrap(envelope: Envelope, *, op: str) -> Any:
    if not isinstance(envelope, Mapping) or "data" not in envelope:
        raise RemoteError(f"Malformed backend response for {op}", status=502)
    return envelope["data"]


class TaskApi:
    """Remote task API client bound to one record backend and collection."""

    def __init__(
        self,
        backend: RecordBackend,
        *,
        table: str = DEFAULT_TASK_TABLE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._backend = backend
        self._table = table
        self._page_size = int(page_size)

    @property
    def table(self) -> str:
        return self._table

    def fetch_params(self) -> dict[str, Any]:
        return {
            "fields": list(FETCH_FIELDS),
            "pagingInfo": {"limit": self._page_size, "offset": 0},
            "orderBy": [{"field": "ModifiedOn", "direction": "desc"}],
        }

    async def fetch_all(self) -> list[Task]:
        """All tasks of the current user, newest-modified first, one page."""
        try:
            envelope = await self._backend.fetch_records(self._table, self.fetch_params())
            rows = _unwrap(envelope, op="fetch") or []
            tasks = [record_to_task(row) for row in rows]
        except Exception as e:
            raise to_remote_error(e) from e

        logger.debug("Fetched %d tasks from table=%s", len(tasks), self._table)
        return tasks[: self._page_size]

    async def create(self, draft: TaskDraft) -> Task:
        params = {"record": fields_to_record(draft.as_fields())}
        try:
            envelope = await self._backend.create_record(self._table, params)
            task = record_to_task(_unwrap(envelope, op="create"))
        except Exception as e:
            raise to_remote_error(e) from e

        logger.info("Task created id=%s", task.id)
        return task

    async def update(self, task_id: str, changes: TaskDraft | Mapping[str, Any]) -> Task:
        """
        Write `changes` to the task and return the merged server state.

        A TaskDraft writes every editable field; a mapping writes only its keys.
        """
        values = changes.as_fields() if isinstance(changes, TaskDraft) else dict(changes)
        params = {"record": fields_to_record(values)}
        try:
            envelope = await self._backend.update_record(self._table, str(task_id), params)
            task = record_to_task(_unwrap(envelope, op="update"))
        except Exception as e:
            raise to_remote_error(e) from e

        logger.info("Task updated id=%s fields=%s", task.id, ",".join(sorted(values)))
        return task

    async def delete(self, task_id: str) -> dict[str, Any]:
        try:
            await self._backend.delete_record(self._table, str(task_id))
        except Exception as e:
            raise to_remote_error(e) from e

        logger.info("Task deleted id=%s", task_id)
        return {"success": True, "id": str(task_id)}
