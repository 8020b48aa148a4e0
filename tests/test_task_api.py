# tests/test_task_api.py

from __future__ import annotations

from datetime import date

import httpx
import pytest

from taskflow.core.errors import DEFAULT_ERROR_MESSAGE, RemoteError
from taskflow.tasks.task_api import TaskApi, fields_to_record, record_to_task
from taskflow.tasks.task_models import TaskDraft, TaskPriority, TaskStatus

from .fakes import RecordingBackend


def test_record_to_task_applies_fallbacks() -> None:
    task = record_to_task({"Id": 7, "Name": "From name", "CreatedOn": "2026-10-01T10:00:00+00:00"})

    assert task.id == "7"
    assert task.title == "From name"
    assert task.description == ""
    assert task.due_date is None
    assert task.priority == TaskPriority.MEDIUM
    assert task.status == TaskStatus.PENDING
    assert task.updated_at == task.created_at


def test_record_to_task_prefers_title_and_parses_fields() -> None:
    task = record_to_task(
        {
            "Id": "12",
            "Name": "generic",
            "title": "Write report",
            "description": "Q3 numbers",
            "dueDate": "2026-11-02",
            "priority": "high",
            "status": "in-progress",
            "CreatedOn": "2026-10-01T10:00:00+00:00",
            "ModifiedOn": "2026-10-02T10:00:00+00:00",
            "Owner": "someone",
        }
    )

    assert task.title == "Write report"
    assert task.due_date == date(2026, 11, 2)
    assert task.priority == TaskPriority.HIGH
    assert task.status == TaskStatus.IN_PROGRESS
    assert task.updated_at > task.created_at


def test_record_to_task_unknown_enums_and_bad_dates_degrade() -> None:
    task = record_to_task(
        {
            "Id": 1,
            "title": "x",
            "priority": "urgent",
            "status": "archived",
            "dueDate": "not a date",
            "CreatedOn": "2026-10-05T10:00:00+00:00",
            "ModifiedOn": "2026-10-01T10:00:00+00:00",
        }
    )

    assert task.priority == TaskPriority.MEDIUM
    assert task.status == TaskStatus.PENDING
    assert task.due_date is None
    # ModifiedOn before CreatedOn is clamped
    assert task.updated_at == task.created_at


def test_fields_to_record_writes_title_twice_and_only_given_fields() -> None:
    rec = fields_to_record({"title": "  Hello ", "due_date": date(2026, 12, 1)})
    assert rec == {"Name": "Hello", "title": "Hello", "dueDate": "2026-12-01"}

    assert fields_to_record({"status": TaskStatus.COMPLETED}) == {"status": "completed"}

    with pytest.raises(ValueError):
        fields_to_record({"Owner": "me"})


@pytest.mark.asyncio
async def test_fetch_all_sends_paging_and_order() -> None:
    backend = RecordingBackend(
        {"fetch": {"data": [{"Id": 2, "title": "b"}, {"Id": 1, "title": "a"}]}}
    )
    api = TaskApi(backend, table="task17", page_size=100)

    tasks = await api.fetch_all()

    assert [t.id for t in tasks] == ["2", "1"]
    op, (table, params) = backend.calls[0]
    assert op == "fetch" and table == "task17"
    assert params["pagingInfo"] == {"limit": 100, "offset": 0}
    assert params["orderBy"] == [{"field": "ModifiedOn", "direction": "desc"}]
    assert "title" in params["fields"] and "Name" in params["fields"]


@pytest.mark.asyncio
async def test_fetch_all_empty_data_is_empty_list() -> None:
    api = TaskApi(RecordingBackend({"fetch": {"data": None}}))
    assert await api.fetch_all() == []


@pytest.mark.asyncio
async def test_update_with_mapping_sends_only_given_fields() -> None:
    backend = RecordingBackend({"update": {"data": {"Id": 5, "title": "t", "status": "completed"}}})
    api = TaskApi(backend)

    task = await api.update("5", {"status": TaskStatus.COMPLETED})

    assert task.status == TaskStatus.COMPLETED
    op, (_table, record_id, params) = backend.calls[0]
    assert op == "update" and record_id == "5"
    assert params == {"record": {"status": "completed"}}


@pytest.mark.asyncio
async def test_create_sends_all_editable_fields() -> None:
    backend = RecordingBackend({"create": {"data": {"Id": 9, "title": "New"}}})
    api = TaskApi(backend)

    task = await api.create(TaskDraft(title="New", priority=TaskPriority.LOW))

    assert task.id == "9"
    record = backend.calls[0][1][1]["record"]
    assert record["Name"] == record["title"] == "New"
    assert record["priority"] == "low"
    assert record["status"] == "pending"
    assert record["dueDate"] == ""


@pytest.mark.asyncio
async def test_delete_reports_success() -> None:
    api = TaskApi(RecordingBackend())
    assert await api.delete("3") == {"success": True, "id": "3"}


@pytest.mark.asyncio
async def test_errors_are_normalised_to_remote_error() -> None:
    api = TaskApi(RecordingBackend({"delete": httpx.ConnectError("boom")}))
    with pytest.raises(RemoteError) as info:
        await api.delete("3")
    assert info.value.status == 500
    assert info.value.message == "boom"

    api = TaskApi(RecordingBackend({"fetch": KeyError()}))
    with pytest.raises(RemoteError) as info:
        await api.fetch_all()
    assert info.value.message == DEFAULT_ERROR_MESSAGE
    assert info.value.details == {}


@pytest.mark.asyncio
async def test_remote_error_passes_through_and_malformed_envelope_is_502() -> None:
    forbidden = RemoteError("Forbidden", status=403, details={"field": "x"})
    api = TaskApi(RecordingBackend({"update": forbidden}))
    with pytest.raises(RemoteError) as info:
        await api.update("1", {"title": "x"})
    assert info.value is forbidden

    api = TaskApi(RecordingBackend({"create": {"nope": 1}}))
    with pytest.raises(RemoteError) as info:
        await api.create(TaskDraft(title="x"))
    assert info.value.status == 502
