# tests/test_offline_backend.py

from __future__ import annotations

import pytest

from taskflow.backend.offline import OfflineBackend
from taskflow.core.errors import RemoteError
from taskflow.tasks.task_api import TaskApi
from taskflow.tasks.task_models import TaskDraft, TaskStatus


@pytest.mark.asyncio
async def test_task_api_round_trip_against_offline_backend() -> None:
    api = TaskApi(OfflineBackend(), page_size=2)

    a = await api.create(TaskDraft(title="a"))
    b = await api.create(TaskDraft(title="b"))
    c = await api.create(TaskDraft(title="c"))
    await api.update(a.id, {"status": TaskStatus.COMPLETED})

    tasks = await api.fetch_all()

    # newest-modified first, one page
    assert [t.id for t in tasks][0] == a.id
    assert len(tasks) == 2
    assert tasks[0].status == TaskStatus.COMPLETED
    assert {b.id, c.id} & {t.id for t in tasks}


@pytest.mark.asyncio
async def test_missing_record_is_404() -> None:
    backend = OfflineBackend()
    with pytest.raises(RemoteError) as info:
        await backend.delete_record("task17", "99")
    assert info.value.status == 404


@pytest.mark.asyncio
async def test_fields_projection_and_update_keeps_identity() -> None:
    backend = OfflineBackend()
    created = (await backend.create_record("t", {"record": {"title": "x", "Owner": "o"}}))["data"]

    updated = (await backend.update_record("t", str(created["Id"]), {"record": {"Id": 50, "title": "y"}}))[
        "data"
    ]
    assert updated["Id"] == created["Id"]
    assert updated["CreatedOn"] == created["CreatedOn"]
    assert updated["title"] == "y"

    rows = (await backend.fetch_records("t", {"fields": ["Id", "title"]}))["data"]
    assert rows == [{"Id": created["Id"], "title": "y"}]


@pytest.mark.asyncio
async def test_demo_auth() -> None:
    backend = OfflineBackend()
    with pytest.raises(RemoteError):
        await backend.login("", "")

    profile = (await backend.signup("Ada Lovelace", "ada@example.com", "pw"))["data"]
    assert profile["firstName"] == "Ada" and profile["lastName"] == "Lovelace"

    profile = (await backend.login("ada@example.com", "pw"))["data"]
    assert profile["Email"] == "ada@example.com"
