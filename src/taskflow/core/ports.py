# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the HTTP backend swappable with the offline one and makes testing easier.
"""

from collections.abc import Mapping
from typing import Any, Protocol

Record = dict[str, Any]
# Backend payload: {"data": <record or list of records>, ...}.
Envelope = dict[str, Any]


class RecordBackend(Protocol):
    """
    Record-oriented CRUD service addressed by collection (table) name.

    Every call returns the response envelope; the payload sits under "data".
    Failures raise RemoteError.
    """

    async def fetch_records(self, table: str, params: Mapping[str, Any]) -> Envelope: ...

    async def create_record(self, table: str, params: Mapping[str, Any]) -> Envelope: ...

    async def update_record(
            self, table: str, record_id: str, params: Mapping[str, Any]
    ) -> Envelope: ...

    async def delete_record(self, table: str, record_id: str) -> Envelope: ...


class AuthBackend(Protocol):
    """Authentication endpoints. login/signup return the user profile envelope."""

    async def login(self, email: str, password: str) -> Envelope: ...

    async def signup(self, name: str, email: str, password: str) -> Envelope: ...

    async def logout(self) -> None: ...


class Backend(RecordBackend, AuthBackend, Protocol):
    async def aclose(self) -> None: ...


class TaskGateway(Protocol):
    """What the task store needs from the remote task API."""

    async def fetch_all(self) -> list[Any]: ...

    async def create(self, draft: Any) -> Any: ...

    async def update(self, task_id: str, changes: Any) -> Any: ...

    async def delete(self, task_id: str) -> dict[str, Any]: ...
