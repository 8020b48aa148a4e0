# src/taskflow/backend/offline.py

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from ..core.errors import RemoteError
from ..core.ports import Envelope, Record


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds")


class OfflineBackend:
    """
    In-memory backend used for demos when no external API is configured.

    Behavior:
    - records live only for the lifetime of the process
    - Id is an increasing integer, CreatedOn/ModifiedOn are set on write
    - fetch honours pagingInfo, orderBy and the fields projection
    - any email/password logs in as a local demo user
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[int, Record]] = {}
        self._next_id = 1
        self._user: Record | None = None

    def _table(self, name: str) -> dict[int, Record]:
        return self._tables.setdefault(name, {})

    def _lookup(self, table: str, record_id: str) -> tuple[dict[int, Record], int]:
        rows = self._table(table)
        try:
            key = int(record_id)
        except (TypeError, ValueError):
            key = -1
        if key not in rows:
            raise RemoteError(f"Record {record_id} not found", status=404, details={"table": table})
        return rows, key

    async def aclose(self) -> None:
        return

    # ---- records ----

    async def fetch_records(self, table: str, params: Mapping[str, Any]) -> Envelope:
        rows = list(self._table(table).values())

        for order in reversed(list(params.get("orderBy") or [])):
            field = order.get("field", "Id")
            desc = str(order.get("direction", "asc")).lower() == "desc"
            rows.sort(key=lambda r: (r.get(field) is None, r.get(field) or ""), reverse=desc)

        paging = params.get("pagingInfo") or {}
        offset = int(paging.get("offset", 0) or 0)
        limit = paging.get("limit")
        rows = rows[offset:] if limit is None else rows[offset : offset + int(limit)]

        fields = params.get("fields")
        if fields:
            rows = [{k: r[k] for k in fields if k in r} for r in rows]
        else:
            rows = [dict(r) for r in rows]
        return {"data": rows}

    async def create_record(self, table: str, params: Mapping[str, Any]) -> Envelope:
        record = dict(params.get("record") or {})
        now = _now_iso()
        record_id = self._next_id
        self._next_id += 1
        record.update(Id=record_id, CreatedOn=now, ModifiedOn=now)
        self._table(table)[record_id] = record
        return {"data": dict(record)}

    async def update_record(self, table: str, record_id: str, params: Mapping[str, Any]) -> Envelope:
        rows, key = self._lookup(table, record_id)
        changes = {k: v for k, v in dict(params.get("record") or {}).items() if k not in ("Id", "CreatedOn")}
        rows[key] = {**rows[key], **changes, "ModifiedOn": _now_iso()}
        return {"data": dict(rows[key])}

    async def delete_record(self, table: str, record_id: str) -> Envelope:
        rows, key = self._lookup(table, record_id)
        del rows[key]
        return {"data": {"Id": key}}

    # ---- auth ----

    async def login(self, email: str, password: str) -> Envelope:
        if not email or not password:
            raise RemoteError("Email and password are required", status=400)
        now = _now_iso()
        self._user = {
            "Id": 1,
            "Name": email.split("@", 1)[0],
            "Email": email,
            "LastLoginDate": now,
            "CreatedOn": (self._user or {}).get("CreatedOn", now),
        }
        return {"data": dict(self._user)}

    async def signup(self, name: str, email: str, password: str) -> Envelope:
        if not name or not email or not password:
            raise RemoteError("Name, email and password are required", status=400)
        now = _now_iso()
        first, _, last = name.partition(" ")
        self._user = {
            "Id": 1,
            "Name": name,
            "firstName": first,
            "lastName": last,
            "Email": email,
            "LastLoginDate": now,
            "CreatedOn": now,
        }
        return {"data": dict(self._user)}

    async def logout(self) -> None:
        self._user = None
