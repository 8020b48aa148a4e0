# src/taskflow/backend/client.py

"""
HTTP client for the record backend (tables + auth endpoints).

IMPORTANT:
- No secrets required at import time; the client is built by the bootstrap.
- No automatic retries: each call is single-shot, failures surface as RemoteError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..core.errors import DEFAULT_ERROR_MESSAGE, RemoteError
from ..core.ports import Envelope

logger = logging.getLogger(__name__)

CANVAS_HEADER = "X-Canvas-Id"


def _make_timeout(seconds: float) -> httpx.Timeout:
    # connect is capped so an unreachable backend fails fast in the console
    return httpx.Timeout(seconds, connect=min(5.0, seconds))


def _error_from_response(resp: httpx.Response) -> RemoteError:
    message = ""
    details: dict[str, Any] = {}
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, Mapping):
        message = str(body.get("message") or body.get("error") or "")
        raw_details = body.get("details")
        if isinstance(raw_details, Mapping):
            details = dict(raw_details)
    if not message:
        message = resp.reason_phrase or DEFAULT_ERROR_MESSAGE

    return RemoteError(message=message, status=resp.status_code, details=details)


def _error_from_transport(exc: httpx.HTTPError) -> RemoteError:
    if isinstance(exc, httpx.TimeoutException):
        return RemoteError("Backend request timed out", status=504, details={"error": type(exc).__name__})
    return RemoteError(
        "Could not reach the backend",
        status=503,
        details={"error": type(exc).__name__, "reason": str(exc)},
    )


class ApperClient:
    """
    Async client for the backend-as-a-service record API.

    Tables:
      POST   /tables/{table}/fetch          -> {"data": [record, ...]}
      POST   /tables/{table}/records        -> {"data": record}
      PUT    /tables/{table}/records/{id}   -> {"data": record}
      DELETE /tables/{table}/records/{id}   -> {"data": {...}} (or empty)
    Auth:
      POST   /auth/login | /auth/signup     -> {"data": profile, "token": "..."}
      POST   /auth/logout
    """

    def __init__(
        self,
        base_url: str,
        canvas_id: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url.strip():
            raise RuntimeError("Backend base URL is not set. Set TASKFLOW_API_BASE_URL in your .env.")

        headers = {"Accept": "application/json"}
        if canvas_id:
            headers[CANVAS_HEADER] = canvas_id

        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=_make_timeout(timeout_seconds),
            transport=transport,
        )
        self._token: str | None = None

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- low-level ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> Envelope:
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            resp = await self._http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Backend %s %s failed: %s", method, path, e.__class__.__name__)
            raise _error_from_transport(e) from e

        if resp.status_code >= 400:
            err = _error_from_response(resp)
            logger.warning("Backend %s %s -> %s %s", method, path, resp.status_code, err.message)
            raise err

        logger.debug("Backend %s %s -> %s", method, path, resp.status_code)
        if not resp.content:
            return {"data": None}
        try:
            body = resp.json()
        except ValueError as e:
            raise RemoteError("Backend returned invalid JSON", status=502) from e
        if not isinstance(body, dict):
            raise RemoteError("Backend returned an unexpected payload", status=502)
        return body

    # ---- records ----

    async def fetch_records(self, table: str, params: Mapping[str, Any]) -> Envelope:
        return await self._request("POST", f"/tables/{table}/fetch", json=dict(params))

    async def create_record(self, table: str, params: Mapping[str, Any]) -> Envelope:
        return await self._request("POST", f"/tables/{table}/records", json=dict(params))

    async def update_record(self, table: str, record_id: str, params: Mapping[str, Any]) -> Envelope:
        return await self._request("PUT", f"/tables/{table}/records/{record_id}", json=dict(params))

    async def delete_record(self, table: str, record_id: str) -> Envelope:
        return await self._request("DELETE", f"/tables/{table}/records/{record_id}")

    # ---- auth ----

    async def login(self, email: str, password: str) -> Envelope:
        body = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self._token = str(body.get("token") or "") or None
        return body

    async def signup(self, name: str, email: str, password: str) -> Envelope:
        body = await self._request(
            "POST",
            "/auth/signup",
            json={"name": name, "email": email, "password": password},
        )
        self._token = str(body.get("token") or "") or None
        return body

    async def logout(self) -> None:
        try:
            await self._request("POST", "/auth/logout")
        finally:
            self._token = None
