# src/taskflow/auth/service.py

"""
Authentication as a single awaited call.

login/signup/logout return an AuthResult (ok + profile, or an error) instead of
invoking success/error callbacks, so the rest of the app never depends on how
the backend's auth flow is wired.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..core.errors import RemoteError, to_remote_error
from ..core.ports import AuthBackend

logger = logging.getLogger(__name__)


def _parse_ts(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).strip())
    except ValueError:
        return None


def _first_str(raw: Mapping[str, Any], *keys: str) -> str:
    for k in keys:
        v = raw.get(k)
        if v is not None and str(v).strip():
            return str(v).strip()
    return ""


@dataclass(slots=True, frozen=True)
class UserProfile:
    """
    User profile as returned by the backend.

    The backend is inconsistent about casing (firstName vs Name, Email vs
    emailAddress); both spellings are honoured and neither is treated as
    authoritative.
    """

    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> UserProfile:
        return cls(raw=dict(raw or {}))

    @property
    def id(self) -> str:
        return _first_str(self.raw, "Id", "id")

    @property
    def display_name(self) -> str:
        return _first_str(self.raw, "firstName", "Name") or "User"

    @property
    def full_name(self) -> str:
        name = _first_str(self.raw, "Name")
        if name:
            return name
        return f"{_first_str(self.raw, 'firstName')} {_first_str(self.raw, 'lastName')}".strip()

    @property
    def email(self) -> str:
        return _first_str(self.raw, "Email", "emailAddress")

    @property
    def phone(self) -> str:
        return _first_str(self.raw, "Phone") or "Not provided"

    @property
    def last_login(self) -> datetime | None:
        return _parse_ts(self.raw.get("LastLoginDate"))

    @property
    def created_on(self) -> datetime | None:
        return _parse_ts(self.raw.get("CreatedOn"))


@dataclass(slots=True, frozen=True)
class AuthResult:
    ok: bool
    profile: UserProfile | None = None
    error: RemoteError | None = None

    @classmethod
    def success(cls, profile: UserProfile | None = None) -> AuthResult:
        return cls(ok=True, profile=profile)

    @classmethod
    def failure(cls, error: RemoteError) -> AuthResult:
        return cls(ok=False, error=error)


class AuthService:
    def __init__(self, backend: AuthBackend) -> None:
        self._backend = backend

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            envelope = await self._backend.login(email.strip(), password)
        except Exception as e:
            err = to_remote_error(e)
            logger.warning("Login failed for %s: %s", email, err.message)
            return AuthResult.failure(err)
        return self._profile_result(envelope, action="login")

    async def signup(self, name: str, email: str, password: str) -> AuthResult:
        try:
            envelope = await self._backend.signup(name.strip(), email.strip(), password)
        except Exception as e:
            err = to_remote_error(e)
            logger.warning("Signup failed for %s: %s", email, err.message)
            return AuthResult.failure(err)
        return self._profile_result(envelope, action="signup")

    async def logout(self) -> AuthResult:
        try:
            await self._backend.logout()
        except Exception as e:
            err = to_remote_error(e)
            logger.error("Logout error: %s", err.message)
            return AuthResult.failure(err)
        return AuthResult.success()

    @staticmethod
    def _profile_result(envelope: Any, *, action: str) -> AuthResult:
        data = envelope.get("data") if isinstance(envelope, Mapping) else None
        if not isinstance(data, Mapping):
            return AuthResult.failure(RemoteError(f"Backend returned no user profile on {action}", status=502))
        profile = UserProfile.from_raw(data)
        logger.info("Authenticated user id=%s via %s", profile.id or "?", action)
        return AuthResult.success(profile)
