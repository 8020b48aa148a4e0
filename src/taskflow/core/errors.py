# src/taskflow/core/errors.py

"""
Error taxonomy shared by the backend client, the task API and the store.

- RemoteError: network/backend failure (message, HTTP-ish status, details).
- ValidationError: field-level, local; never sent over the wire.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"


class TaskflowError(Exception):
    """Base class for errors raised by taskflow itself."""


class RemoteError(TaskflowError):
    def __init__(
        self,
        message: str = DEFAULT_ERROR_MESSAGE,
        status: int = 500,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message or DEFAULT_ERROR_MESSAGE
        self.status = int(status)
        self.details: dict[str, Any] = dict(details or {})

    def __repr__(self) -> str:
        return f"RemoteError(message={self.message!r}, status={self.status})"


class ValidationError(TaskflowError):
    """Raised when a draft fails local validation. `errors` maps field -> message."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        self.errors: dict[str, str] = dict(errors)
        fields = ", ".join(sorted(self.errors)) or "draft"
        super().__init__(f"Invalid {fields}")


def to_remote_error(exc: BaseException) -> RemoteError:
    """
    Normalise any failure below the task API into a RemoteError.

    RemoteErrors pass through unchanged; anything else keeps its message (or a
    generic one) and is reported as status 500.
    """
    if isinstance(exc, RemoteError):
        return exc

    logger.error("API error: %s: %s", exc.__class__.__name__, exc)

    status = getattr(exc, "status", None)
    details = getattr(exc, "details", None)
    return RemoteError(
        message=str(exc).strip() or DEFAULT_ERROR_MESSAGE,
        status=status if isinstance(status, int) else 500,
        details=details if isinstance(details, Mapping) else {},
    )
