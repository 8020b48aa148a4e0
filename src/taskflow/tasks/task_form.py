# src/taskflow/tasks/task_form.py

"""
Shared create/edit form.

One draft at a time. A bound task id means "editing that task";
no bound id means "creating a new one".
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..core.errors import ValidationError
from .task_models import EDITABLE_FIELDS, Task, TaskDraft, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TITLE_REQUIRED = "Title is required"
DUE_DATE_IN_PAST = "Due date cannot be in the past"


def validate_draft(draft: TaskDraft, *, today: date | None = None) -> dict[str, str]:
    """Return field -> message for every invalid field; empty when the draft is valid."""
    errors: dict[str, str] = {}

    if not (draft.title or "").strip():
        errors["title"] = TITLE_REQUIRED

    # "today" is the local calendar day; a due date on that day is still valid.
    if today is None:
        today = date.today()
    if draft.due_date is not None and draft.due_date < today:
        errors["due_date"] = DUE_DATE_IN_PAST

    return errors


def ensure_valid(draft: TaskDraft, *, today: date | None = None) -> None:
    errors = validate_draft(draft, today=today)
    if errors:
        raise ValidationError(errors)


def _coerce(name: str, value: Any) -> Any:
    if name in ("title", "description"):
        return "" if value is None else str(value)
    if name == "due_date":
        if value is None or isinstance(value, date):
            return value
        s = str(value).strip()
        return date.fromisoformat(s) if s else None
    if name == "priority":
        return TaskPriority(str(value).strip().lower())
    if name == "status":
        return TaskStatus(str(value).strip().lower())
    raise ValueError(f"Unknown form field: {name}")


class FormController:
    def __init__(self) -> None:
        self.draft = TaskDraft()
        self.editing_id: str | None = None
        self.errors: dict[str, str] = {}

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def set_field(self, name: str, value: Any) -> None:
        """
        Update one draft field and clear its validation error.

        Raises ValueError for unknown fields, bad dates or unknown enum values.
        """
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        setattr(self.draft, name, _coerce(name, value))
        self.errors.pop(name, None)

    def validate(self, draft: TaskDraft | None = None, *, today: date | None = None) -> dict[str, str]:
        self.errors = validate_draft(draft if draft is not None else self.draft, today=today)
        return dict(self.errors)

    def begin_edit(self, task: Task) -> None:
        self.draft = TaskDraft.from_task(task)
        self.editing_id = task.id
        self.errors = {}
        logger.debug("Form bound to task id=%s", task.id)

    def cancel(self) -> None:
        self._reset()

    def reset_after_submit(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.draft = TaskDraft()
        self.editing_id = None
        self.errors = {}
