# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def from_wire(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(str(raw))
        except ValueError:
            return cls.PENDING


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_wire(cls, raw: Any) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


_STATUS_LABELS = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}

FILTER_ALL = "all"

# Fields a user can edit through the form (and send in an update).
EDITABLE_FIELDS = ("title", "description", "due_date", "priority", "status")


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    description: str
    due_date: date | None
    priority: TaskPriority
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass(slots=True)
class TaskDraft:
    """Mutable, unvalidated form representation of a task."""

    title: str = ""
    description: str = ""
    due_date: date | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            priority=task.priority,
            status=task.status,
        )

    def as_fields(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def copy(self) -> TaskDraft:
        return replace(self)


@dataclass(slots=True, frozen=True)
class FilterCriteria:
    """
    View-side filter: status/priority are "all" or an enum value,
    search is a case-insensitive substring of the title ("" matches everything).
    """

    status: str = FILTER_ALL
    priority: str = FILTER_ALL
    search: str = ""

    def __post_init__(self) -> None:
        if self.status != FILTER_ALL:
            object.__setattr__(self, "status", TaskStatus(self.status).value)
        if self.priority != FILTER_ALL:
            object.__setattr__(self, "priority", TaskPriority(self.priority).value)

    @property
    def is_default(self) -> bool:
        return self == FilterCriteria()

    def matches(self, task: Task) -> bool:
        if self.status != FILTER_ALL and task.status != self.status:
            return False
        if self.priority != FILTER_ALL and task.priority != self.priority:
            return False
        if self.search and self.search.lower() not in task.title.lower():
            return False
        return True


class TaskRecord(BaseModel):
    """
    Raw task record as returned by the backend.

    Every field except Id may be missing; unknown columns are kept.
    """

    model_config = ConfigDict(extra="allow")

    Id: int | str
    Name: str | None = None
    title: str | None = None
    description: str | None = None
    dueDate: str | None = None
    priority: str | None = None
    status: str | None = None
    CreatedOn: str | None = None
    ModifiedOn: str | None = None


def utcnow() -> datetime:
    return datetime.now(UTC)
