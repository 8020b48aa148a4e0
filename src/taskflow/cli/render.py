# src/taskflow/cli/render.py

"""Plain-text rendering of tasks, the form, the profile and the status banner."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import date, datetime

from ..auth.service import UserProfile
from ..core.notify import Notification, NotificationKind
from ..tasks.task_form import FormController
from ..tasks.task_models import FilterCriteria, Task, TaskPriority, TaskStatus


def _color_enabled() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    if os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}:
        return True
    return sys.stdout.isatty()


@dataclass(frozen=True, slots=True)
class Palette:
    enabled: bool
    dark: bool

    def _wrap(self, code: str, text: str) -> str:
        return f"\033[{code}m{text}\033[0m" if self.enabled else text

    def bold(self, text: str) -> str:
        return self._wrap("1", text)

    def dim(self, text: str) -> str:
        return self._wrap("2", text)

    def status(self, status: TaskStatus, text: str) -> str:
        # bright variants read better on dark backgrounds
        base = {TaskStatus.PENDING: 33, TaskStatus.IN_PROGRESS: 34, TaskStatus.COMPLETED: 32}[status]
        return self._wrap(str(base + 60 if self.dark else base), text)

    def priority(self, priority: TaskPriority, text: str) -> str:
        base = {TaskPriority.LOW: 32, TaskPriority.MEDIUM: 33, TaskPriority.HIGH: 31}[priority]
        return self._wrap(str(base + 60 if self.dark else base), text)

    def error(self, text: str) -> str:
        return self._wrap("91" if self.dark else "31", text)

    def success(self, text: str) -> str:
        return self._wrap("92" if self.dark else "32", text)


def make_palette(dark: bool) -> Palette:
    return Palette(enabled=_color_enabled(), dark=dark)


def format_date(value: date | datetime | None, empty: str = "") -> str:
    """Short date: 'Oct 19, 2026'."""
    if value is None:
        return empty
    if isinstance(value, datetime):
        value = value.astimezone().date()
    return f"{value:%b} {value.day}, {value.year}"


def format_long_date(value: datetime | None) -> str:
    """Long date for the profile page: 'October 19, 2026'."""
    if value is None:
        return "N/A"
    local = value.astimezone() if value.tzinfo else value
    return f"{local:%B} {local.day}, {local.year}"


def format_task(task: Task, p: Palette) -> str:
    mark = "[x]" if task.is_completed else "[ ]"
    title = p.dim(task.title) if task.is_completed else p.bold(task.title)

    line = (
        f"{mark} #{task.id} {title}  "
        f"{p.status(task.status, task.status.label)} | {p.priority(task.priority, task.priority.label)}"
    )
    meta: list[str] = []
    if task.due_date:
        meta.append(f"due {format_date(task.due_date)}")
    meta.append(f"updated {format_date(task.updated_at)}")

    lines = [line, "      " + p.dim(" · ".join(meta))]
    if task.description:
        desc = task.description if len(task.description) <= 120 else task.description[:117] + "..."
        lines.insert(1, "      " + desc)
    return "\n".join(lines)


def format_task_list(visible: list[Task], total: int, criteria: FilterCriteria, p: Palette) -> str:
    header = p.bold("Your Tasks") + (f" ({len(visible)})" if visible else "")
    if not criteria.is_default:
        parts = []
        if criteria.status != "all":
            parts.append(f"status={criteria.status}")
        if criteria.priority != "all":
            parts.append(f"priority={criteria.priority}")
        if criteria.search:
            parts.append(f"search={criteria.search!r}")
        header += p.dim("  [" + ", ".join(parts) + "]")

    if not visible:
        if total == 0:
            msg = "No tasks found. You haven't created any tasks yet. Add your first task with /add or /new."
        else:
            msg = "No tasks found. No tasks match your current filters. Try adjusting your search or filters."
        return f"{header}\n{msg}"

    return "\n".join([header, *(format_task(t, p) for t in visible)])


def format_form(form: FormController, p: Palette) -> str:
    d = form.draft
    title = "Edit Task" if form.is_editing else "Create New Task"
    if form.is_editing:
        title += f" #{form.editing_id}"

    def row(label: str, value: str, field: str) -> str:
        line = f"  {label:<12} {value}"
        if field in form.errors:
            line += "  " + p.error(f"! {form.errors[field]}")
        return line

    return "\n".join(
        [
            p.bold(title),
            row("title*", d.title or p.dim("(empty)"), "title"),
            row("description", d.description or p.dim("(empty)"), "description"),
            row("due_date", d.due_date.isoformat() if d.due_date else p.dim("(none)"), "due_date"),
            row("priority", d.priority.label, "priority"),
            row("status", d.status.label, "status"),
            p.dim("  /set <field> <value>, /save to submit, /cancel to discard"),
        ]
    )


def format_profile(profile: UserProfile, p: Palette) -> str:
    return "\n".join(
        [
            p.bold("Personal Information"),
            f"  Full Name        {profile.full_name or 'N/A'}",
            f"  Email            {profile.email or 'N/A'}",
            f"  Phone            {profile.phone}",
            p.bold("Account Information"),
            f"  Last Login       {format_long_date(profile.last_login)}",
            f"  Account Created  {format_long_date(profile.created_on)}",
        ]
    )


def format_notification(n: Notification | None, p: Palette) -> str | None:
    if n is None:
        return None
    if n.kind == NotificationKind.ERROR:
        return p.error(f"✗ {n.message}")
    return p.success(f"✓ {n.message}")
