# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_form import validate_draft
from ..tasks.task_models import FILTER_ALL, FilterCriteria, TaskDraft
from ..tasks.task_store import TaskStore
from .render import format_form, format_profile, format_task_list, make_palette

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]

logger = logging.getLogger(__name__)

LOGIN_REQUIRED = "Please sign in first: /login <email> <password> (or /signup)."
BUSY = "Another change is still being saved. Please wait."


class CommandRegistry:
    """Slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _session(state: AppState) -> TaskStore | None:
    return state.store if state.is_authenticated else None


def _list_view(state: AppState) -> str:
    store = state.store
    p = make_palette(state.prefs.dark_mode)
    if store is None:
        return LOGIN_REQUIRED
    if store.load_error is not None:
        return p.error(f"Could not load your tasks ({store.load_error.message}). Use /reload to try again.")
    return format_task_list(store.derive(state.filters), len(store.tasks), state.filters, p)


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    settings = state.settings
    backend = "offline demo" if getattr(settings, "offline", False) else getattr(settings, "api_base_url", "?")
    user = (state.user.email or state.user.display_name) if state.user else "(signed out)"
    lines = [
        "Status:",
        f"  Backend: {backend}",
        f"  User: {user}",
        f"  Theme: {'dark' if state.prefs.dark_mode else 'light'}",
    ]
    if state.store is not None:
        counts = ", ".join(f"{s.label}: {n}" for s, n in state.store.counts().items())
        lines.append(f"  Tasks: {len(state.store.tasks)} ({counts})")
    return "\n".join(lines)


async def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        return "Usage: /login <email> <password>"
    if state.is_authenticated:
        return f"Already signed in as {state.user.display_name if state.user else 'User'}. Use /logout first."

    result = await state.auth.login(args[0], " ".join(args[1:]))
    if not result.ok or result.profile is None:
        msg = result.error.message if result.error else "unknown error"
        return f"Authentication error: {msg}"

    return await _open_session(state, result.profile, emit)


async def cmd_signup(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 3:
        return "Usage: /signup <name> <email> <password>"
    if state.is_authenticated:
        return "Already signed in. Use /logout first."

    result = await state.auth.signup(args[0], args[1], " ".join(args[2:]))
    if not result.ok or result.profile is None:
        msg = result.error.message if result.error else "unknown error"
        return f"Authentication error: {msg}"

    return await _open_session(state, result.profile, emit)


async def _open_session(state: AppState, profile, emit: CommandEmitter | None) -> str:
    store = state.start_session(profile)
    if emit:
        emit("Loading your tasks...")
    await store.load()
    return f"Hello, {profile.display_name}!\n\n{_list_view(state)}"


async def cmd_logout(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not state.is_authenticated:
        return "You are not signed in."
    result = await state.auth.logout()
    state.end_session()
    if not result.ok:
        return "Signed out locally (the backend logout call failed)."
    return "Signed out."


def cmd_profile(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.user is None:
        return LOGIN_REQUIRED
    return format_profile(state.user, make_palette(state.prefs.dark_mode))


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return _list_view(state)


def cmd_filter(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /filter                       -> show the list with current filters
    /filter status=completed      -> status: all | pending | in-progress | completed
    /filter priority=high         -> priority: all | low | medium | high
    /filter reset                 -> clear status, priority and search
    """
    if _session(state) is None:
        return LOGIN_REQUIRED
    if args and args[0].lower() in ("reset", "clear"):
        state.filters = FilterCriteria()
        return _list_view(state)

    status, priority = state.filters.status, state.filters.priority
    for arg in args:
        key, sep, value = arg.partition("=")
        value = value.strip().lower() or FILTER_ALL
        if not sep or key.lower() not in ("status", "priority"):
            return "Usage: /filter status=<all|pending|in-progress|completed> priority=<all|low|medium|high> | /filter reset"
        if key.lower() == "status":
            status = value
        else:
            priority = value

    try:
        state.filters = FilterCriteria(status=status, priority=priority, search=state.filters.search)
    except ValueError as e:
        return f"Invalid filter: {e}"
    return _list_view(state)


def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if _session(state) is None:
        return LOGIN_REQUIRED
    f = state.filters
    state.filters = FilterCriteria(status=f.status, priority=f.priority, search=" ".join(args))
    return _list_view(state)


def cmd_new(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if _session(state) is None or state.form is None:
        return LOGIN_REQUIRED
    state.form.cancel()
    return format_form(state.form, make_palette(state.prefs.dark_mode))


def cmd_form(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if _session(state) is None or state.form is None:
        return LOGIN_REQUIRED
    return format_form(state.form, make_palette(state.prefs.dark_mode))


def cmd_set(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/set <title|description|due_date|priority|status> <value...>"""
    if _session(state) is None or state.form is None:
        return LOGIN_REQUIRED
    if not args:
        return "Usage: /set <title|description|due_date|priority|status> <value>"

    field = args[0].lower().replace("-", "_")
    if field == "due":
        field = "due_date"
    value = " ".join(args[1:])
    try:
        state.form.set_field(field, value)
    except ValueError as e:
        return f"Invalid value for {field}: {e}"
    return format_form(state.form, make_palette(state.prefs.dark_mode))


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = _session(state)
    if store is None or state.form is None:
        return LOGIN_REQUIRED
    if not args:
        return "Usage: /edit <task id>"
    task = store.get(args[0].lstrip("#"))
    if task is None:
        return f"No task with id {args[0]}."
    state.form.begin_edit(task)
    return format_form(state.form, make_palette(state.prefs.dark_mode))


def cmd_cancel(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if _session(state) is None or state.form is None:
        return LOGIN_REQUIRED
    was_editing = state.form.is_editing
    state.form.cancel()
    return "Edit cancelled." if was_editing else "Form cleared."


async def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = _session(state)
    form = state.form
    if store is None or form is None:
        return LOGIN_REQUIRED
    if store.busy:
        return BUSY

    task = await store.submit(form.draft, form.editing_id)
    if task is None:
        # validation errors are shown inline; remote errors arrive as a notification
        return format_form(form, make_palette(state.prefs.dark_mode))
    return _list_view(state)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <title...> -> create a task with default priority/status in one step.

    Uses its own draft; whatever is in the shared form stays untouched.
    """
    store = _session(state)
    if store is None:
        return LOGIN_REQUIRED
    if store.busy:
        return BUSY

    draft = TaskDraft(title=" ".join(args))
    errors = validate_draft(draft)
    if errors:
        return "Usage: /add <title>  (" + "; ".join(errors.values()) + ")"

    task = await store.submit(draft, bind_form=False)
    if task is None:
        return "Task was not created."
    return _list_view(state)


async def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = _session(state)
    if store is None:
        return LOGIN_REQUIRED
    if not args:
        return "Usage: /done <task id>"
    if store.busy:
        return BUSY
    await store.toggle_completion(args[0].lstrip("#"))
    return _list_view(state)


async def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = _session(state)
    if store is None:
        return LOGIN_REQUIRED
    if not args:
        return "Usage: /rm <task id>"
    if store.busy:
        return BUSY
    await store.remove(args[0].lstrip("#"))
    return _list_view(state)


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    store = _session(state)
    if store is None:
        return LOGIN_REQUIRED
    if store.busy:
        return BUSY
    if emit:
        emit("Loading your tasks...")
    await state.reload()
    return _list_view(state)


def cmd_theme(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /theme          -> toggle
    /theme dark     -> dark palette
    /theme light    -> light palette
    """
    if not args:
        dark = state.prefs.toggle_dark_mode()
    else:
        arg = args[0].lower()
        if arg not in ("dark", "light"):
            return "Usage: /theme [dark|light]"
        state.prefs.dark_mode = arg == "dark"
        dark = state.prefs.dark_mode
    logger.debug("Theme switched to %s", "dark" if dark else "light")
    return f"Theme: {'dark' if dark else 'light'}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, user and task counts.")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("signup", cmd_signup, help_text="Create an account: /signup <name> <email> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out and drop the session.")
registry.register("profile", cmd_profile, help_text="Show your profile.")
registry.register("list", cmd_list, help_text="Show tasks matching the current filters.", aliases=["ls"])
registry.register(
    "filter", cmd_filter, help_text="Filter: /filter status=<..> priority=<..> | /filter reset."
)
registry.register("search", cmd_search, help_text="Search titles: /search <text> (empty clears).")
registry.register("new", cmd_new, help_text="Start a new task in the form.")
registry.register("form", cmd_form, help_text="Show the form (draft + errors).")
registry.register("set", cmd_set, help_text="Set a form field: /set <field> <value>.")
registry.register("save", cmd_save, help_text="Submit the form (create or update).")
registry.register("add", cmd_add, help_text="Quick add: /add <title>.")
registry.register("edit", cmd_edit, help_text="Load a task into the form: /edit <id>.")
registry.register("cancel", cmd_cancel, help_text="Discard the form / leave edit mode.")
registry.register("done", cmd_done, help_text="Toggle completed: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("reload", cmd_reload, help_text="Reload tasks from the backend.")
registry.register("theme", cmd_theme, help_text="Switch theme: /theme [dark|light].")
