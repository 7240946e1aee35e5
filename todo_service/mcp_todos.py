"""Todo list tool endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request

from todo_service.errors import McpError, success_response
from todo_service.list_store import ListStore, filter_tasks
from todo_service.mcp_activity import _append_activity_log, _build_activity_entry
from todo_service.mcp_constants import (
    DEFAULT_LIST_NAME,
    DONE_GLYPH,
    NO_TASKS_MESSAGE,
    PENDING_GLYPH,
)
from todo_service.mcp_payload import (
    _ensure_payload_dict,
    _optional_text,
    _reject_unknown_fields,
    _require_text,
)
from todo_service.mcp_router import mcp_router
from todo_service.todo_line import PRIORITIES, TaskRecord
from todo_service.workspace import get_request_notifier, get_request_store

logger = logging.getLogger(__name__)


@mcp_router.post("/tool:list-todos")
def list_todos(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """List tasks of a list, optionally filtered by priority and tag."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"listName", "filterPriority", "filterTag"})

    list_name = _optional_text(payload, "listName", DEFAULT_LIST_NAME)
    priority = _optional_text(payload, "filterPriority")
    tag = _optional_text(payload, "filterTag")
    if priority and priority not in PRIORITIES:
        raise McpError(
            "INVALID_PRIORITY",
            "filterPriority must be one of low, medium, high.",
            {"filterPriority": priority},
        )

    store = get_request_store(request)
    tasks = filter_tasks(store.load(list_name), priority=priority, tag=tag)
    return success_response(
        {
            "listName": list_name,
            "text": _format_task_listing(tasks),
            "tasks": [task.to_dict() for task in tasks],
        }
    )


@mcp_router.post("/tool:add-todo")
def add_todo(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Append a task; priority, due date and tag markers may be inline."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"name", "listName"})

    name = _require_text(payload, "name")
    if "\n" in name or "\r" in name:
        raise McpError(
            "INVALID_INPUT",
            "name must be a single line.",
            {"fields": ["name"]},
        )
    list_name = _optional_text(payload, "listName", DEFAULT_LIST_NAME)

    store = get_request_store(request)
    change = store.add(list_name, name)
    _record_activity(store, list_name, "add-todo", "add task", change.commit_sha)
    data = {
        "listName": list_name,
        "text": f"Added to {list_name}: {name}",
        "task": change.record.to_dict(),
    }
    if change.commit_sha:
        data["commitSha"] = change.commit_sha
    return success_response(data)


@mcp_router.post("/tool:toggle-todo")
def toggle_todo(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Toggle the first task whose name contains the keyword."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"keyword", "listName"})

    keyword = _require_text(payload, "keyword", allow_blank=True)
    list_name = _optional_text(payload, "listName", DEFAULT_LIST_NAME)

    store = get_request_store(request)
    change = store.toggle(list_name, keyword)
    if change is None:
        return success_response(
            {
                "listName": list_name,
                "found": False,
                "text": f'Task "{keyword}" not found in {list_name}.md',
                "task": None,
            }
        )

    task = change.record
    summary = "complete task" if task.completed else "reopen task"
    _record_activity(store, list_name, "toggle-todo", summary, change.commit_sha)
    if task.completed:
        _notify_completed(request, task, list_name)

    state = f"COMPLETED {DONE_GLYPH}" if task.completed else f"PENDING {PENDING_GLYPH}"
    data = {
        "listName": list_name,
        "found": True,
        "text": f'"{task.display_name}" is now {state}',
        "task": task.to_dict(),
    }
    if change.commit_sha:
        data["commitSha"] = change.commit_sha
    return success_response(data)


def _format_task(task: TaskRecord) -> str:
    status = DONE_GLYPH if task.completed else PENDING_GLYPH
    priority = f" [{task.priority.upper()}]" if task.priority else ""
    due = f" (Due: {task.due_date})" if task.due_date else ""
    tags = f" #{' #'.join(task.tags)}" if task.tags else ""
    return f"{status} {task.display_name}{priority}{due}{tags}"


def _format_task_listing(tasks: list[TaskRecord]) -> str:
    if not tasks:
        return NO_TASKS_MESSAGE
    return "\n".join(_format_task(task) for task in tasks)


def _record_activity(
    store: ListStore,
    list_name: str,
    operation: str,
    summary: str,
    commit_sha: str | None = None,
) -> None:
    list_path = store.list_path(list_name)
    entry = _build_activity_entry(
        operation, list_path.relative_to(store.workspace_root), summary, commit_sha
    )
    try:
        _append_activity_log(store.workspace_root, entry)
    except OSError as exc:
        # The list itself is already saved at this point.
        logger.warning("activity log not updated for %s: %s", list_path.name, exc)


def _notify_completed(request: Request, task: TaskRecord, list_name: str) -> None:
    notifier = get_request_notifier(request)
    if notifier is None:
        return
    try:
        notifier.notify_task_completed(task.display_name, list_name)
    except RuntimeError as exc:
        # Submitting after shutdown; the toggle itself already succeeded.
        logger.warning("webhook not dispatched for %s: %s", task.display_name, exc)
