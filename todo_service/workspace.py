"""Request-scoped workspace helpers."""

from __future__ import annotations

from pathlib import Path

from fastapi import Request

from todo_service.list_store import ListStore
from todo_service.webhooks import WebhookNotifier

SERVICE_TOKEN_HEADER = "X-Pro-Todo-Service-Token"
AUTH_EXEMPT_PATHS = {"/health"}


def get_request_workspace_root(request: Request) -> Path:
    """Resolve and create the workspace directory for a request."""
    config = getattr(request.app.state, "config", None)
    if config is not None and hasattr(config, "workspace_path"):
        workspace_root = Path(config.workspace_path)
    else:
        workspace_root = Path(request.app.state.workspace_path)
    workspace_root.mkdir(parents=True, exist_ok=True)
    return workspace_root


def get_request_store(request: Request) -> ListStore:
    store = getattr(request.app.state, "store", None)
    if isinstance(store, ListStore):
        return store
    config = getattr(request.app.state, "config", None)
    git_history = bool(getattr(config, "git_history", False))
    return ListStore(get_request_workspace_root(request), git_history=git_history)


def get_request_notifier(request: Request) -> WebhookNotifier | None:
    return getattr(request.app.state, "notifier", None)
