"""Tool handler registration."""

# ruff: noqa: F401

from __future__ import annotations

from fastapi import FastAPI

from todo_service.mcp_constants import ACTIVITY_LOG_FILENAME
from todo_service.mcp_router import mcp_router

# Import modules to register routes with the shared router.
from todo_service import mcp_activity, mcp_todos, mcp_tools_endpoint

# Re-export endpoints for tests and direct imports.
from todo_service.mcp_activity import read_activity_log
from todo_service.mcp_todos import add_todo, list_todos, toggle_todo
from todo_service.mcp_tools_endpoint import list_tool_schemas


def register_mcp_handlers(app: FastAPI) -> None:
    """Attach tool routes to the FastAPI application."""
    app.include_router(mcp_router)
