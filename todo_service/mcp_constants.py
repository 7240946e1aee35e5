"""Shared constants for tool endpoints."""

from __future__ import annotations

DEFAULT_LIST_NAME = "TODO"
ACTIVITY_LOG_FILENAME = "activity.log"
DONE_GLYPH = "✅"
PENDING_GLYPH = "❎"
NO_TASKS_MESSAGE = "No tasks found."
