"""Payload validation helpers for tool endpoints."""

from __future__ import annotations

from typing import Any

from todo_service.errors import McpError


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise McpError(
            "INVALID_TYPE",
            "Payload must be an object.",
            {"type": type(payload).__name__},
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise McpError(
            "UNKNOWN_FIELD",
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
        )


def _require_text(
    payload: dict[str, Any], key: str, *, allow_blank: bool = False
) -> str:
    if key not in payload or payload[key] is None:
        raise McpError(
            "INVALID_INPUT",
            f"{key} is required.",
            {"fields": [key]},
        )
    value = payload[key]
    if not isinstance(value, str):
        raise McpError(
            "INVALID_TYPE",
            f"{key} must be a string.",
            {key: str(value), "type": type(value).__name__},
        )
    empty = not value if allow_blank else not value.strip()
    if empty:
        raise McpError(
            "INVALID_INPUT",
            f"{key} must not be empty.",
            {"fields": [key]},
        )
    return value


def _optional_text(payload: dict[str, Any], key: str, default: str | None = None) -> str | None:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise McpError(
            "INVALID_TYPE",
            f"{key} must be a string.",
            {key: str(value), "type": type(value).__name__},
        )
    return value
