"""List name validation for keeping list files inside the workspace."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from todo_service.errors import McpError

LIST_FILE_SUFFIX = ".md"


def resolve_list_path(workspace_root: Path, list_name: str) -> Path:
    """Validate a list name and return the path of its backing file."""
    if not isinstance(list_name, str):
        raise McpError(
            "INVALID_TYPE",
            "List name must be a string.",
            {"listName": str(list_name), "type": type(list_name).__name__},
        )

    stripped = list_name.strip()
    if not stripped:
        raise McpError(
            "INVALID_LIST_NAME",
            "List name must not be empty.",
            {"listName": list_name},
        )

    if any(ord(char) < 32 or ord(char) == 127 for char in stripped):
        raise McpError(
            "INVALID_LIST_NAME",
            "List name must not contain control characters.",
            {"listName": list_name},
        )

    candidate = PurePosixPath(stripped.replace("\\", "/"))
    if (
        candidate.is_absolute()
        or len(candidate.parts) != 1
        or candidate.name in {".", ".."}
    ):
        raise McpError(
            "INVALID_LIST_NAME",
            "List name must be a plain name without path separators.",
            {"listName": list_name},
        )

    target = workspace_root / f"{stripped}{LIST_FILE_SUFFIX}"
    if target.is_symlink():
        raise McpError(
            "PATH_SYMLINK",
            "Symlinked list files are not allowed.",
            {"listName": list_name},
        )
    return target
