"""Load, mutate and persist named task lists.

Each list lives in ``<workspace>/<list name>.md``, one task per line. Every
operation reads the file fresh, works on the parsed records in memory and
rewrites the whole file; nothing is cached between calls.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from todo_service.errors import StorageError
from todo_service.mcp_git import _ensure_git_repo, commit_list_file
from todo_service.mcp_utils import _atomic_write
from todo_service.paths import resolve_list_path
from todo_service.todo_line import (
    TaskRecord,
    format_todo_line,
    parse_todo_line,
    set_completed,
)

logger = logging.getLogger(__name__)

# Fixed stripe count: distinct lists may share a lock, the same list never
# gets two.
LIST_LOCK_STRIPES = 64
_LIST_LOCKS: tuple[threading.Lock, ...] = tuple(
    threading.Lock() for _ in range(LIST_LOCK_STRIPES)
)


def _lock_for(path: Path) -> threading.Lock:
    return _LIST_LOCKS[hash(str(path.resolve())) % LIST_LOCK_STRIPES]


@contextmanager
def _list_lock(path: Path) -> Iterator[None]:
    with _lock_for(path):
        yield


@dataclass(frozen=True)
class ListChange:
    """A task written by ``add`` or ``toggle`` and the commit that holds it."""

    record: TaskRecord
    commit_sha: str | None = None


def _read_list_text(path: Path) -> str | None:
    if not path.exists():
        return None
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StorageError(
            "List file could not be read.",
            {"path": path.name, "error": str(exc)},
        ) from exc


def _parse_list_text(text: str) -> list[TaskRecord]:
    return [parse_todo_line(line) for line in text.split("\n") if line.strip()]


def _serialize_records(records: Iterable[TaskRecord]) -> str:
    return "\n".join(record.raw_text for record in records) + "\n"


def filter_tasks(
    records: Iterable[TaskRecord],
    *,
    priority: str | None = None,
    tag: str | None = None,
) -> list[TaskRecord]:
    """Keep records matching every given filter, in their original order."""
    filtered: list[TaskRecord] = []
    for record in records:
        if priority and record.priority != priority:
            continue
        if tag and tag not in record.tags:
            continue
        filtered.append(record)
    return filtered


class ListStore:
    """File-backed storage for task lists under one workspace directory."""

    def __init__(self, workspace_root: Path, *, git_history: bool = False) -> None:
        self.workspace_root = Path(workspace_root)
        self.git_history = git_history

    def list_path(self, list_name: str) -> Path:
        return resolve_list_path(self.workspace_root, list_name)

    def load(self, list_name: str) -> list[TaskRecord]:
        """Return the records of ``list_name``; a missing list is empty."""
        text = _read_list_text(self.list_path(list_name))
        if text is None:
            return []
        return _parse_list_text(text)

    def save(
        self,
        list_name: str,
        records: Iterable[TaskRecord],
        *,
        operation: str = "save",
    ) -> str | None:
        """Overwrite ``list_name`` with ``records``.

        Returns the commit SHA when git history is enabled.
        """
        path = self.list_path(list_name)
        repo = None
        original = None
        if self.git_history:
            repo = _ensure_git_repo(self.workspace_root)
            original = _read_list_text(path)
        content = _serialize_records(records)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, content)
        except OSError as exc:
            raise StorageError(
                "List file could not be written.",
                {"path": path.name, "error": str(exc)},
            ) from exc
        logger.debug("wrote %d bytes to %s", len(content.encode("utf-8")), path)

        if repo is None:
            return None
        return commit_list_file(repo, self.workspace_root, path, operation, original)

    def add(self, list_name: str, task_text: str) -> ListChange:
        """Append a new pending task built from ``task_text``."""
        record = parse_todo_line(format_todo_line(task_text))
        with _list_lock(self.list_path(list_name)):
            records = self.load(list_name)
            records.append(record)
            commit_sha = self.save(list_name, records, operation="add-todo")
        logger.info("added task %r to %s", record.display_name, list_name)
        return ListChange(record, commit_sha)

    def toggle(self, list_name: str, keyword: str) -> ListChange | None:
        """Flip the first task whose name contains ``keyword``.

        Matching is a case-insensitive substring test against the display
        name. When several tasks match only the earliest one in the file is
        changed. Returns ``None`` without touching the file if nothing matches.
        """
        needle = keyword.lower()
        with _list_lock(self.list_path(list_name)):
            records = self.load(list_name)
            for index, record in enumerate(records):
                if needle in record.display_name.lower():
                    break
            else:
                logger.info("no task matching %r in %s", keyword, list_name)
                return None

            toggled = set_completed(record, not record.completed)
            records[index] = toggled
            commit_sha = self.save(list_name, records, operation="toggle-todo")
        logger.info(
            "toggled task %r in %s to %s",
            toggled.display_name,
            list_name,
            "completed" if toggled.completed else "pending",
        )
        return ListChange(toggled, commit_sha)
