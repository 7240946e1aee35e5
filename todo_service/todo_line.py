"""Parsing and rewriting of single task lines.

A task line is a Markdown checkbox item with optional inline markers:

    - [ ] Finalize PRD [!!!] @2024-01-01 #work

The raw line is always kept so a record renders back byte-for-byte; the
parsed fields are read-only views over it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

PENDING_PREFIX = "- [ ] "
COMPLETED_PREFIX = "- [x] "
CHECKBOX_STATE_INDEX = 3

PRIORITIES = ("low", "medium", "high")
# Longest marker first so "[!!!]" is never read as "[!!]".
PRIORITY_MARKERS = (
    ("[!!!]", "high"),
    ("[!!]", "medium"),
    ("[!]", "low"),
)

PRIORITY_PATTERN = re.compile(r"\[!{1,3}\]")
DUE_DATE_PATTERN = re.compile(r"@([0-9]{4}-[0-9]{2}-[0-9]{2})")
TAG_PATTERN = re.compile(r"#(\w+)")


@dataclass(frozen=True)
class TaskRecord:
    """One parsed task line."""

    display_name: str
    completed: bool
    priority: str | None
    due_date: str | None
    tags: tuple[str, ...] = field(default_factory=tuple)
    raw_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "displayName": self.display_name,
            "completed": self.completed,
            "priority": self.priority,
            "dueDate": self.due_date,
            "tags": list(self.tags),
            "rawText": self.raw_text,
        }


def _split_checkbox(line: str) -> tuple[bool, str]:
    if line.startswith(COMPLETED_PREFIX):
        return True, line[len(COMPLETED_PREFIX) :]
    if line.startswith(PENDING_PREFIX):
        return False, line[len(PENDING_PREFIX) :]
    return False, line


def _find_priority(content: str) -> str | None:
    for marker, priority in PRIORITY_MARKERS:
        if marker in content:
            return priority
    return None


def _find_due_date(content: str) -> str | None:
    match = DUE_DATE_PATTERN.search(content)
    if match is None:
        return None
    return match.group(1)


def _find_tags(content: str) -> tuple[str, ...]:
    return tuple(match.group(1) for match in TAG_PATTERN.finditer(content))


def _marker_spans(content: str) -> list[tuple[int, int]]:
    spans: list[tuple[int, int]] = []
    for pattern in (PRIORITY_PATTERN, DUE_DATE_PATTERN, TAG_PATTERN):
        spans.extend(match.span() for match in pattern.finditer(content))
    return sorted(spans)


def _join_around_marker(left: str, right: str) -> str:
    # Whitespace on either side of a removed marker collapses to one space.
    if left[-1:].isspace() or right[:1].isspace():
        return left.rstrip() + " " + right.lstrip()
    return left + right


def _strip_markers(content: str) -> str:
    pieces: list[str] = []
    cursor = 0
    for start, end in _marker_spans(content):
        if end <= cursor:
            continue
        pieces.append(content[cursor:start])
        cursor = end
    pieces.append(content[cursor:])

    display_name = pieces[0]
    for piece in pieces[1:]:
        display_name = _join_around_marker(display_name, piece)
    return display_name.strip()


def parse_todo_line(line: str) -> TaskRecord:
    """Parse a raw task line into a record.

    Lines without a recognized checkbox are kept as pending tasks whose
    content is the whole line. Parsing never fails.
    """
    completed, content = _split_checkbox(line)
    return TaskRecord(
        display_name=_strip_markers(content),
        completed=completed,
        priority=_find_priority(content),
        due_date=_find_due_date(content),
        tags=_find_tags(content),
        raw_text=line,
    )


def render_todo_line(record: TaskRecord) -> str:
    return record.raw_text


def format_todo_line(task_text: str) -> str:
    """Build the raw line for a new pending task."""
    return f"{PENDING_PREFIX}{task_text}"


def set_completed(record: TaskRecord, completed: bool) -> TaskRecord:
    """Return a copy of ``record`` with only its checkbox state rewritten."""
    raw_text = record.raw_text
    state = "x" if completed else " "
    if raw_text.startswith(PENDING_PREFIX) or raw_text.startswith(COMPLETED_PREFIX):
        updated = (
            raw_text[:CHECKBOX_STATE_INDEX]
            + state
            + raw_text[CHECKBOX_STATE_INDEX + 1 :]
        )
    else:
        prefix = COMPLETED_PREFIX if completed else PENDING_PREFIX
        updated = prefix + raw_text
    return parse_todo_line(updated)
