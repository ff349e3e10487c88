"""Heuristic extraction of action items from free-form meeting notes.

Notes are scanned line by line. A line opens an action item when it starts
with a bullet, a numbered-list marker, a checkbox, or an explicit label
such as ``Action:`` or ``TODO:``. Lines indented beneath an opening line
are collected as its continuation: nested bullets become subtasks and all
collected lines are appended to the item description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from src.extraction.dates import DateParser, resolve_due_date
from src.extraction.models import ExtractedActionItem
from src.extraction.priority import classify_priority

MAX_CONTENT_CHARS = 500
MAX_DESCRIPTION_CHARS = 2000
MAX_SUBTASKS = 20

_BULLET_RE = re.compile(r"^[-*•]\s+")
_BARE_BULLET_RE = re.compile(r"^[-*•]\s*")
_NUMBERED_RE = re.compile(r"^\d+[.)]\s+")
_NUMBERED_PREFIX_RE = re.compile(r"^\d+[.)]\s*")
_CHECKBOX_RE = re.compile(r"^\[[\sx]\]\s+", re.IGNORECASE)
_CHECKBOX_PREFIX_RE = re.compile(r"^\[[\sx]\]\s*", re.IGNORECASE)
_LABEL_RE = re.compile(
    r"^(action|todo|follow-up|follow up|next step|deliverable):\s*",
    re.IGNORECASE,
)


class ScanState(Enum):
    """Scanner state: looking for an opening line, or collecting its continuation."""

    SCANNING = auto()
    COLLECTING = auto()


@dataclass
class _DraftItem:
    opening_line: str
    indent: int
    content: str
    description_lines: list[str] = field(default_factory=list)
    subtasks: list[str] = field(default_factory=list)

    def add_continuation(self, raw: str, line: str) -> None:
        if _is_list_item(line):
            self.subtasks.append(_strip_marker(line))
        else:
            self.subtasks.append(line)
        self.description_lines.append(raw.rstrip())

    def finish(self, reference: datetime, parser: DateParser | None) -> ExtractedActionItem:
        due_date = resolve_due_date(self.content, reference, parser)
        if due_date is None:
            due_date = resolve_due_date(self.opening_line, reference, parser)

        description = "\n".join([self.opening_line, *self.description_lines])
        return ExtractedActionItem(
            content=self.content[:MAX_CONTENT_CHARS],
            description=description[:MAX_DESCRIPTION_CHARS],
            due_date=due_date,
            priority=classify_priority(self.opening_line),
            subtasks=tuple(self.subtasks[:MAX_SUBTASKS]),
        )


def _indent_of(raw: str) -> int:
    return len(raw) - len(raw.lstrip())


def _is_list_item(line: str) -> bool:
    return bool(_BULLET_RE.match(line) or _NUMBERED_RE.match(line))


def _is_heading(line: str) -> bool:
    return line.startswith("#") or line.startswith("**")


def _strip_marker(line: str) -> str:
    """Remove a leading bullet / number / checkbox marker."""
    rest = _BARE_BULLET_RE.sub("", line, count=1)
    rest = _NUMBERED_PREFIX_RE.sub("", rest, count=1)
    rest = _CHECKBOX_PREFIX_RE.sub("", rest, count=1)
    return rest.strip()


def _open_item(raw: str, line: str) -> _DraftItem | None:
    """Return a draft if *line* opens an action item with usable content."""
    rest = _strip_marker(line)
    label = _LABEL_RE.match(rest)

    opens = bool(
        _BULLET_RE.match(line)
        or _NUMBERED_RE.match(line)
        or _CHECKBOX_RE.match(line)
        or (label and rest[label.end() :].strip())
        or (_BARE_BULLET_RE.match(line) and len(line) > 3)
    )
    if not opens:
        return None

    content = rest[label.end() :].strip() if label else rest
    if len(content) < 2:
        return None

    return _DraftItem(opening_line=line, indent=_indent_of(raw), content=content)


def _continues(draft: _DraftItem, raw: str, line: str) -> bool:
    """A continuation line is non-blank, not a heading, and indented past the opener."""
    if not line or _is_heading(line):
        return False
    return _indent_of(raw) > draft.indent


def extract_action_items(
    text: str,
    reference: datetime | None = None,
    parser: DateParser | None = None,
) -> list[ExtractedActionItem]:
    """Extract action items from raw meeting note text.

    Never raises for malformed input: anything that is not a non-empty
    string yields an empty list.

    Args:
        text: Raw meeting notes.
        reference: Instant that relative due dates are resolved against.
            Defaults to now.
        parser: Date phrase parser passed through to :func:`resolve_due_date`.

    Returns:
        Extracted items in the order their opening lines appear.
    """
    if not isinstance(text, str) or not text.strip():
        return []
    if reference is None:
        reference = datetime.now()

    items: list[ExtractedActionItem] = []
    state = ScanState.SCANNING
    draft: _DraftItem | None = None

    for raw in text.splitlines():
        line = raw.strip()

        if state is ScanState.COLLECTING and draft is not None:
            if _continues(draft, raw, line):
                draft.add_continuation(raw, line)
                continue
            items.append(draft.finish(reference, parser))
            draft = None
            state = ScanState.SCANNING

        # The line that ended a collection is scanned like any other.
        if not line:
            continue
        draft = _open_item(raw, line)
        if draft is not None:
            state = ScanState.COLLECTING

    if draft is not None:
        items.append(draft.finish(reference, parser))

    return items
