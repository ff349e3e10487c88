"""Data models for heuristic action-item extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum


class Priority(IntEnum):
    """Four-level priority scale of the task service (1 is most urgent)."""

    URGENT = 1
    HIGH = 2
    MEDIUM = 3  # part of the service scale; never inferred from text
    NORMAL = 4


@dataclass(frozen=True)
class ExtractedActionItem:
    """A single action item found in meeting notes."""

    content: str
    description: str = ""
    due_date: date | None = None
    priority: Priority = Priority.NORMAL
    subtasks: tuple[str, ...] = field(default_factory=tuple)
