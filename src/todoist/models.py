"""Data models for the Todoist task service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from src.extraction.models import Priority


def to_api_priority(priority: int) -> int:
    """Convert 1=urgent ... 4=normal to the REST API's 4=urgent ... 1=normal."""
    return 5 - int(priority)


def from_api_priority(value: int) -> Priority:
    return Priority(5 - int(value))


@dataclass
class TodoistTask:
    """A task as returned by the Todoist REST API."""

    id: str
    content: str
    description: str = ""
    project_id: str | None = None
    section_id: str | None = None
    parent_id: str | None = None
    priority: Priority = Priority.NORMAL
    due: str | None = None  # date or datetime string as given by the API
    labels: list[str] = field(default_factory=list)

    @property
    def due_date(self) -> date | None:
        if not self.due:
            return None
        return date.fromisoformat(self.due[:10])

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TodoistTask:
        due = data.get("due") or {}
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            description=data.get("description") or "",
            project_id=data.get("project_id"),
            section_id=data.get("section_id"),
            parent_id=data.get("parent_id"),
            priority=from_api_priority(data.get("priority", 1)),
            due=due.get("datetime") or due.get("date"),
            labels=list(data.get("labels") or []),
        )
