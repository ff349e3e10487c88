"""Pydantic request/response schemas for the Meeting Tasks API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from src.extraction.models import ExtractedActionItem
from src.todoist.models import TodoistTask


class NotesRequest(BaseModel):
    """Request body for the /api/notes endpoints."""

    raw_notes: str
    project_name: str | None = None  # Route every item to this project when it matches


class ActionItemResponse(BaseModel):
    """A single extracted action item in API responses."""

    content: str
    description: str = ""
    due_date: date | None = None
    priority: int = 4
    subtasks: list[str] = []

    @classmethod
    def from_item(cls, item: ExtractedActionItem) -> ActionItemResponse:
        return cls(
            content=item.content,
            description=item.description,
            due_date=item.due_date,
            priority=int(item.priority),
            subtasks=list(item.subtasks),
        )


class RoutedItemResponse(BaseModel):
    """An action item with its routing decision."""

    item: ActionItemResponse
    project_id: str
    section_id: str | None = None


class PreviewResponse(BaseModel):
    """Response body for /api/notes/preview."""

    items: list[RoutedItemResponse] = []


class ImportOutcomeResponse(BaseModel):
    content: str
    project_id: str
    section_id: str | None = None
    task_id: str | None = None
    subtasks_created: int = 0
    error: str | None = None


class ImportResponse(BaseModel):
    """Response body for /api/notes/import."""

    items_found: int
    tasks_created: int
    outcomes: list[ImportOutcomeResponse] = []
    summary: str = ""


class SectionResponse(BaseModel):
    id: str
    name: str


class ProjectResponse(BaseModel):
    id: str
    name: str
    sections: list[SectionResponse] = []


class TaskResponse(BaseModel):
    """A Todoist task in API responses."""

    id: str
    content: str
    description: str = ""
    project_id: str | None = None
    section_id: str | None = None
    parent_id: str | None = None
    priority: int = 4
    due: str | None = None
    labels: list[str] = []

    @classmethod
    def from_task(cls, task: TodoistTask) -> TaskResponse:
        return cls(
            id=task.id,
            content=task.content,
            description=task.description,
            project_id=task.project_id,
            section_id=task.section_id,
            parent_id=task.parent_id,
            priority=int(task.priority),
            due=task.due,
            labels=list(task.labels),
        )


class CreateTaskRequest(BaseModel):
    """Request body for POST /api/tasks. Names are resolved to ids server-side."""

    content: str = Field(..., min_length=1)
    description: str | None = None
    project_name: str | None = None
    section_name: str | None = None
    due_string: str | None = None
    priority: int | None = Field(None, ge=1, le=4)
    labels: list[str] = []
    parent_task_name: str | None = None


class CreateSubtasksRequest(BaseModel):
    parent_task_name: str = Field(..., min_length=1)
    subtasks: list[str] = Field(..., min_length=1)


class CreateSubtasksResponse(BaseModel):
    parent: TaskResponse
    subtasks: list[TaskResponse] = []


class UpdateTaskRequest(BaseModel):
    """Request body for PATCH /api/tasks.

    Omitted fields are left unchanged; ``clear_due`` removes the due date.
    """

    task_name: str = Field(..., min_length=1)
    content: str | None = None
    description: str | None = None
    due_string: str | None = None
    clear_due: bool = False
    priority: int | None = Field(None, ge=1, le=4)
    project_name: str | None = None
    section_name: str | None = None


class CompleteTaskRequest(BaseModel):
    task_name: str = Field(..., min_length=1)
