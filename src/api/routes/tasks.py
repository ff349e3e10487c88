"""Task endpoints: create, list, update and complete Todoist tasks by name."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import http_error, todoist_client
from src.api.models import (
    CompleteTaskRequest,
    CreateSubtasksRequest,
    CreateSubtasksResponse,
    CreateTaskRequest,
    TaskResponse,
    UpdateTaskRequest,
)
from src.todoist import service
from src.todoist.client import TodoistClient, TodoistError

router = APIRouter()


@router.get("/api/tasks", response_model=list[TaskResponse])
def list_tasks(
    project_name: str | None = None,
    section_name: str | None = None,
    priority: int | None = Query(None, ge=1, le=4),
    due_today: bool = False,
    client: TodoistClient = Depends(todoist_client),
) -> list[TaskResponse]:
    """List active tasks, filtered by project/section name, priority or due today."""
    try:
        tasks = service.list_tasks(
            client,
            project_name=project_name,
            section_name=section_name,
            priority=priority,
            due_today=due_today,
        )
    except TodoistError as exc:
        raise http_error(exc) from exc
    return [TaskResponse.from_task(t) for t in tasks]


@router.post("/api/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: CreateTaskRequest,
    client: TodoistClient = Depends(todoist_client),
) -> TaskResponse:
    try:
        task = service.create_task_by_name(
            client,
            content=request.content,
            description=request.description,
            project_name=request.project_name,
            section_name=request.section_name,
            due_string=request.due_string,
            priority=request.priority,
            labels=request.labels,
            parent_task_name=request.parent_task_name,
        )
    except TodoistError as exc:
        raise http_error(exc) from exc
    return TaskResponse.from_task(task)


@router.post("/api/tasks/subtasks", response_model=CreateSubtasksResponse, status_code=201)
def create_subtasks(
    request: CreateSubtasksRequest,
    client: TodoistClient = Depends(todoist_client),
) -> CreateSubtasksResponse:
    try:
        parent, created = service.create_subtasks(
            client, request.parent_task_name, request.subtasks
        )
    except TodoistError as exc:
        raise http_error(exc) from exc
    return CreateSubtasksResponse(
        parent=TaskResponse.from_task(parent),
        subtasks=[TaskResponse.from_task(t) for t in created],
    )


@router.patch("/api/tasks", response_model=TaskResponse)
def update_task(
    request: UpdateTaskRequest,
    client: TodoistClient = Depends(todoist_client),
) -> TaskResponse:
    try:
        task = service.update_task_by_name(
            client,
            task_name=request.task_name,
            content=request.content,
            description=request.description,
            due_string=request.due_string,
            clear_due=request.clear_due,
            priority=request.priority,
            project_name=request.project_name,
            section_name=request.section_name,
        )
    except TodoistError as exc:
        raise http_error(exc) from exc
    return TaskResponse.from_task(task)


@router.post("/api/tasks/complete", response_model=TaskResponse)
def complete_task(
    request: CompleteTaskRequest,
    client: TodoistClient = Depends(todoist_client),
) -> TaskResponse:
    try:
        task = service.complete_task(client, request.task_name)
    except TodoistError as exc:
        raise http_error(exc) from exc
    return TaskResponse.from_task(task)
