"""Project listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import http_error, todoist_client
from src.api.models import ProjectResponse, SectionResponse
from src.todoist.client import TodoistClient, TodoistError

router = APIRouter()


@router.get("/api/projects", response_model=list[ProjectResponse])
def list_projects(client: TodoistClient = Depends(todoist_client)) -> list[ProjectResponse]:
    """List all projects with their sections (the routing destinations)."""
    try:
        buckets = client.get_projects()
    except TodoistError as exc:
        raise http_error(exc) from exc
    return [
        ProjectResponse(
            id=b.id,
            name=b.name,
            sections=[SectionResponse(id=s.id, name=s.name) for s in b.sub_buckets],
        )
        for b in buckets
    ]
