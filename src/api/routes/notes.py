"""Meeting notes endpoints: preview routing, or import notes as Todoist tasks."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import http_error, todoist_client
from src.api.models import (
    ActionItemResponse,
    ImportOutcomeResponse,
    ImportResponse,
    NotesRequest,
    PreviewResponse,
    RoutedItemResponse,
)
from src.config import settings
from src.todoist.client import TodoistClient, TodoistError
from src.todoist.service import import_meeting_notes, preview_meeting_notes

router = APIRouter()


def _project_hint(request: NotesRequest) -> str | None:
    return request.project_name or settings.default_project_hint or None


@router.post("/api/notes/preview", response_model=PreviewResponse)
def preview_notes(
    request: NotesRequest,
    client: TodoistClient = Depends(todoist_client),
) -> PreviewResponse:
    """Extract action items and show where each would be routed, without creating tasks."""
    try:
        buckets = client.get_projects()
    except TodoistError as exc:
        raise http_error(exc) from exc

    previews = preview_meeting_notes(request.raw_notes, buckets, _project_hint(request))
    return PreviewResponse(
        items=[
            RoutedItemResponse(
                item=ActionItemResponse.from_item(p.item),
                project_id=p.route.bucket_id,
                section_id=p.route.sub_bucket_id,
            )
            for p in previews
        ]
    )


@router.post("/api/notes/import", response_model=ImportResponse)
def import_notes(
    request: NotesRequest,
    client: TodoistClient = Depends(todoist_client),
) -> ImportResponse:
    """Parse meeting notes and create a Todoist task (plus subtasks) per action item.

    Per-item failures are reported in ``outcomes``; only a failure to list
    projects fails the whole request.
    """
    try:
        report = import_meeting_notes(client, request.raw_notes, _project_hint(request))
    except TodoistError as exc:
        raise http_error(exc) from exc

    return ImportResponse(
        items_found=report.items_found,
        tasks_created=report.tasks_created,
        outcomes=[
            ImportOutcomeResponse(
                content=o.content,
                project_id=o.bucket_id,
                section_id=o.sub_bucket_id,
                task_id=o.task_id,
                subtasks_created=o.subtasks_created,
                error=o.error,
            )
            for o in report.outcomes
        ],
        summary=report.summary(),
    )
