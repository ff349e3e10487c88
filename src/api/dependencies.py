"""Shared FastAPI dependencies and error mapping."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import HTTPException

from src.config import settings
from src.todoist.client import NotFoundError, TodoistClient, TodoistError, get_todoist_client


def todoist_client() -> Iterator[TodoistClient]:
    """Yield a Todoist client for one request; 501 when no token is configured."""
    if not settings.todoist_api_token:
        raise HTTPException(status_code=501, detail="Todoist API token is not configured")
    client = get_todoist_client()
    try:
        yield client
    finally:
        client.close()


def http_error(exc: TodoistError) -> HTTPException:
    """Map a Todoist failure to an HTTP error: 404 for missing names, 502 otherwise."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=exc.message)
    return HTTPException(status_code=502, detail=f"Todoist unavailable: {exc.message}")
