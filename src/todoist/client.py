"""HTTP client for the Todoist REST API.

Resolves project/section names to ids and caches the project list
(with sections) per client instance. Call :meth:`TodoistClient.refresh_cache`
to pick up changes made elsewhere.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from src.config import settings
from src.routing.models import Bucket, SubBucket
from src.todoist.models import TodoistTask, to_api_priority

logger = logging.getLogger(__name__)


class TodoistError(Exception):
    """A Todoist request failed or returned an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(TodoistError):
    """A project, section or task could not be found by name."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


def _names_overlap(a: str, b: str) -> bool:
    a, b = a.strip().lower(), b.strip().lower()
    return a in b or b in a


class TodoistClient:
    """Thin wrapper around the Todoist REST API (v1)."""

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.todoist.com/api/v1",
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_token:
            raise TodoistError("TODOIST_API_TOKEN is not configured")
        self._http = httpx.Client(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=timeout,
            transport=transport,
        )
        self._projects: list[Bucket] | None = None

    def __enter__(self) -> TodoistClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            msg = f"Todoist {method} {path} failed with HTTP {status}: {exc.response.text}"
            raise TodoistError(msg, status_code=status) from exc
        except httpx.HTTPError as exc:
            raise TodoistError(f"Todoist {method} {path} failed: {exc}") from exc

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _paginate(self, path: str, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        """Fetch every page of a cursor-paginated list endpoint."""
        params = dict(params or {})
        results: list[dict[str, Any]] = []
        while True:
            page = self._request("GET", path, params=params) or {}
            results.extend(page.get("results", []))
            cursor = page.get("next_cursor")
            if not cursor:
                return results
            params["cursor"] = cursor

    # ------------------------------------------------------------------
    # Projects and sections
    # ------------------------------------------------------------------

    def _fetch_sections(self, project_id: str) -> list[SubBucket]:
        rows = self._paginate("/sections", {"project_id": project_id})
        rows.sort(key=lambda s: s.get("section_order") or 0)
        return [
            SubBucket(id=str(s["id"]), name=s["name"], bucket_id=str(s["project_id"]))
            for s in rows
        ]

    def refresh_cache(self) -> None:
        """Reload projects and their sections."""
        projects: list[Bucket] = []
        for p in self._paginate("/projects"):
            if p.get("is_archived") or p.get("is_deleted"):
                continue
            project_id = str(p["id"])
            projects.append(
                Bucket(
                    id=project_id,
                    name=p["name"],
                    sub_buckets=tuple(self._fetch_sections(project_id)),
                )
            )
        self._projects = projects
        logger.debug("Loaded %d Todoist projects", len(projects))

    def get_projects(self) -> list[Bucket]:
        """Projects with sections, loading the cache on first use."""
        if self._projects is None:
            self.refresh_cache()
        return list(self._projects or [])

    def get_sections(self, project_id: str) -> list[SubBucket]:
        for project in self.get_projects():
            if project.id == project_id:
                return list(project.sub_buckets)
        return self._fetch_sections(project_id)

    def find_project_by_name(self, name: str) -> Bucket | None:
        """Case-insensitive, partial match in either direction. Refreshes the cache on a miss."""
        if not name.strip():
            return None
        match = next((p for p in self.get_projects() if _names_overlap(name, p.name)), None)
        if match is None:
            self.refresh_cache()
            match = next((p for p in self.get_projects() if _names_overlap(name, p.name)), None)
        return match

    def find_section_by_name(self, project_id: str, name: str) -> SubBucket | None:
        if not name.strip():
            return None
        return next((s for s in self.get_sections(project_id) if _names_overlap(name, s.name)), None)

    def find_section_in_any_project(self, name: str) -> SubBucket | None:
        if not name.strip():
            return None
        for project in self.get_projects():
            for section in project.sub_buckets:
                if _names_overlap(name, section.name):
                    return section
        return None

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        content: str,
        description: str | None = None,
        project_id: str | None = None,
        section_id: str | None = None,
        due_date: date | None = None,
        priority: int | None = None,
        parent_id: str | None = None,
        labels: list[str] | None = None,
    ) -> TodoistTask:
        """Create a task. Ids must already be resolved; priority uses 1=urgent."""
        body: dict[str, Any] = {"content": content}
        if description:
            body["description"] = description
        if project_id:
            body["project_id"] = project_id
        if section_id:
            body["section_id"] = section_id
        if parent_id:
            body["parent_id"] = parent_id
        if priority is not None:
            body["priority"] = to_api_priority(priority)
        if due_date is not None:
            body["due_date"] = due_date.isoformat()
        if labels:
            body["labels"] = labels
        return TodoistTask.from_api(self._request("POST", "/tasks", json=body))

    def create_subtask(self, parent_id: str, content: str) -> TodoistTask:
        return self.create_task(content=content.strip(), parent_id=parent_id)

    def get_tasks(
        self,
        project_id: str | None = None,
        section_id: str | None = None,
        priority: int | None = None,
        due_today: bool = False,
    ) -> list[TodoistTask]:
        """List active tasks, optionally filtered.

        Priority and due-today filters are applied client-side.
        """
        params: dict[str, str] = {}
        if project_id:
            params["project_id"] = project_id
        if section_id:
            params["section_id"] = section_id

        tasks = [TodoistTask.from_api(t) for t in self._paginate("/tasks", params)]
        if priority is not None:
            tasks = [t for t in tasks if t.priority == priority]
        if due_today:
            today = date.today()
            tasks = [t for t in tasks if t.due_date == today]
        return tasks

    def update_task(
        self,
        task_id: str,
        content: str | None = None,
        description: str | None = None,
        due_date: date | None = None,
        clear_due: bool = False,
        priority: int | None = None,
    ) -> TodoistTask:
        body: dict[str, Any] = {}
        if content is not None:
            body["content"] = content
        if description is not None:
            body["description"] = description
        if priority is not None:
            body["priority"] = to_api_priority(priority)
        if clear_due:
            body["due_string"] = "no date"
        elif due_date is not None:
            body["due_date"] = due_date.isoformat()
        return TodoistTask.from_api(self._request("POST", f"/tasks/{task_id}", json=body))

    def move_task(
        self,
        task_id: str,
        project_id: str | None = None,
        section_id: str | None = None,
    ) -> None:
        """Move a task; a section takes precedence over a project."""
        if section_id:
            body = {"section_id": section_id}
        elif project_id:
            body = {"project_id": project_id}
        else:
            return
        self._request("POST", f"/tasks/{task_id}/move", json=body)

    def close_task(self, task_id: str) -> None:
        self._request("POST", f"/tasks/{task_id}/close")

    def find_task_by_name(self, name: str) -> TodoistTask | None:
        """First active task whose content contains *name* (case-insensitive)."""
        needle = name.strip().lower()
        if not needle:
            return None
        return next((t for t in self.get_tasks() if needle in t.content.lower()), None)


def get_todoist_client() -> TodoistClient:
    """Create a TodoistClient from application settings."""
    return TodoistClient(
        settings.todoist_api_token,
        base_url=settings.todoist_api_url,
        timeout=settings.todoist_timeout_seconds,
    )
