"""Tests for the Todoist HTTP client (httpx MockTransport, no network)."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, timedelta

import httpx
import pytest

from src.extraction.models import Priority
from src.todoist.client import NotFoundError, TodoistClient, TodoistError
from src.todoist.models import TodoistTask, from_api_priority, to_api_priority

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler) -> TodoistClient:
    return TodoistClient("test-token", transport=httpx.MockTransport(handler))


def page(results: list[dict], next_cursor: str | None = None) -> httpx.Response:
    return httpx.Response(200, json={"results": results, "next_cursor": next_cursor})


def task_json(task_id: str, content: str, **extra: object) -> dict:
    data: dict = {"id": task_id, "content": content, "priority": 1}
    data.update(extra)
    return data


class ProjectApi:
    """Serves two projects (one archived) with sections, counting project list calls."""

    def __init__(self) -> None:
        self.project_calls = 0
        self.projects = [
            {"id": "p1", "name": "Inbox"},
            {"id": "p2", "name": "Engineering"},
            {"id": "p3", "name": "Old stuff", "is_archived": True},
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/projects"):
            self.project_calls += 1
            return page(self.projects)
        if request.url.path.endswith("/sections"):
            project_id = request.url.params["project_id"]
            if project_id == "p2":
                return page(
                    [
                        {"id": "s2", "name": "Docs", "project_id": "p2", "section_order": 2},
                        {"id": "s1", "name": "Code Review", "project_id": "p2", "section_order": 1},
                    ]
                )
            return page([])
        return httpx.Response(404)


class TestConstruction:
    def test_missing_token_raises(self) -> None:
        with pytest.raises(TodoistError):
            TodoistClient("")

    def test_sends_bearer_token(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return page([])

        make_client(handler).get_projects()
        assert seen == ["Bearer test-token"]


class TestProjects:
    def test_projects_with_sections(self) -> None:
        client = make_client(ProjectApi())
        projects = client.get_projects()

        assert [p.name for p in projects] == ["Inbox", "Engineering"]
        eng = projects[1]
        assert [s.name for s in eng.sub_buckets] == ["Code Review", "Docs"]
        assert all(s.bucket_id == "p2" for s in eng.sub_buckets)

    def test_projects_are_cached(self) -> None:
        api = ProjectApi()
        client = make_client(api)
        client.get_projects()
        client.get_projects()
        assert api.project_calls == 1

        client.refresh_cache()
        assert api.project_calls == 2

    def test_find_project_refreshes_on_miss(self) -> None:
        api = ProjectApi()
        client = make_client(api)
        client.get_projects()
        api.projects.append({"id": "p4", "name": "Finance"})

        found = client.find_project_by_name("finance")
        assert found is not None
        assert found.id == "p4"
        assert api.project_calls == 2

    def test_find_project_partial_match(self) -> None:
        client = make_client(ProjectApi())
        assert client.find_project_by_name("eng").id == "p2"  # type: ignore[union-attr]
        assert client.find_project_by_name("nope") is None

    def test_find_sections(self) -> None:
        client = make_client(ProjectApi())
        assert client.find_section_by_name("p2", "review").id == "s1"  # type: ignore[union-attr]
        assert client.find_section_in_any_project("docs").id == "s2"  # type: ignore[union-attr]
        assert client.find_section_in_any_project("missing") is None

    def test_pagination_follows_cursor(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/projects"):
                if request.url.params.get("cursor") == "next":
                    return page([{"id": "b", "name": "Second"}])
                return page([{"id": "a", "name": "First"}], next_cursor="next")
            return page([])

        projects = make_client(handler).get_projects()
        assert [p.id for p in projects] == ["a", "b"]


class TestTasks:
    def test_create_task_body(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            bodies.append(body)
            return httpx.Response(200, json=task_json("t1", body["content"], priority=body["priority"]))

        task = make_client(handler).create_task(
            content="Fix build",
            description="- urgent: fix build",
            project_id="p2",
            section_id="s1",
            due_date=date(2024, 6, 7),
            priority=Priority.URGENT,
        )

        assert bodies == [
            {
                "content": "Fix build",
                "description": "- urgent: fix build",
                "project_id": "p2",
                "section_id": "s1",
                "priority": 4,
                "due_date": "2024-06-07",
            }
        ]
        assert task.id == "t1"
        assert task.priority == Priority.URGENT

    def test_create_subtask_sets_parent(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=task_json("t2", "child", parent_id="t1"))

        task = make_client(handler).create_subtask("t1", "  child  ")
        assert bodies == [{"content": "child", "parent_id": "t1"}]
        assert task.parent_id == "t1"

    def test_get_tasks_filters(self) -> None:
        today = date.today().isoformat()
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        rows = [
            task_json("1", "due today urgent", priority=4, due={"date": today}),
            task_json("2", "due tomorrow", priority=4, due={"date": tomorrow}),
            task_json("3", "normal today", priority=1, due={"date": today}),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["project_id"] == "p2"
            return page(rows)

        client = make_client(handler)
        assert [t.id for t in client.get_tasks(project_id="p2")] == ["1", "2", "3"]
        assert [t.id for t in client.get_tasks(project_id="p2", priority=1)] == ["1", "2"]
        assert [t.id for t in client.get_tasks(project_id="p2", due_today=True)] == ["1", "3"]

    def test_update_task_clear_due(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/tasks/t1")
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=task_json("t1", "x"))

        make_client(handler).update_task("t1", priority=2, clear_due=True)
        assert bodies == [{"priority": 3, "due_string": "no date"}]

    def test_move_task_prefers_section(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/tasks/t1/move")
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=task_json("t1", "x"))

        client = make_client(handler)
        client.move_task("t1", project_id="p2", section_id="s1")
        client.move_task("t1", project_id="p2")
        client.move_task("t1")
        assert bodies == [{"section_id": "s1"}, {"project_id": "p2"}]

    def test_close_task_no_content(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(204)

        assert make_client(handler).close_task("t9") is None
        assert paths == ["/api/v1/tasks/t9/close"]

    def test_find_task_by_name(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return page([task_json("1", "Write report"), task_json("2", "Review PR #42")])

        client = make_client(handler)
        assert client.find_task_by_name("pr #42").id == "2"  # type: ignore[union-attr]
        assert client.find_task_by_name("missing") is None
        assert client.find_task_by_name("  ") is None


class TestErrors:
    def test_http_error_status(self) -> None:
        client = make_client(lambda request: httpx.Response(403, text="forbidden"))
        with pytest.raises(TodoistError) as exc_info:
            client.get_projects()
        assert exc_info.value.status_code == 403
        assert "403" in exc_info.value.message

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TodoistError) as exc_info:
            make_client(handler).close_task("t1")
        assert exc_info.value.status_code is None

    def test_not_found_is_todoist_error(self) -> None:
        err = NotFoundError("Task not found")
        assert isinstance(err, TodoistError)
        assert err.status_code == 404


class TestModels:
    def test_priority_conversion(self) -> None:
        assert to_api_priority(Priority.URGENT) == 4
        assert to_api_priority(Priority.NORMAL) == 1
        assert from_api_priority(4) is Priority.URGENT
        assert from_api_priority(1) is Priority.NORMAL

    def test_task_from_api(self) -> None:
        task = TodoistTask.from_api(
            {
                "id": 7,
                "content": "Ship it",
                "description": None,
                "project_id": "p1",
                "priority": 3,
                "due": {"date": "2024-06-07", "datetime": "2024-06-07T15:00:00"},
                "labels": ["work"],
            }
        )
        assert task.id == "7"
        assert task.description == ""
        assert task.priority is Priority.HIGH
        assert task.due == "2024-06-07T15:00:00"
        assert task.due_date == date(2024, 6, 7)
        assert task.labels == ["work"]
