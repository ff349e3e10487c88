"""Task operations on top of the Todoist client.

``import_meeting_notes`` is the main entry point: extract action items,
route each one to a project/section, and create it (with subtasks). Items
are processed one at a time and a failure on one item never stops the
rest. The remaining helpers resolve user-facing names to ids for the
single-task operations.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from src.extraction.dates import DateParser, resolve_due_date
from src.extraction.extractor import extract_action_items
from src.extraction.models import ExtractedActionItem
from src.routing.models import Bucket, RouteResult
from src.routing.router import route_task
from src.todoist.client import NotFoundError, TodoistClient, TodoistError
from src.todoist.models import TodoistTask

logger = logging.getLogger(__name__)


@dataclass
class ImportOutcome:
    """What happened to one extracted action item."""

    content: str
    bucket_id: str
    sub_bucket_id: str | None = None
    task_id: str | None = None
    subtasks_created: int = 0
    error: str | None = None

    @property
    def created(self) -> bool:
        return self.task_id is not None


@dataclass
class ImportReport:
    """Result of importing a batch of meeting notes."""

    items_found: int
    outcomes: list[ImportOutcome] = field(default_factory=list)

    @property
    def tasks_created(self) -> int:
        return sum(1 for o in self.outcomes if o.created)

    def summary(self) -> str:
        lines = [f"Parsed {self.items_found} action item(s); created {self.tasks_created} task(s)."]
        for o in self.outcomes:
            if o.created:
                line = f'Created: "{o.content}" in project {o.bucket_id}'
                if o.sub_bucket_id:
                    line += f", section {o.sub_bucket_id}"
                if o.subtasks_created:
                    line += f" ({o.subtasks_created} subtasks)"
                if o.error:
                    line += f" [error: {o.error}]"
            elif o.bucket_id:
                line = f'Failed to create "{o.content}": {o.error}'
            else:
                line = f'Skipped "{o.content}": no destination project'
            lines.append(line)
        return "\n".join(lines)


@dataclass(frozen=True)
class PreviewItem:
    """An extracted item together with where it would be routed."""

    item: ExtractedActionItem
    route: RouteResult


def preview_meeting_notes(
    notes: str,
    buckets: Sequence[Bucket],
    project_hint: str | None = None,
    reference: datetime | None = None,
    parser: DateParser | None = None,
) -> list[PreviewItem]:
    """Extract and route action items without creating anything."""
    items = extract_action_items(notes, reference=reference, parser=parser)
    return [PreviewItem(item, route_task(item.content, buckets, project_hint)) for item in items]


def _create_item(client: TodoistClient, item: ExtractedActionItem, outcome: ImportOutcome) -> None:
    task = client.create_task(
        content=item.content,
        description=item.description,
        project_id=outcome.bucket_id,
        section_id=outcome.sub_bucket_id,
        due_date=item.due_date,
        priority=item.priority,
    )
    outcome.task_id = task.id
    for sub in item.subtasks:
        client.create_subtask(task.id, sub)
        outcome.subtasks_created += 1


def import_meeting_notes(
    client: TodoistClient,
    notes: str,
    project_hint: str | None = None,
    reference: datetime | None = None,
    parser: DateParser | None = None,
) -> ImportReport:
    """Extract action items from *notes* and create a task for each.

    Args:
        client: Todoist client used to list projects and create tasks.
        notes: Raw meeting note text.
        project_hint: Optional project name to route every item to.
        reference: Instant relative due dates are resolved against.
        parser: Optional date phrase parser.

    Returns:
        An ImportReport with one outcome per extracted item.
    """
    previews = preview_meeting_notes(
        notes,
        client.get_projects(),
        project_hint=project_hint,
        reference=reference,
        parser=parser,
    )
    report = ImportReport(items_found=len(previews))

    for preview in previews:
        item, route = preview.item, preview.route
        outcome = ImportOutcome(
            content=item.content,
            bucket_id=route.bucket_id,
            sub_bucket_id=route.sub_bucket_id,
        )
        report.outcomes.append(outcome)
        if not route.found:
            continue
        try:
            _create_item(client, item, outcome)
        except TodoistError as exc:
            logger.exception("Failed to create task for %r", item.content)
            outcome.error = exc.message

    logger.info(
        "Imported meeting notes: %d items, %d tasks created",
        report.items_found,
        report.tasks_created,
    )
    return report


def _require_project(client: TodoistClient, name: str) -> Bucket:
    project = client.find_project_by_name(name)
    if project is None:
        raise NotFoundError(f'Project not found: "{name}". Check the project list for names.')
    return project


def _require_task(client: TodoistClient, name: str) -> TodoistTask:
    task = client.find_task_by_name(name)
    if task is None:
        raise NotFoundError(f'Task not found: "{name}".')
    return task


def create_task_by_name(
    client: TodoistClient,
    content: str,
    description: str | None = None,
    project_name: str | None = None,
    section_name: str | None = None,
    due_string: str | None = None,
    priority: int | None = None,
    labels: list[str] | None = None,
    parent_task_name: str | None = None,
    reference: datetime | None = None,
) -> TodoistTask:
    """Create one task, resolving project, section and parent by name.

    An unknown section is ignored; an unknown project or parent raises
    NotFoundError. A subtask inherits its parent's project when no
    project is named.
    """
    project_id: str | None = None
    section_id: str | None = None
    parent_id: str | None = None

    if project_name:
        project = _require_project(client, project_name)
        project_id = project.id
        if section_name:
            section = client.find_section_by_name(project.id, section_name)
            if section is not None:
                section_id = section.id

    if parent_task_name:
        parent = _require_task(client, parent_task_name)
        parent_id = parent.id
        if project_id is None:
            project_id = parent.project_id

    due_date = resolve_due_date(due_string, reference) if due_string else None
    return client.create_task(
        content=content,
        description=description,
        project_id=project_id,
        section_id=section_id,
        due_date=due_date,
        priority=priority,
        parent_id=parent_id,
        labels=labels,
    )


def create_subtasks(
    client: TodoistClient,
    parent_task_name: str,
    subtasks: Sequence[str],
) -> tuple[TodoistTask, list[TodoistTask]]:
    """Add subtasks under the task found by *parent_task_name*."""
    parent = _require_task(client, parent_task_name)
    created = [client.create_subtask(parent.id, s) for s in subtasks if s.strip()]
    return parent, created


def list_tasks(
    client: TodoistClient,
    project_name: str | None = None,
    section_name: str | None = None,
    priority: int | None = None,
    due_today: bool = False,
) -> list[TodoistTask]:
    """List tasks filtered by project/section name, priority and due date."""
    project_id: str | None = None
    section_id: str | None = None

    if project_name:
        project = _require_project(client, project_name)
        project_id = project.id
        if section_name:
            section = client.find_section_by_name(project.id, section_name)
            if section is None:
                raise NotFoundError(
                    f'Section "{section_name}" not found in project "{project_name}".'
                )
            section_id = section.id
    elif section_name:
        found = client.find_section_in_any_project(section_name)
        if found is None:
            raise NotFoundError(f'Section "{section_name}" not found in any project.')
        project_id, section_id = found.bucket_id, found.id

    tasks = client.get_tasks(
        project_id=project_id,
        section_id=section_id,
        priority=priority,
        due_today=due_today,
    )
    if section_id:
        tasks = [t for t in tasks if t.section_id == section_id]
    return tasks


def update_task_by_name(
    client: TodoistClient,
    task_name: str,
    content: str | None = None,
    description: str | None = None,
    due_string: str | None = None,
    clear_due: bool = False,
    priority: int | None = None,
    project_name: str | None = None,
    section_name: str | None = None,
    reference: datetime | None = None,
) -> TodoistTask:
    """Update the task found by *task_name*; optionally move it.

    A *due_string* that cannot be resolved leaves the due date unchanged.
    """
    task = _require_task(client, task_name)
    project = _require_project(client, project_name) if project_name else None
    section = None
    if project is not None and section_name:
        section = client.find_section_by_name(project.id, section_name)

    due_date = None
    if not clear_due and due_string:
        due_date = resolve_due_date(due_string, reference)

    updated = client.update_task(
        task.id,
        content=content,
        description=description,
        due_date=due_date,
        clear_due=clear_due,
        priority=priority,
    )

    if project is not None:
        client.move_task(
            task.id,
            project_id=project.id,
            section_id=section.id if section else None,
        )
        updated.project_id = project.id
        updated.section_id = section.id if section else None

    return updated


def complete_task(client: TodoistClient, task_name: str) -> TodoistTask:
    """Close the task found by *task_name*."""
    task = _require_task(client, task_name)
    client.close_task(task.id)
    return task


def describe_projects(buckets: Sequence[Bucket]) -> str:
    """Render projects with their section names, one per line."""
    lines = ["Projects (ID | Name | Sections):"]
    for b in buckets:
        section_names = ", ".join(s.name for s in b.sub_buckets)
        lines.append(f"- {b.name} (id: {b.id}) | Sections: {section_names or '(none)'}")
    return "\n".join(lines)
