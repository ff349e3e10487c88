"""Preview action items and routing for a meeting-notes file without creating tasks."""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.routing.models import Bucket, SubBucket
from src.todoist.client import TodoistError, get_todoist_client
from src.todoist.service import describe_projects, preview_meeting_notes


def load_buckets(path: str) -> list[Bucket]:
    """Load projects from a JSON file.

    Expected shape::

        [{"id": "1", "name": "Engineering", "sections": [{"id": "10", "name": "Code Review"}]}]
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    buckets: list[Bucket] = []
    for p in data:
        project_id = str(p["id"])
        sections = tuple(
            SubBucket(id=str(s["id"]), name=s["name"], bucket_id=project_id)
            for s in p.get("sections", [])
        )
        buckets.append(Bucket(id=project_id, name=p["name"], sub_buckets=sections))
    return buckets


def preview(
    notes_path: str,
    projects_path: str | None = None,
    live: bool = False,
    hint: str | None = None,
    today: str | None = None,
) -> None:
    notes = sys.stdin.read() if notes_path == "-" else Path(notes_path).read_text(encoding="utf-8")
    reference = datetime.fromisoformat(today) if today else None

    buckets: list[Bucket] = []
    if live:
        try:
            with get_todoist_client() as client:
                buckets = client.get_projects()
        except TodoistError as e:
            print(f"Could not load projects from Todoist: {e}")
            return
    elif projects_path:
        buckets = load_buckets(projects_path)

    if buckets:
        print(describe_projects(buckets))
        print()

    names = {b.id: b.name for b in buckets}
    sections = {s.id: s.name for b in buckets for s in b.sub_buckets}

    previews = preview_meeting_notes(notes, buckets, project_hint=hint, reference=reference)
    print(f"Found {len(previews)} action item(s):")
    for i, p in enumerate(previews, 1):
        item = p.item
        due = item.due_date.isoformat() if item.due_date else "-"
        print(f"  [{i}] p{int(item.priority)} due {due}: {item.content}")
        for sub in item.subtasks:
            print(f"        - {sub}")
        if buckets:
            target = names.get(p.route.bucket_id, "(no destination)")
            if p.route.sub_bucket_id:
                target += f" / {sections.get(p.route.sub_bucket_id, p.route.sub_bucket_id)}"
            print(f"      -> {target}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("notes", help="Notes file, or - for stdin")
    parser.add_argument("--projects", default=None, help="JSON file of projects and sections")
    parser.add_argument("--live", action="store_true", help="Load projects from Todoist")
    parser.add_argument("--hint", default=None, help="Project name to route every item to")
    parser.add_argument("--today", default=None, help="Reference date (YYYY-MM-DD)")
    args = parser.parse_args()
    preview(args.notes, args.projects, args.live, args.hint, args.today)
