"""Keyword-based priority inference for action-item lines."""

from __future__ import annotations

import re

from src.extraction.models import Priority

_URGENT_RE = re.compile(
    r"\b(urgent|asap|as soon as possible|blocker|critical|priority 1|p1)\b",
    re.IGNORECASE,
)
_HIGH_RE = re.compile(r"\b(important|soon|priority 2|p2)\b", re.IGNORECASE)


def classify_priority(line: str) -> Priority:
    """Map a line of text to a priority; urgency wins over importance.

    Lines with no signal get ``Priority.NORMAL``. ``Priority.MEDIUM`` is
    never returned.
    """
    if not isinstance(line, str):
        return Priority.NORMAL
    if _URGENT_RE.search(line):
        return Priority.URGENT
    if _HIGH_RE.search(line):
        return Priority.HIGH
    return Priority.NORMAL
