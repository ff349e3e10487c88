"""Natural-language due date resolution.

Phrase parsing is delegated to a :class:`DateParser`; the default backend
uses ``dateparser`` with a forward bias so that "Friday" always means the
upcoming Friday relative to the reference instant.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from functools import lru_cache
from typing import Protocol

from dateparser.search import search_dates

_EOD_RE = re.compile(r"eod|end of day|e\.o\.d", re.IGNORECASE)
# Bare numbers and ordinals ("#42", "3.") are not date phrases
_NUMERIC_RE = re.compile(r"[#\d\s.,:]+")


class DateParser(Protocol):
    """Resolve the first date phrase in *text* relative to *reference*."""

    def parse(self, text: str, reference: datetime) -> datetime | None: ...


class DateparserBackend:
    """``dateparser``-backed :class:`DateParser` preferring future dates."""

    def __init__(self, languages: list[str] | None = None) -> None:
        self.languages = languages or ["en"]

    def parse(self, text: str, reference: datetime) -> datetime | None:
        found = search_dates(
            text,
            languages=self.languages,
            settings={
                "PREFER_DATES_FROM": "future",
                "RELATIVE_BASE": reference,
                "RETURN_AS_TIMEZONE_AWARE": False,
            },
        )
        # search_dates returns (matched_text, datetime) pairs in text order
        for matched, value in found or []:
            if not _NUMERIC_RE.fullmatch(matched):
                return value
        return None


@lru_cache(maxsize=1)
def get_default_parser() -> DateParser:
    """Return a cached ``dateparser`` backend."""
    return DateparserBackend()


def resolve_due_date(
    text: str,
    reference: datetime | None = None,
    parser: DateParser | None = None,
) -> date | None:
    """Resolve a due date phrase to a calendar date.

    Handles phrases like "by Friday", "next Monday", "tomorrow at 3pm" or
    "in 2 weeks". When the parser finds nothing but the text mentions end
    of day ("EOD", "end of day", "e.o.d."), the reference date is used.

    Args:
        text: Free text that may contain a date phrase.
        reference: Instant that relative phrases are resolved against.
            Defaults to now.
        parser: Date phrase parser; defaults to the ``dateparser`` backend.

    Returns:
        The resolved date (time of day discarded), or None.
    """
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None

    if reference is None:
        reference = datetime.now()
    if parser is None:
        parser = get_default_parser()

    parsed = parser.parse(trimmed, reference)
    if parsed is not None:
        return parsed.date()

    if _EOD_RE.search(trimmed):
        return reference.date()
    return None
