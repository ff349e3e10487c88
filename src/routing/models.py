"""Destination models for task routing."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SubBucket:
    """A named subdivision of a bucket (a Todoist section)."""

    id: str
    name: str
    bucket_id: str


@dataclass(frozen=True)
class Bucket:
    """A top-level destination (a Todoist project) with its sub-buckets."""

    id: str
    name: str
    sub_buckets: tuple[SubBucket, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RouteResult:
    """Result of routing; an empty ``bucket_id`` means no destination was found."""

    bucket_id: str
    sub_bucket_id: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.bucket_id)
