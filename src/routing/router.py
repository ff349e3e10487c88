"""Task router: pick the destination project/section for an action item.

Routing is a cascade. An explicit project hint wins outright. Otherwise
candidates are produced by independent scoring stages (keyword overlap
with project names, then a table of domain keyword rules) and the
highest strictly-better candidate is kept. With no candidate the item
falls back to the Inbox, then to the first known project.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from src.routing.models import Bucket, RouteResult, SubBucket

logger = logging.getLogger(__name__)

SUB_BUCKET_BONUS = 2
DOMAIN_RULE_SCORE = 2


@dataclass(frozen=True)
class Candidate:
    """A scored routing candidate."""

    bucket: Bucket
    sub_bucket: SubBucket | None
    score: int

    def to_result(self) -> RouteResult:
        return RouteResult(
            bucket_id=self.bucket.id,
            sub_bucket_id=self.sub_bucket.id if self.sub_bucket else None,
        )


# Ordered (keywords -> project name substring) rules.
DOMAIN_RULES: list[tuple[tuple[str, ...], str]] = [
    (("review", "pr", "merge", "code", "dev", "engineering", "sprint"), "eng"),
    (("review", "pr", "merge", "code", "dev"), "dev"),
    (("invoice", "payment", "budget", "finance", "expense"), "financ"),
    (("follow up", "follow-up", "contact", "crm", "client", "customer"), "crm"),
    (("follow up", "follow-up", "contact", "client"), "work"),
]

Stage = Callable[[str, list[str], Sequence[Bucket]], Iterator[Candidate]]


def tokenize(content: str) -> list[str]:
    """Lowercase whitespace tokens longer than one character."""
    return [w for w in content.lower().split() if len(w) > 1]


def match_sub_bucket(
    content: str,
    tokens: list[str],
    sub_buckets: Sequence[SubBucket],
) -> SubBucket | None:
    """Return the first sub-bucket named in *content* or matching any token.

    Args:
        content: Normalised (lowercased, trimmed) task content.
        tokens: Tokens of *content* as produced by :func:`tokenize`.
        sub_buckets: Candidate sub-buckets, in order.
    """
    for sub in sub_buckets:
        name = sub.name.lower()
        if name in content:
            return sub
        if any(len(t) >= 2 and t in name for t in tokens):
            return sub
    return None


def _names_overlap(a: str, b: str) -> bool:
    return a in b or b in a


def _match_hint(
    hint: str | None,
    content: str,
    tokens: list[str],
    buckets: Sequence[Bucket],
) -> RouteResult | None:
    if not hint or not hint.strip():
        return None
    hint_norm = hint.strip().lower()
    for bucket in buckets:
        if _names_overlap(hint_norm, bucket.name.lower()):
            sub = match_sub_bucket(content, tokens, bucket.sub_buckets)
            return Candidate(bucket, sub, 0).to_result()
    return None


def _keyword_candidates(
    content: str, tokens: list[str], buckets: Sequence[Bucket]
) -> Iterator[Candidate]:
    for bucket in buckets:
        name = bucket.name.lower()
        score = sum(1 for t in tokens if t in name)
        sub = match_sub_bucket(content, tokens, bucket.sub_buckets)
        if sub is not None:
            score += SUB_BUCKET_BONUS
        yield Candidate(bucket, sub, score)


def _domain_rule_candidates(
    content: str, tokens: list[str], buckets: Sequence[Bucket]
) -> Iterator[Candidate]:
    for keywords, target in DOMAIN_RULES:
        if not any(k in content for k in keywords):
            continue
        bucket = next((b for b in buckets if target in b.name.lower()), None)
        if bucket is None:
            continue
        sub = match_sub_bucket(content, tokens, bucket.sub_buckets)
        yield Candidate(bucket, sub, DOMAIN_RULE_SCORE + (1 if sub else 0))


SCORING_STAGES: tuple[Stage, ...] = (_keyword_candidates, _domain_rule_candidates)


def best_candidate(
    content: str,
    tokens: list[str],
    buckets: Sequence[Bucket],
    stages: Sequence[Stage] = SCORING_STAGES,
) -> Candidate | None:
    """Fold all stage candidates, replacing the best only on a strictly higher score."""
    best: Candidate | None = None
    for stage in stages:
        for candidate in stage(content, tokens, buckets):
            if candidate.score > (best.score if best else 0):
                best = candidate
    return best


def _fallback(buckets: Sequence[Bucket]) -> RouteResult:
    inbox = next((b for b in buckets if "inbox" in b.name.lower()), None)
    if inbox is not None:
        return RouteResult(bucket_id=inbox.id)
    if buckets:
        return RouteResult(bucket_id=buckets[0].id)
    return RouteResult(bucket_id="")


def route_task(
    content: str,
    buckets: Sequence[Bucket],
    hint: str | None = None,
) -> RouteResult:
    """Route task content to a project and optional section.

    Args:
        content: The task content text.
        buckets: All known projects with their sections.
        hint: Optional project name supplied by the user.

    Returns:
        A RouteResult. ``bucket_id`` is empty only when *buckets* is empty.
    """
    normalized = content.lower().strip() if isinstance(content, str) else ""
    tokens = tokenize(normalized)

    by_hint = _match_hint(hint, normalized, tokens, buckets)
    if by_hint is not None:
        logger.debug("Routed %r by hint %r -> %s", content, hint, by_hint)
        return by_hint

    best = best_candidate(normalized, tokens, buckets)
    if best is not None:
        logger.debug("Routed %r by score %d -> %s", content, best.score, best.bucket.name)
        return best.to_result()

    return _fallback(buckets)
