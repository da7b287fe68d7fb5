"""Primary keyword allocation and secondary keyword selection.

Allocation is greedy and order-sensitive: candidates are processed in input
order and each takes the first normalized keyword that no earlier candidate
claimed. The batch-local `used` set is owned by the caller and passed in
explicitly so the allocator stays testable in isolation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from briefplanner.schemas.brief import TopicCandidate

logger = logging.getLogger(__name__)

AllocationSource = Literal["keyword", "query", "title", "parent_topic", "reused", "none"]

NON_UNIQUE_PRIMARY_NOTE = (
    "Primary keyword is shared with another brief in this batch; "
    "review before publishing to avoid cannibalization."
)

_NON_KEYWORD_CHARS = re.compile(r"[^a-z0-9\s-]")


def normalize_keyword(text: str | None) -> str:
    """Lower-case, strip punctuation, collapse whitespace and repeated tokens.

    "Importer  importer License!" -> "importer license"
    """
    lowered = _NON_KEYWORD_CHARS.sub(" ", str(text or "").lower())
    collapsed: list[str] = []
    for token in lowered.split():
        if collapsed and collapsed[-1] == token:
            continue
        collapsed.append(token)
    return " ".join(collapsed)


@dataclass(frozen=True)
class KeywordAllocation:
    """Primary keyword chosen for one candidate."""

    keyword: str
    source: AllocationSource
    unique: bool

    @property
    def is_fallback(self) -> bool:
        return self.source in {"title", "parent_topic", "reused"}


def candidate_keyword_pool(candidate: TopicCandidate) -> list[tuple[str, AllocationSource]]:
    """Normalized keywords then queries, in order, empties dropped."""
    pool: list[tuple[str, AllocationSource]] = []
    for raw in candidate.candidate_keywords:
        value = normalize_keyword(raw)
        if value:
            pool.append((value, "keyword"))
    for raw in candidate.candidate_queries:
        value = normalize_keyword(raw)
        if value:
            pool.append((value, "query"))
    return pool


def allocate_primary_keyword(
    candidate: TopicCandidate,
    used: set[str],
) -> KeywordAllocation:
    """Pick the first unused normalized keyword for a candidate.

    Falls back to the normalized title (or parent topic). When that is taken
    too, a non-unique keyword is returned with `unique=False` so callers can
    flag it rather than drop the candidate. Mutates `used`.
    """
    pool = candidate_keyword_pool(candidate)
    for value, source in pool:
        if value not in used:
            used.add(value)
            return KeywordAllocation(keyword=value, source=source, unique=True)

    fallback, fallback_source = normalize_keyword(candidate.title), "title"
    if not fallback:
        fallback, fallback_source = normalize_keyword(candidate.parent_topic), "parent_topic"

    if fallback and fallback not in used:
        used.add(fallback)
        return KeywordAllocation(keyword=fallback, source=fallback_source, unique=True)

    reused = pool[0][0] if pool else fallback
    if not reused:
        return KeywordAllocation(keyword="", source="none", unique=False)

    logger.warning(
        "Primary keyword pool exhausted; reusing keyword",
        extra={"title": candidate.title, "keyword": reused},
    )
    return KeywordAllocation(keyword=reused, source="reused", unique=False)


def select_secondary_keywords(
    candidate: TopicCandidate,
    primary_keyword: str,
    limit: int = 4,
) -> list[str]:
    """Distinct normalized queries then keywords, excluding the primary."""
    primary = normalize_keyword(primary_keyword)
    selected: list[str] = []
    for raw in [*candidate.candidate_queries, *candidate.candidate_keywords]:
        value = normalize_keyword(raw)
        if not value or value == primary or value in selected:
            continue
        selected.append(value)
        if len(selected) >= limit:
            break
    return selected


def select_target_queries(candidate: TopicCandidate, limit: int = 5) -> list[str]:
    """First distinct normalized candidate queries."""
    queries: list[str] = []
    for raw in candidate.candidate_queries:
        value = normalize_keyword(raw)
        if value and value not in queries:
            queries.append(value)
        if len(queries) >= limit:
            break
    return queries
