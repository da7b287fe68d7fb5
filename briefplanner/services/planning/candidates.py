"""Candidate ingestion: cluster allow-list, malformed-candidate skip, truncation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from briefplanner.schemas.brief import TopicCandidate

logger = logging.getLogger(__name__)


@dataclass
class CandidateSelection:
    """Candidates accepted for allocation plus skip counts."""

    candidates: list[TopicCandidate] = field(default_factory=list)
    skipped_by_cluster_filter: int = 0
    skipped_malformed: int = 0


def is_malformed(candidate: TopicCandidate) -> bool:
    """No title and no usable keyword or query."""
    if candidate.title.strip():
        return False
    values = [*candidate.candidate_keywords, *candidate.candidate_queries]
    return not any(str(value).strip() for value in values)


def select_candidates(
    candidates: Sequence[TopicCandidate] | None,
    count: int,
    clusters: Iterable[str] | None = None,
) -> CandidateSelection:
    """Filter by cluster allow-list, drop malformed candidates, keep the first `count`.

    Input order is authoritative and never re-sorted.
    """
    allowed = {str(cluster).strip().lower() for cluster in clusters or () if str(cluster).strip()}
    selection = CandidateSelection()

    for candidate in candidates or ():
        if allowed and (candidate.parent_topic or "").strip().lower() not in allowed:
            selection.skipped_by_cluster_filter += 1
            continue
        if is_malformed(candidate):
            selection.skipped_malformed += 1
            logger.warning(
                "Skipping malformed topic candidate",
                extra={"parent_topic": candidate.parent_topic},
            )
            continue
        selection.candidates.append(candidate)

    selection.candidates = selection.candidates[: max(count, 0)]
    return selection
