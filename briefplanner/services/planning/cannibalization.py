"""Exact-match cannibalization detection against the existing content index.

Only the normalized head term is compared. Near-duplicates ("crm pricing" vs
"crm prices") are not detected here.
"""

from __future__ import annotations

from briefplanner.schemas.brief import (
    CannibalizationConflict,
    CannibalizationVerdict,
    SearchIntent,
)
from briefplanner.services.planning.content_index import ContentIndex, ExistingContentRecord
from briefplanner.services.planning.keywords import normalize_keyword
from briefplanner.services.planning.naming import slugify


def _conflict_url(item: ExistingContentRecord) -> str:
    return item.url or f"/{slugify(item.title)}"


def detect_cannibalization(
    primary_keyword: str,
    cluster: str | None,
    intent: SearchIntent,
    index: ContentIndex,
) -> CannibalizationVerdict:
    """Classify risk as high (declared primary), possible (inventory) or none."""
    head_term = normalize_keyword(primary_keyword)
    if not head_term:
        return CannibalizationVerdict()

    if head_term in index.declared_primaries:
        existing = next(
            (item for item in index.content_for(cluster) if item.normalized_primary == head_term),
            None,
        )
        conflicts: list[CannibalizationConflict] = []
        canonical_to: str | None = None
        if existing is not None:
            conflicts.append(
                CannibalizationConflict(
                    url=_conflict_url(existing),
                    title=existing.title,
                    primary_keyword=existing.declared_primary_keyword,
                    intent=intent,
                )
            )
            canonical_to = existing.url
        return CannibalizationVerdict(
            risk="high",
            conflicts=conflicts,
            recommendation="canonicalize",
            canonical_to=canonical_to,
        )

    if head_term in index.inventory_keywords:
        return CannibalizationVerdict(risk="possible", recommendation="differentiate")

    return CannibalizationVerdict()
