"""Cluster pillar (hub page) synthesis."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from briefplanner.core.ids import generate_cuid
from briefplanner.schemas.brief import (
    BriefMetadata,
    CannibalizationVerdict,
    ContentBrief,
    InternalLinks,
)
from briefplanner.services.planning.content_index import ContentIndex, cluster_key
from briefplanner.services.planning.keywords import NON_UNIQUE_PRIMARY_NOTE, normalize_keyword
from briefplanner.services.planning.links import build_same_cluster_links
from briefplanner.services.planning.naming import slugify, to_title

logger = logging.getLogger(__name__)

PILLAR_HUB_NOTE = "Acts as the canonical hub for the cluster."


@dataclass
class PillarResult:
    """Synthesized pillars and how many reused an already-claimed keyword."""

    pillars: list[ContentBrief] = field(default_factory=list)
    non_unique: int = 0


def distinct_clusters(briefs: Sequence[ContentBrief]) -> list[str]:
    """Non-empty clusters in first-seen order, de-duplicated case-insensitively."""
    seen: set[str] = set()
    clusters: list[str] = []
    for brief in briefs:
        label = (brief.parent_cluster or "").strip()
        if not label:
            continue
        key = label.lower()
        if key in seen:
            continue
        seen.add(key)
        clusters.append(label)
    return clusters


def _pillar_summary(display: str) -> str:
    return (
        f"Pillar page covering {display}: definitions and key sub-topics, "
        "with links to all cluster pages."
    )


def synthesize_pillars(
    briefs: Sequence[ContentBrief],
    *,
    run_id: str,
    index: ContentIndex,
    used: set[str],
    title_template: str,
    word_count_range: tuple[int, int],
    tone: str,
    max_same_cluster_links: int = 3,
) -> PillarResult:
    """Build one pillar brief per distinct cluster present in `briefs`.

    The pillar's primary keyword is the normalized cluster label and joins the
    batch `used` set like any other primary keyword.
    """
    result = PillarResult()
    for cluster in distinct_clusters(briefs):
        primary = normalize_keyword(cluster)
        url_slug = slugify(cluster)
        if not primary or not url_slug:
            logger.info(
                "Skipping pillar for cluster without a usable label",
                extra={"cluster": cluster},
            )
            continue

        display = to_title(cluster)
        notes = [PILLAR_HUB_NOTE]
        if primary in used:
            result.non_unique += 1
            notes.append(NON_UNIQUE_PRIMARY_NOTE)
            logger.warning(
                "Pillar primary keyword already claimed in batch",
                extra={"cluster": cluster, "keyword": primary},
            )
        else:
            used.add(primary)

        result.pillars.append(
            ContentBrief(
                id=generate_cuid(),
                run_id=run_id,
                title=title_template.format(cluster=display),
                h1=f"{display} Overview",
                url_path=f"/{url_slug}",
                page_type="pillar",
                parent_cluster=cluster,
                primary_keyword=primary,
                intent="mixed",
                summary=_pillar_summary(display),
                internal_links=InternalLinks(
                    same_cluster=build_same_cluster_links(
                        index.content_for(cluster),
                        cluster,
                        limit=max_same_cluster_links,
                    ),
                ),
                cannibalization=CannibalizationVerdict(
                    risk="possible",
                    recommendation="differentiate",
                ),
                metadata=BriefMetadata(
                    word_count_range=word_count_range,
                    tone=tone,
                    notes=notes,
                ),
            )
        )
    return result


def insert_pillars(
    briefs: Sequence[ContentBrief],
    pillars: Sequence[ContentBrief],
) -> list[ContentBrief]:
    """Place each pillar immediately before the first brief of its cluster."""
    by_cluster = {cluster_key(pillar.parent_cluster): pillar for pillar in pillars}
    ordered: list[ContentBrief] = []
    for brief in briefs:
        pillar = by_cluster.pop(cluster_key(brief.parent_cluster), None) if brief.parent_cluster else None
        if pillar is not None:
            ordered.append(pillar)
        ordered.append(brief)
    ordered.extend(by_cluster.values())
    return ordered
