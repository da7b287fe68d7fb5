"""Internal link planning over a cluster's existing content."""

from __future__ import annotations

import re
from collections.abc import Sequence

from briefplanner.schemas.brief import InternalLinks, LinkSuggestion
from briefplanner.services.planning.content_index import ContentIndex, ExistingContentRecord
from briefplanner.services.planning.naming import slugify

SAME_CLUSTER_RATIONALE = "Same-cluster reinforcement and navigation"
PILLAR_RATIONALE = "Link upward to the cluster pillar/hub"

HUB_TITLE_PATTERN = re.compile(r"guide|overview|ultimate|complete", re.IGNORECASE)


def _link_target(item: ExistingContentRecord, cluster: str | None) -> str:
    if item.url:
        return item.url
    leaf = slugify(item.declared_primary_keyword or item.title)
    cluster_slug = slugify(cluster or item.cluster)
    if cluster_slug and leaf:
        return f"/{cluster_slug}/{leaf}"
    return f"/{cluster_slug or leaf}"


def build_same_cluster_links(
    items: Sequence[ExistingContentRecord],
    cluster: str | None,
    limit: int = 3,
) -> list[LinkSuggestion]:
    """Link suggestions for the first `limit` existing items of a cluster."""
    links: list[LinkSuggestion] = []
    for item in items[: max(limit, 0)]:
        links.append(
            LinkSuggestion(
                anchor=item.declared_primary_keyword or item.title,
                target=_link_target(item, cluster),
                topic_cluster=cluster,
                rationale=SAME_CLUSTER_RATIONALE,
            )
        )
    return links


def suggest_pillar_link(
    items: Sequence[ExistingContentRecord],
    cluster: str | None,
) -> LinkSuggestion | None:
    """Prefer a hub-like title; fall back to the first item; None for empty clusters."""
    if not items:
        return None

    hub = next((item for item in items if HUB_TITLE_PATTERN.search(item.title or "")), items[0])
    target = hub.url or f"/{slugify(cluster or hub.cluster)}"
    return LinkSuggestion(
        anchor=hub.title,
        target=target,
        topic_cluster=cluster,
        rationale=PILLAR_RATIONALE,
    )


def plan_internal_links(
    cluster: str | None,
    index: ContentIndex,
    max_same_cluster: int = 3,
) -> InternalLinks:
    """Same-cluster links plus an up-to-pillar suggestion.

    Uncategorized briefs get no links. Cross-cluster links are not planned
    yet and are always empty.
    """
    if not (cluster or "").strip():
        return InternalLinks()
    items = index.content_for(cluster)
    return InternalLinks(
        up_to_pillar=suggest_pillar_link(items, cluster),
        same_cluster=build_same_cluster_links(items, cluster, limit=max_same_cluster),
        cross_cluster=[],
    )
