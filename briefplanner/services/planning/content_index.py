"""In-memory lookup structures over a website's existing keywords and content."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from briefplanner.services.planning.keywords import normalize_keyword

UNCATEGORIZED_CLUSTER = "uncategorized"


@dataclass(frozen=True)
class KeywordRecord:
    """Row from the existing keyword inventory."""

    keyword: str
    type: str | None = None
    cluster: str | None = None


@dataclass(frozen=True)
class ExistingContentRecord:
    """Existing page in a topic cluster."""

    cluster: str | None
    title: str
    url: str | None = None
    declared_primary_keyword: str | None = None

    @property
    def normalized_primary(self) -> str:
        return normalize_keyword(self.declared_primary_keyword)


def cluster_key(cluster: str | None) -> str:
    """Lower-cased cluster lookup key; missing clusters map to `uncategorized`."""
    cleaned = str(cluster or "").strip().lower()
    return cleaned or UNCATEGORIZED_CLUSTER


@dataclass(frozen=True)
class ContentIndex:
    """Read-only snapshot used for one planning run."""

    declared_primaries: frozenset[str] = frozenset()
    inventory_keywords: frozenset[str] = frozenset()
    content_by_cluster: dict[str, tuple[ExistingContentRecord, ...]] = field(default_factory=dict)

    def content_for(self, cluster: str | None) -> tuple[ExistingContentRecord, ...]:
        return self.content_by_cluster.get(cluster_key(cluster), ())

    @property
    def is_empty(self) -> bool:
        return not (self.declared_primaries or self.inventory_keywords or self.content_by_cluster)


def build_content_index(
    keyword_rows: Iterable[KeywordRecord] | None,
    content_rows: Iterable[ExistingContentRecord] | None,
) -> ContentIndex:
    """Build the declared-primary set and the cluster -> content mapping.

    Tolerates empty or missing input and never raises on blank values.
    """
    inventory: set[str] = set()
    for row in keyword_rows or ():
        value = normalize_keyword(row.keyword)
        if value:
            inventory.add(value)

    declared: set[str] = set()
    by_cluster: dict[str, list[ExistingContentRecord]] = {}
    for row in content_rows or ():
        primary = row.normalized_primary
        if primary:
            declared.add(primary)
        by_cluster.setdefault(cluster_key(row.cluster), []).append(row)

    return ContentIndex(
        declared_primaries=frozenset(declared),
        inventory_keywords=frozenset(inventory),
        content_by_cluster={key: tuple(items) for key, items in by_cluster.items()},
    )


@dataclass(frozen=True)
class IndexReady:
    """Context was fetched; conflict detection ran against real data."""

    index: ContentIndex
    degraded: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class IndexDegraded:
    """Context fetch failed; an empty index was substituted."""

    reason: str
    index: ContentIndex = field(default_factory=ContentIndex)
    degraded: bool = True


ContentIndexResult = IndexReady | IndexDegraded
