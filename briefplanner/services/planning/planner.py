"""Brief planning engine.

Turns an ordered batch of topic candidates plus a content-index snapshot into
scheduled content briefs. Everything here is synchronous and in-memory; the
per-candidate pass is sequential because primary-keyword allocation shares one
batch-local `used` set.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from briefplanner.config import NamingRule, Settings
from briefplanner.core.ids import generate_cuid, generate_run_id
from briefplanner.schemas.brief import (
    BriefMetadata,
    ContentBrief,
    PageType,
    PlanningResult,
    RiskCounts,
    RunSummary,
    SearchIntent,
    TopicCandidate,
)
from briefplanner.services.planning.candidates import select_candidates
from briefplanner.services.planning.cannibalization import detect_cannibalization
from briefplanner.services.planning.content_index import (
    ContentIndex,
    ContentIndexResult,
    IndexReady,
)
from briefplanner.services.planning.intent import IntentRule, build_intent_rules, classify_intent
from briefplanner.services.planning.keywords import (
    NON_UNIQUE_PRIMARY_NOTE,
    allocate_primary_keyword,
    select_secondary_keywords,
    select_target_queries,
)
from briefplanner.services.planning.links import plan_internal_links
from briefplanner.services.planning.naming import (
    build_url_path,
    match_naming_rule,
    refine_title,
    to_title,
)
from briefplanner.services.planning.pillars import insert_pillars, synthesize_pillars
from briefplanner.services.planning.scheduler import schedule_briefs

logger = logging.getLogger(__name__)

CLUSTER_FORMATS = frozenset({"guide", "beginner-guide"})
SUPPORTING_FORMATS = frozenset({"comparison", "faq", "how-to", "listicle"})

BASE_NOTES = (
    "Do not repeat the same head term + same intent across pages.",
    "If SERP shows mixed intents, scope the page clearly to one intent.",
    'Use descriptive anchors for internal links; avoid generic "click here".',
)
INTENT_NOTES: dict[str, str] = {
    "comparison": "Use a clear, scannable comparison table and pros/cons.",
    "pricing": "Include ranges, what drives cost up/down, and transparency disclaimers.",
    "location": "Localize examples and logistics; reference service coverage and ports.",
}


@dataclass(frozen=True)
class PlannerOptions:
    """Tunable planning parameters; defaults mirror `Settings`."""

    schedule_horizon_days: int = 7
    max_same_cluster_links: int = 3
    max_secondary_keywords: int = 4
    max_target_queries: int = 5
    default_word_count_range: tuple[int, int] = (1500, 2500)
    pillar_word_count_range: tuple[int, int] = (2500, 3500)
    tone: str = "professional"
    pillar_title_template: str = "{cluster}: Complete Overview and Guide"
    location_terms: tuple[str, ...] = ("miami", "broward", "florida", "port", "everglades")
    naming_rules: tuple[NamingRule, ...] = field(default_factory=tuple)

    @classmethod
    def from_settings(cls, settings: Settings) -> PlannerOptions:
        return cls(
            schedule_horizon_days=settings.schedule_horizon_days,
            max_same_cluster_links=settings.max_same_cluster_links,
            max_secondary_keywords=settings.max_secondary_keywords,
            max_target_queries=settings.max_target_queries,
            default_word_count_range=(
                settings.default_word_count_min,
                settings.default_word_count_max,
            ),
            pillar_word_count_range=(
                settings.pillar_word_count_min,
                settings.pillar_word_count_max,
            ),
            tone=settings.default_tone,
            pillar_title_template=settings.pillar_title_template,
            location_terms=tuple(settings.get_location_terms()),
            naming_rules=tuple(settings.naming_rules),
        )


def classify_page_type(candidate: TopicCandidate, include_pillar: bool = False) -> PageType:
    """Role within the cluster; every brief is a cluster page when pillars are emitted."""
    if include_pillar:
        return "cluster"
    format_type = candidate.format_type
    if format_type in CLUSTER_FORMATS:
        return "cluster"
    if format_type in SUPPORTING_FORMATS:
        return "supporting"
    return "cluster"


def build_brief_summary(cluster: str | None, primary_keyword: str, intent: SearchIntent) -> str:
    parts = [
        f'Primary keyword: "{primary_keyword or cluster or ""}"',
        f"Intent: {intent}",
    ]
    if cluster:
        parts.append(f"Cluster: {cluster}")
    parts.append("One primary keyword per page. Include 2-4 secondary variants naturally.")
    return " | ".join(parts)


def build_brief_notes(intent: SearchIntent) -> list[str]:
    notes = list(BASE_NOTES)
    if intent in INTENT_NOTES:
        notes.append(INTENT_NOTES[intent])
    return notes


def summarize_briefs(
    briefs: Sequence[ContentBrief],
    *,
    degraded: bool = False,
    degraded_reason: str | None = None,
    non_unique_primaries: int = 0,
    skipped_malformed: int = 0,
    skipped_by_cluster_filter: int = 0,
) -> RunSummary:
    """Totals by intent and cannibalization risk."""
    by_intent = Counter(brief.intent for brief in briefs)
    by_risk = Counter(brief.cannibalization.risk for brief in briefs)
    return RunSummary(
        total=len(briefs),
        by_intent=dict(by_intent),
        cannibalization=RiskCounts(
            none=by_risk.get("none", 0),
            possible=by_risk.get("possible", 0),
            high=by_risk.get("high", 0),
        ),
        degraded=degraded,
        degraded_reason=degraded_reason,
        non_unique_primaries=non_unique_primaries,
        skipped_malformed=skipped_malformed,
        skipped_by_cluster_filter=skipped_by_cluster_filter,
    )


class BriefPlanner:
    """Builds a planning run from candidates and a content-index snapshot."""

    def __init__(self, options: PlannerOptions | None = None) -> None:
        self.options = options or PlannerOptions()
        self.intent_rules: list[IntentRule] = build_intent_rules(self.options.location_terms)

    def plan(
        self,
        candidates: Sequence[TopicCandidate] | None,
        index_result: ContentIndexResult | None = None,
        *,
        count: int = 10,
        clusters: Iterable[str] | None = None,
        include_pillar: bool = False,
        domain: str | None = None,
        now: datetime | None = None,
        run_id: str | None = None,
    ) -> PlanningResult:
        """Run allocation, classification, conflict and link analysis, pillars, scheduling."""
        index_result = index_result or IndexReady(index=ContentIndex())
        run_id = run_id or generate_run_id()
        selection = select_candidates(candidates, count, clusters)
        rule = match_naming_rule(domain, self.options.naming_rules)

        logger.info(
            "Planning briefs",
            extra={
                "run_id": run_id,
                "candidates": len(selection.candidates),
                "include_pillar": include_pillar,
                "degraded": index_result.degraded,
            },
        )

        used: set[str] = set()
        non_unique = 0
        briefs: list[ContentBrief] = []
        for candidate in selection.candidates:
            brief, unique = self._build_brief(
                candidate,
                index=index_result.index,
                used=used,
                run_id=run_id,
                include_pillar=include_pillar,
                rule=rule,
            )
            if not unique:
                non_unique += 1
            briefs.append(brief)

        if include_pillar and briefs:
            pillar_result = synthesize_pillars(
                briefs,
                run_id=run_id,
                index=index_result.index,
                used=used,
                title_template=self.options.pillar_title_template,
                word_count_range=self.options.pillar_word_count_range,
                tone=self.options.tone,
                max_same_cluster_links=self.options.max_same_cluster_links,
            )
            non_unique += pillar_result.non_unique
            briefs = insert_pillars(briefs, pillar_result.pillars)

        scheduled = schedule_briefs(
            briefs,
            now=now,
            horizon_days=self.options.schedule_horizon_days,
        )
        summary = summarize_briefs(
            scheduled,
            degraded=index_result.degraded,
            degraded_reason=index_result.reason,
            non_unique_primaries=non_unique,
            skipped_malformed=selection.skipped_malformed,
            skipped_by_cluster_filter=selection.skipped_by_cluster_filter,
        )

        logger.info(
            "Planning completed",
            extra={
                "run_id": run_id,
                "total": summary.total,
                "high_risk": summary.cannibalization.high,
                "non_unique_primaries": non_unique,
            },
        )
        return PlanningResult(run_id=run_id, briefs=scheduled, summary=summary)

    def _build_brief(
        self,
        candidate: TopicCandidate,
        *,
        index: ContentIndex,
        used: set[str],
        run_id: str,
        include_pillar: bool,
        rule: NamingRule | None,
    ) -> tuple[ContentBrief, bool]:
        cluster = (candidate.parent_topic or "").strip() or None
        allocation = allocate_primary_keyword(candidate, used)
        primary = allocation.keyword
        unique = allocation.unique
        if not primary:
            primary = candidate.title.strip().lower()
            unique = primary not in used
            used.add(primary)

        intent = classify_intent(
            candidate.title or primary,
            candidate.format_type,
            self.intent_rules,
        )
        original_title = candidate.title.strip() or to_title(primary or cluster)
        title = refine_title(original_title, cluster, primary, rule)

        notes = build_brief_notes(intent)
        if not unique:
            notes.append(NON_UNIQUE_PRIMARY_NOTE)

        word_count_range = self.options.default_word_count_range
        if candidate.article_format and candidate.article_format.word_count_range:
            word_count_range = candidate.article_format.word_count_range

        brief = ContentBrief(
            id=generate_cuid(),
            run_id=run_id,
            title=title,
            h1=title,
            url_path=build_url_path(cluster, primary, title, rule),
            page_type=classify_page_type(candidate, include_pillar),
            parent_cluster=cluster,
            primary_keyword=primary,
            intent=intent,
            secondary_keywords=select_secondary_keywords(
                candidate,
                primary,
                limit=self.options.max_secondary_keywords,
            ),
            target_queries=select_target_queries(
                candidate,
                limit=self.options.max_target_queries,
            ),
            summary=build_brief_summary(cluster, primary, intent),
            internal_links=plan_internal_links(
                cluster,
                index,
                max_same_cluster=self.options.max_same_cluster_links,
            ),
            cannibalization=detect_cannibalization(primary, cluster, intent, index),
            metadata=BriefMetadata(
                word_count_range=word_count_range,
                tone=self.options.tone,
                notes=notes,
            ),
        )
        return brief, unique
