"""Brief generation orchestration: context + candidates -> plan -> persistence."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from briefplanner.config import settings
from briefplanner.core.exceptions import ValidationError
from briefplanner.integrations.topic_source import (
    HttpTopicCandidateSource,
    StaticTopicCandidateSource,
)
from briefplanner.schemas.brief import ContentBrief, PlanningResult, RunSummary, TopicCandidate
from briefplanner.schemas.generation import ProgrammaticTemplate
from briefplanner.services.brief_persistence import BriefPersistenceService, PersistenceReport
from briefplanner.services.context_loader import ContentContextLoader
from briefplanner.services.planning.planner import BriefPlanner, PlannerOptions
from briefplanner.services.planning.programmatic import build_programmatic_candidates

logger = logging.getLogger(__name__)

TopicSourceFactory = Callable[[], Any]


@dataclass
class BriefGenerationInput:
    """Input for one planning run."""

    website_token: str
    user_token: str | None = None
    domain: str | None = None
    count: int = 10
    clusters: Sequence[str] = ()
    include_pillar: bool = False
    persist: bool = True
    candidates: Sequence[TopicCandidate] | None = None
    programmatic: ProgrammaticTemplate | None = None


@dataclass
class BriefGenerationOutput:
    """Full computed brief set, whether or not it was stored."""

    run_id: str
    briefs: list[ContentBrief]
    summary: RunSummary
    persistence: PersistenceReport | None = None


class BriefGenerationService:
    """Runs the planner between the context/candidate adapters and persistence."""

    def __init__(
        self,
        context_loader: ContentContextLoader,
        topic_source_factory: TopicSourceFactory,
        persistence: BriefPersistenceService | None = None,
        planner: BriefPlanner | None = None,
    ) -> None:
        self.context_loader = context_loader
        self.topic_source_factory = topic_source_factory
        self.persistence = persistence
        self.planner = planner or BriefPlanner(PlannerOptions.from_settings(settings))

    async def generate(self, data: BriefGenerationInput) -> BriefGenerationOutput:
        if not data.website_token.strip():
            raise ValidationError("website_token is required")
        if data.persist and self.persistence is None:
            raise ValidationError("Persistence requested but no persistence adapter is configured")

        count = max(1, data.count)
        index_result, candidates = await asyncio.gather(
            self.context_loader.load(data.website_token),
            self._fetch_candidates(data, count),
        )

        result: PlanningResult = self.planner.plan(
            candidates,
            index_result,
            count=count,
            clusters=data.clusters,
            include_pillar=data.include_pillar,
            domain=data.domain,
        )

        report: PersistenceReport | None = None
        if data.persist and self.persistence is not None and result.briefs:
            report = await self.persistence.save(
                result.briefs,
                website_token=data.website_token,
                user_token=data.user_token,
                run_id=result.run_id,
            )

        return BriefGenerationOutput(
            run_id=result.run_id,
            briefs=result.briefs,
            summary=result.summary,
            persistence=report,
        )

    async def _fetch_candidates(
        self,
        data: BriefGenerationInput,
        count: int,
    ) -> list[TopicCandidate]:
        if data.programmatic is not None:
            template = data.programmatic
            return build_programmatic_candidates(
                template.template,
                template.term_lists,
                pattern_type=template.pattern_type,
                parent_cluster=template.parent_cluster,
                max_candidates=template.max_candidates,
            )
        if data.candidates is not None:
            source: Any = StaticTopicCandidateSource(data.candidates)
        else:
            source = self.topic_source_factory()

        async with source:
            return await source.fetch_candidates(data.website_token, data.domain, count)


def default_topic_source_factory() -> HttpTopicCandidateSource:
    return HttpTopicCandidateSource()
