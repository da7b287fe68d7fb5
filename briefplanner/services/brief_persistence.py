"""Durable storage of planned briefs.

Every brief is written in its own session so one failed insert never rolls
back or blocks the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from briefplanner.core.db_retry import run_with_transient_db_retry
from briefplanner.core.exceptions import PersistenceError
from briefplanner.models.content import ArticleBrief
from briefplanner.schemas.brief import ContentBrief

logger = logging.getLogger(__name__)


@dataclass
class PersistenceFailure:
    brief_id: str
    primary_keyword: str
    error: str


@dataclass
class PersistenceReport:
    """Per-run outcome of the persistence pass."""

    attempted: int = 0
    saved: int = 0
    failed: list[PersistenceFailure] = field(default_factory=list)


def coverage_keywords(brief: ContentBrief) -> dict[str, Any]:
    return {
        "primary": brief.primary_keyword,
        "secondary": list(brief.secondary_keywords),
        "total_count": 1 + len(brief.secondary_keywords),
    }


def brief_to_row(
    brief: ContentBrief,
    *,
    website_token: str,
    user_token: str | None,
) -> ArticleBrief:
    """Flatten a brief into an `article_briefs` row."""
    word_count_min, word_count_max = brief.metadata.word_count_range
    return ArticleBrief(
        id=brief.id,
        website_token=website_token,
        user_token=user_token,
        run_id=brief.run_id,
        sort_index=brief.sort_index,
        title=brief.title,
        h1=brief.h1,
        url_path=brief.url_path,
        page_type=brief.page_type,
        parent_cluster=brief.parent_cluster,
        primary_keyword=brief.primary_keyword,
        intent=brief.intent,
        secondary_keywords=list(brief.secondary_keywords),
        target_queries=list(brief.target_queries),
        summary=brief.summary,
        internal_links=brief.internal_links.model_dump(mode="json"),
        cannibal_risk=brief.cannibalization.risk,
        cannibal_conflicts=[
            conflict.model_dump(mode="json") for conflict in brief.cannibalization.conflicts
        ],
        recommendation=brief.cannibalization.recommendation,
        canonical_to=brief.cannibalization.canonical_to,
        word_count_min=word_count_min,
        word_count_max=word_count_max,
        tone=brief.metadata.tone,
        notes=list(brief.metadata.notes),
        coverage_keywords=coverage_keywords(brief),
        status=brief.status,
        scheduled_for=brief.scheduled_for,
    )


class BriefPersistenceService:
    """Writes planned briefs to `article_briefs`.

    `session_factory` must yield a session that commits on clean exit and
    rolls back on error, such as `get_session_context`.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any],
        *,
        retry_attempts: int = 3,
    ) -> None:
        self.session_factory = session_factory
        self.retry_attempts = retry_attempts

    async def save(
        self,
        briefs: Sequence[ContentBrief],
        *,
        website_token: str,
        user_token: str | None = None,
        run_id: str | None = None,
    ) -> PersistenceReport:
        report = PersistenceReport(attempted=len(briefs))
        for brief in briefs:
            try:
                await self._save_one(brief, website_token=website_token, user_token=user_token)
            except PersistenceError as exc:
                logger.warning(
                    "Failed to persist brief",
                    extra={
                        "run_id": run_id,
                        "brief_id": brief.id,
                        "primary_keyword": brief.primary_keyword,
                        "error": exc.details.get("reason"),
                    },
                )
                report.failed.append(
                    PersistenceFailure(
                        brief_id=brief.id,
                        primary_keyword=brief.primary_keyword,
                        error=str(exc.details.get("reason")),
                    )
                )
                continue
            report.saved += 1

        logger.info(
            "Brief persistence completed",
            extra={
                "run_id": run_id,
                "attempted": report.attempted,
                "saved": report.saved,
                "failed": len(report.failed),
            },
        )
        return report

    async def _save_one(
        self,
        brief: ContentBrief,
        *,
        website_token: str,
        user_token: str | None,
    ) -> None:
        async def _operation() -> None:
            async with self.session_factory() as session:
                session.add(brief_to_row(brief, website_token=website_token, user_token=user_token))
                await session.flush()

        try:
            await run_with_transient_db_retry(
                _operation,
                operation_name="persist_article_brief",
                attempts=self.retry_attempts,
                log_context={"brief_id": brief.id},
            )
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceError(brief.id, repr(exc)) from exc
