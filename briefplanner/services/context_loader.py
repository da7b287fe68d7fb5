"""Load a website's keyword inventory and cluster content into a ContentIndex."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from briefplanner.core.db_retry import run_with_transient_db_retry
from briefplanner.core.exceptions import ContextFetchError
from briefplanner.models.keyword import TopicClusterContent, WebsiteKeyword
from briefplanner.services.planning.content_index import (
    ContentIndexResult,
    ExistingContentRecord,
    IndexDegraded,
    IndexReady,
    KeywordRecord,
    build_content_index,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Any]


class ContentContextLoader:
    """Fetches the context snapshot for one planning run.

    The two reads are independent and run concurrently on separate sessions.
    Any failure degrades to an empty index instead of failing the run.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        timeout_seconds: float | None = 15.0,
        retry_attempts: int = 3,
    ) -> None:
        self.session_factory = session_factory
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts

    async def load(self, website_token: str) -> ContentIndexResult:
        results = await asyncio.gather(
            self._read(website_token, "load_keyword_inventory", self._fetch_keywords),
            self._read(website_token, "load_cluster_content", self._fetch_cluster_content),
            return_exceptions=True,
        )
        failures: list[ContextFetchError] = []
        for result in results:
            if isinstance(result, ContextFetchError):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
        if failures:
            logger.warning(
                "Context fetch failed; planning in degraded mode",
                extra={
                    "website_token": website_token,
                    "reasons": [failure.details.get("reason") for failure in failures],
                },
            )
            return IndexDegraded(reason=failures[0].message)

        keyword_rows, content_rows = results
        index = build_content_index(keyword_rows, content_rows)
        logger.info(
            "Loaded content context",
            extra={
                "website_token": website_token,
                "inventory_keywords": len(index.inventory_keywords),
                "declared_primaries": len(index.declared_primaries),
            },
        )
        return IndexReady(index=index)

    async def _read(
        self,
        website_token: str,
        operation_name: str,
        fetch: Callable[[AsyncSession, str], Any],
    ) -> list[Any]:
        async def _operation() -> list[Any]:
            async with self.session_factory() as session:
                return await fetch(session, website_token)

        try:
            return await run_with_transient_db_retry(
                _operation,
                operation_name=operation_name,
                attempts=self.retry_attempts,
                timeout_seconds=self.timeout_seconds,
                log_context={"website_token": website_token},
            )
        except (SQLAlchemyError, asyncio.TimeoutError, OSError) as exc:
            reason = f"{operation_name} failed: {exc!r}"
            raise ContextFetchError(website_token, reason) from exc

    @staticmethod
    async def _fetch_keywords(session: AsyncSession, website_token: str) -> list[KeywordRecord]:
        result = await session.execute(
            select(
                WebsiteKeyword.keyword,
                WebsiteKeyword.keyword_type,
                WebsiteKeyword.topic_cluster,
            ).where(WebsiteKeyword.website_token == website_token)
        )
        return [
            KeywordRecord(keyword=row.keyword, type=row.keyword_type, cluster=row.topic_cluster)
            for row in result.all()
        ]

    @staticmethod
    async def _fetch_cluster_content(
        session: AsyncSession,
        website_token: str,
    ) -> list[ExistingContentRecord]:
        result = await session.execute(
            select(
                TopicClusterContent.topic_cluster,
                TopicClusterContent.article_title,
                TopicClusterContent.article_url,
                TopicClusterContent.primary_keyword,
            )
            .where(TopicClusterContent.website_token == website_token)
            .order_by(TopicClusterContent.created_at)
        )
        return [
            ExistingContentRecord(
                cluster=row.topic_cluster,
                title=row.article_title,
                url=row.article_url,
                declared_primary_keyword=row.primary_keyword,
            )
            for row in result.all()
        ]
