"""Topic-candidate source integrations.

The planner consumes an ordered list of `TopicCandidate`s. They come either
from the remote topic-selection endpoint or straight from the request body.
"""

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from briefplanner.config import settings
from briefplanner.core.exceptions import ExternalAPIError, RateLimitExceededError
from briefplanner.schemas.brief import ArticleFormatHint, TopicCandidate

logger = logging.getLogger(__name__)

TOPIC_SOURCE_API_NAME = "TopicSelection"


class TopicCandidateSource(Protocol):
    """Anything that can supply an ordered batch of topic candidates."""

    async def fetch_candidates(
        self,
        website_token: str,
        domain: str | None,
        count: int,
    ) -> list[TopicCandidate]: ...


class StaticTopicCandidateSource:
    """Returns a fixed, caller-provided candidate list."""

    def __init__(self, candidates: Sequence[TopicCandidate]) -> None:
        self.candidates = list(candidates)

    async def __aenter__(self) -> "StaticTopicCandidateSource":
        return self

    async def __aexit__(self, *args: Any) -> None:
        return None

    async def fetch_candidates(
        self,
        website_token: str,
        domain: str | None,
        count: int,
    ) -> list[TopicCandidate]:
        return list(self.candidates)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if isinstance(item, str | int | float) and str(item).strip()]


def _parse_article_format(value: Any) -> ArticleFormatHint | None:
    if not isinstance(value, dict):
        return None
    word_count_range = None
    raw_range = value.get("wordCountRange")
    if isinstance(raw_range, list | tuple) and len(raw_range) == 2:
        try:
            low, high = int(raw_range[0]), int(raw_range[1])
        except (TypeError, ValueError):
            low = high = 0
        if 0 < low <= high:
            word_count_range = (low, high)
    format_type = value.get("type")
    return ArticleFormatHint(
        type=str(format_type) if format_type else None,
        word_count_range=word_count_range,
    )


def parse_selected_topics(payload: Any) -> list[TopicCandidate]:
    """Map a `selectedTopics[]` payload onto `TopicCandidate`s.

    Non-object items are ignored; a payload without a `selectedTopics` list
    is an upstream contract violation.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("selectedTopics"), list):
        raise ExternalAPIError(TOPIC_SOURCE_API_NAME, "Response missing selectedTopics list")

    candidates: list[TopicCandidate] = []
    for item in payload["selectedTopics"]:
        if not isinstance(item, dict):
            continue
        main_topic = item.get("mainTopic")
        candidates.append(
            TopicCandidate(
                title=str(item.get("title") or "").strip(),
                parent_topic=str(main_topic).strip() if main_topic else None,
                candidate_keywords=_string_list(item.get("targetKeywords")),
                candidate_queries=_string_list(item.get("targetQueries")),
                article_format=_parse_article_format(item.get("articleFormat")),
            )
        )
    return candidates


class HttpTopicCandidateSource:
    """Client for the remote topic-selection endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.topic_source_url
        self.timeout = timeout if timeout is not None else settings.topic_source_timeout_seconds
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpTopicCandidateSource":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client must be used as async context manager")
        return self._client

    async def fetch_candidates(
        self,
        website_token: str,
        domain: str | None,
        count: int,
    ) -> list[TopicCandidate]:
        """Request `count` topic ideas for a website, in priority order."""
        body = {
            "websiteToken": website_token,
            "domain": domain,
            "analysisType": "comprehensive",
            "generateCount": count,
        }
        logger.info(
            "Topic source request",
            extra={"website_token": website_token, "count": count},
        )

        try:
            response = await self.client.post(self.base_url, json=body)

            if response.status_code == 429:
                logger.warning("Topic source rate limit hit", extra={"website_token": website_token})
                raise RateLimitExceededError(TOPIC_SOURCE_API_NAME)

            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.warning(
                "Topic source HTTP error",
                extra={"website_token": website_token, "error": str(e)},
            )
            raise ExternalAPIError(TOPIC_SOURCE_API_NAME, str(e)) from e
        except ValueError as e:
            logger.warning(
                "Topic source returned invalid JSON",
                extra={"website_token": website_token, "error": str(e)},
            )
            raise ExternalAPIError(TOPIC_SOURCE_API_NAME, "Invalid JSON response") from e

        candidates = parse_selected_topics(payload)
        logger.info(
            "Topic source returned candidates",
            extra={"website_token": website_token, "candidates": len(candidates)},
        )
        return candidates
