"""Unit tests for the topic-candidate source client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from briefplanner.core.exceptions import ExternalAPIError, RateLimitExceededError
from briefplanner.integrations.topic_source import (
    HttpTopicCandidateSource,
    StaticTopicCandidateSource,
    parse_selected_topics,
)
from briefplanner.schemas.brief import TopicCandidate


def _transport(status_code: int, payload: Any, captured: list[httpx.Request] | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def test_parse_selected_topics_maps_fields_and_skips_non_objects() -> None:
    candidates = parse_selected_topics(
        {
            "selectedTopics": [
                {
                    "title": "HubSpot vs Salesforce",
                    "mainTopic": "CRM",
                    "targetKeywords": ["hubspot vs salesforce", 42, None],
                    "targetQueries": ["which crm is better"],
                    "articleFormat": {"type": "comparison", "wordCountRange": [2000, 3000]},
                },
                "not-an-object",
                {"title": "Bare", "articleFormat": {"type": "faq", "wordCountRange": ["x", 1]}},
            ]
        }
    )

    assert len(candidates) == 2
    first, second = candidates
    assert first.parent_topic == "CRM"
    assert first.candidate_keywords == ["hubspot vs salesforce", "42"]
    assert first.format_type == "comparison"
    assert first.article_format is not None
    assert first.article_format.word_count_range == (2000, 3000)
    assert second.parent_topic is None
    assert second.article_format is not None
    assert second.article_format.word_count_range is None


def test_parse_selected_topics_rejects_missing_list() -> None:
    with pytest.raises(ExternalAPIError):
        parse_selected_topics({"topics": []})


@pytest.mark.asyncio
async def test_fetch_candidates_posts_expected_body() -> None:
    captured: list[httpx.Request] = []
    transport = _transport(
        200,
        {"selectedTopics": [{"title": "CRM Pricing", "mainTopic": "crm", "targetKeywords": ["crm pricing"]}]},
        captured,
    )

    async with HttpTopicCandidateSource(
        base_url="http://topics.test/select",
        timeout=5.0,
        transport=transport,
    ) as source:
        candidates = await source.fetch_candidates("site-1", "example.com", 5)

    assert [candidate.title for candidate in candidates] == ["CRM Pricing"]
    assert json.loads(captured[0].content) == {
        "websiteToken": "site-1",
        "domain": "example.com",
        "analysisType": "comprehensive",
        "generateCount": 5,
    }


@pytest.mark.asyncio
async def test_fetch_candidates_maps_rate_limit() -> None:
    async with HttpTopicCandidateSource(
        base_url="http://topics.test/select",
        transport=_transport(429, {}),
    ) as source:
        with pytest.raises(RateLimitExceededError):
            await source.fetch_candidates("site-1", None, 5)


@pytest.mark.asyncio
async def test_fetch_candidates_maps_http_and_json_errors() -> None:
    async with HttpTopicCandidateSource(
        base_url="http://topics.test/select",
        transport=_transport(500, {"error": "boom"}),
    ) as source:
        with pytest.raises(ExternalAPIError):
            await source.fetch_candidates("site-1", None, 5)

    async with HttpTopicCandidateSource(
        base_url="http://topics.test/select",
        transport=_transport(200, "<html>not json</html>"),
    ) as source:
        with pytest.raises(ExternalAPIError, match="Invalid JSON"):
            await source.fetch_candidates("site-1", None, 5)


def test_client_requires_context_manager() -> None:
    source = HttpTopicCandidateSource(base_url="http://topics.test/select")

    with pytest.raises(RuntimeError):
        _ = source.client


@pytest.mark.asyncio
async def test_static_source_returns_copy_of_candidates() -> None:
    provided = [TopicCandidate(title="One")]

    async with StaticTopicCandidateSource(provided) as source:
        candidates = await source.fetch_candidates("site-1", None, 10)

    assert candidates == provided
    assert candidates is not provided
