"""Unit tests for per-brief isolated persistence."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError

from briefplanner.schemas.brief import (
    BriefMetadata,
    CannibalizationConflict,
    CannibalizationVerdict,
    ContentBrief,
)
from briefplanner.services.brief_persistence import BriefPersistenceService, brief_to_row


def _brief(brief_id: str, primary: str, **overrides: Any) -> ContentBrief:
    data: dict[str, Any] = {
        "id": brief_id,
        "run_id": "r1",
        "title": primary.title(),
        "h1": primary.title(),
        "url_path": f"/topic/{primary.replace(' ', '-')}",
        "page_type": "cluster",
        "primary_keyword": primary,
        "intent": "informational",
        "secondary_keywords": [f"{primary} tips", f"best {primary}"],
        "metadata": BriefMetadata(word_count_range=(1500, 2500), notes=["n1"]),
        "scheduled_for": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "sort_index": 0,
    }
    data.update(overrides)
    return ContentBrief(**data)


class _FakeSession:
    def __init__(self, fail_on: set[str]) -> None:
        self._fail_on = fail_on
        self.added: list[Any] = []

    def add(self, row: Any) -> None:
        self.added.append(row)

    async def flush(self) -> None:
        for row in self.added:
            if row.id in self._fail_on:
                raise IntegrityError("INSERT", {}, Exception("duplicate key"))


class _FakeSessionContextManager:
    def __init__(self, session: _FakeSession, sink: list[Any]) -> None:
        self._session = session
        self._sink = sink

    async def __aenter__(self) -> _FakeSession:
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc_type is None:
            self._sink.extend(self._session.added)
        return None


class _FakeSessionMaker:
    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.committed: list[Any] = []
        self.sessions: list[_FakeSession] = []

    def __call__(self) -> _FakeSessionContextManager:
        session = _FakeSession(self.fail_on)
        self.sessions.append(session)
        return _FakeSessionContextManager(session, self.committed)


def test_brief_to_row_flattens_verdict_and_metadata() -> None:
    brief = _brief(
        "c1",
        "crm pricing",
        cannibalization=CannibalizationVerdict(
            risk="high",
            recommendation="canonicalize",
            canonical_to="/crm/pricing",
            conflicts=[CannibalizationConflict(url="/crm/pricing", title="CRM Pricing")],
        ),
    )

    row = brief_to_row(brief, website_token="site-1", user_token="user-1")

    assert row.id == "c1"
    assert row.website_token == "site-1"
    assert row.cannibal_risk == "high"
    assert row.recommendation == "canonicalize"
    assert row.canonical_to == "/crm/pricing"
    assert row.cannibal_conflicts[0]["url"] == "/crm/pricing"
    assert (row.word_count_min, row.word_count_max) == (1500, 2500)
    assert row.coverage_keywords == {
        "primary": "crm pricing",
        "secondary": ["crm pricing tips", "best crm pricing"],
        "total_count": 3,
    }
    assert row.internal_links == {"up_to_pillar": None, "same_cluster": [], "cross_cluster": []}
    assert row.status == "draft"


@pytest.mark.asyncio
async def test_save_isolates_failures_per_brief() -> None:
    maker = _FakeSessionMaker(fail_on={"c2"})
    service = BriefPersistenceService(maker, retry_attempts=1)
    briefs = [_brief("c1", "crm"), _brief("c2", "crm pricing"), _brief("c3", "crm tools")]

    report = await service.save(briefs, website_token="site-1", run_id="r1")

    assert report.attempted == 3
    assert report.saved == 2
    assert [failure.brief_id for failure in report.failed] == ["c2"]
    assert report.failed[0].primary_keyword == "crm pricing"
    assert "IntegrityError" in report.failed[0].error
    assert [row.id for row in maker.committed] == ["c1", "c3"]
    assert len(maker.sessions) == 3


@pytest.mark.asyncio
async def test_save_reports_every_failure_without_raising() -> None:
    maker = _FakeSessionMaker(fail_on={"c1", "c2"})
    service = BriefPersistenceService(maker, retry_attempts=1)

    report = await service.save(
        [_brief("c1", "crm"), _brief("c2", "crm tools")],
        website_token="site-1",
    )

    assert report.saved == 0
    assert len(report.failed) == 2
