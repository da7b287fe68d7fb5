"""Unit tests for the content index and cannibalization detection."""

from __future__ import annotations

import pytest

from briefplanner.schemas.brief import CannibalizationVerdict
from briefplanner.services.planning.cannibalization import detect_cannibalization
from briefplanner.services.planning.content_index import (
    ContentIndex,
    ExistingContentRecord,
    IndexDegraded,
    KeywordRecord,
    build_content_index,
)


def _index() -> ContentIndex:
    return build_content_index(
        [
            KeywordRecord(keyword="Email Marketing Software", type="primary", cluster="marketing-tools"),
            KeywordRecord(keyword="email  automation", type="secondary", cluster="marketing-tools"),
        ],
        [
            ExistingContentRecord(
                cluster="Marketing-Tools",
                title="Best Email Marketing Software",
                url="https://example.com/email-marketing-software",
                declared_primary_keyword="Email Marketing Software",
            ),
            ExistingContentRecord(
                cluster="other",
                title="Unpublished Draft",
                declared_primary_keyword="crm pricing",
            ),
        ],
    )


def test_build_content_index_tolerates_empty_input() -> None:
    index = build_content_index(None, [])

    assert index.is_empty
    assert index.content_for("anything") == ()


def test_build_content_index_normalizes_and_groups_by_cluster() -> None:
    index = _index()

    assert "email marketing software" in index.declared_primaries
    assert "email automation" in index.inventory_keywords
    assert len(index.content_for("marketing-tools")) == 1
    assert len(index.content_for("MARKETING-TOOLS")) == 1


def test_declared_primary_yields_high_risk_with_canonical_target() -> None:
    verdict = detect_cannibalization(
        "email marketing software",
        "marketing-tools",
        "informational",
        _index(),
    )

    assert verdict.risk == "high"
    assert verdict.recommendation == "canonicalize"
    assert verdict.canonical_to == "https://example.com/email-marketing-software"
    assert verdict.conflicts[0].title == "Best Email Marketing Software"
    assert verdict.conflicts[0].intent == "informational"


def test_high_risk_without_same_cluster_item_has_no_conflicts() -> None:
    verdict = detect_cannibalization("email marketing software", "crm", "informational", _index())

    assert verdict.risk == "high"
    assert verdict.recommendation == "canonicalize"
    assert verdict.conflicts == []
    assert verdict.canonical_to is None


def test_unpublished_conflict_uses_title_slug_and_null_canonical() -> None:
    verdict = detect_cannibalization("CRM pricing", "other", "pricing", _index())

    assert verdict.risk == "high"
    assert verdict.conflicts[0].url == "/unpublished-draft"
    assert verdict.canonical_to is None


def test_inventory_keyword_yields_possible_risk() -> None:
    verdict = detect_cannibalization("email automation", "marketing-tools", "informational", _index())

    assert verdict.risk == "possible"
    assert verdict.recommendation == "differentiate"
    assert verdict.canonical_to is None


def test_unknown_keyword_has_no_risk() -> None:
    verdict = detect_cannibalization("sms marketing", "marketing-tools", "informational", _index())

    assert verdict.risk == "none"
    assert verdict.recommendation is None
    assert verdict.conflicts == []


def test_degraded_result_carries_empty_index() -> None:
    result = IndexDegraded(reason="database unavailable")

    assert result.degraded is True
    assert result.index.is_empty
    assert detect_cannibalization("email marketing software", None, "informational", result.index).risk == "none"


def test_verdict_rejects_mismatched_recommendation() -> None:
    with pytest.raises(ValueError):
        CannibalizationVerdict(risk="high", recommendation="differentiate")
    with pytest.raises(ValueError):
        CannibalizationVerdict(risk="possible")

    assert CannibalizationVerdict(risk="none", recommendation="consolidate").recommendation == "consolidate"
