"""Unit tests for settings parsing."""

from __future__ import annotations

import pytest

from briefplanner.config import Settings


def test_database_url_is_normalized_to_asyncpg() -> None:
    settings = Settings(database_url="postgres://u:p@db:5432/app")

    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/app"


def test_location_terms_accept_comma_separated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOCATION_TERMS", "Austin, Dallas ,austin")

    settings = Settings()

    assert settings.location_terms == ["Austin", "Dallas", "austin"]
    assert settings.get_location_terms() == ["austin", "dallas"]


def test_naming_rules_parse_json_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(
        "NAMING_RULES",
        '[{"domain_marker": "floridaimports", "title_suffix": "South Florida", "url_cluster": "imports"}]',
    )

    settings = Settings()

    assert len(settings.naming_rules) == 1
    assert settings.naming_rules[0].title_suffix == "South Florida"


def test_naming_rules_reject_non_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NAMING_RULES", '"just a string"')

    with pytest.raises(ValueError):
        Settings()
