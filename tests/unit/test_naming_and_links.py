"""Unit tests for title/URL refinement and internal link planning."""

from __future__ import annotations

from briefplanner.config import NamingRule
from briefplanner.services.planning.content_index import ExistingContentRecord, build_content_index
from briefplanner.services.planning.links import (
    PILLAR_RATIONALE,
    SAME_CLUSTER_RATIONALE,
    plan_internal_links,
    suggest_pillar_link,
)
from briefplanner.services.planning.naming import (
    build_url_path,
    clean_domain,
    match_naming_rule,
    refine_title,
    slugify,
    to_title,
)


def test_slugify_is_idempotent() -> None:
    slug = slugify("  Tools & Tips: The 2024 Edition!  ")

    assert slug == "tools-and-tips-the-2024-edition"
    assert slugify(slug) == slug
    assert slugify("already-a-slug") == "already-a-slug"


def test_slugify_collapses_and_trims_hyphens() -> None:
    assert slugify("--a -- b--") == "a-b"
    assert slugify(None) == ""


def test_to_title_splits_on_separators() -> None:
    assert to_title("marketing-tools_and stuff") == "Marketing Tools And Stuff"
    assert to_title("") == ""


def test_clean_domain_and_rule_matching() -> None:
    rules = [NamingRule(domain_marker="floridaimports", title_suffix="South Florida", url_cluster="imports")]

    assert clean_domain("sc-domain:https://FloridaImports.com/") == "floridaimports.com"
    assert match_naming_rule("https://floridaimports.com/", rules) is rules[0]
    assert match_naming_rule("example.com", rules) is None
    assert match_naming_rule(None, rules) is None


def test_refine_title_prefers_primary_then_cluster() -> None:
    rule = NamingRule(domain_marker="x", title_suffix="South Florida")

    assert refine_title("Whatever", "crm", "crm pricing") == "Crm Pricing"
    assert refine_title("Whatever", "crm", "crm pricing", rule) == "Crm Pricing | South Florida"
    assert refine_title("General Tools", "crm-tools", "") == "Crm Tools"
    assert refine_title("A Specific Title", "crm-tools", "") == "Crm Tools"
    assert refine_title("A Specific Title", "crm-tools", "", rule) == "Crm Tools | South Florida"
    assert refine_title("A Specific Title", None, None) == "A Specific Title"
    assert refine_title("", None, None) == ""


def test_build_url_path_uses_cluster_rule_or_topic() -> None:
    rule = NamingRule(domain_marker="x", url_cluster="Imports")

    assert build_url_path("Marketing Tools", "email software", "T") == "/marketing-tools/email-software"
    assert build_url_path(None, "email software", "T", rule) == "/imports/email-software"
    assert build_url_path(None, None, "Some Title") == "/topic/some-title"


def _items() -> list[ExistingContentRecord]:
    return [
        ExistingContentRecord(cluster="crm", title="CRM Pricing", url=None, declared_primary_keyword="crm pricing"),
        ExistingContentRecord(cluster="crm", title="The Complete CRM Guide", url="/crm/guide"),
        ExistingContentRecord(cluster="crm", title="CRM for Startups", url="/crm/startups"),
        ExistingContentRecord(cluster="crm", title="CRM Integrations", url="/crm/integrations"),
    ]


def test_plan_internal_links_limits_same_cluster_and_derives_targets() -> None:
    index = build_content_index([], _items())

    links = plan_internal_links("CRM", index)

    assert len(links.same_cluster) == 3
    assert links.same_cluster[0].anchor == "crm pricing"
    assert links.same_cluster[0].target == "/crm/crm-pricing"
    assert links.same_cluster[1].target == "/crm/guide"
    assert all(link.rationale == SAME_CLUSTER_RATIONALE for link in links.same_cluster)
    assert links.cross_cluster == []


def test_pillar_link_prefers_hub_like_title() -> None:
    link = suggest_pillar_link(_items(), "crm")

    assert link is not None
    assert link.anchor == "The Complete CRM Guide"
    assert link.target == "/crm/guide"
    assert link.rationale == PILLAR_RATIONALE


def test_pillar_link_matches_plural_hub_titles() -> None:
    items = [
        ExistingContentRecord(cluster="crm", title="CRM pricing", url="/a"),
        ExistingContentRecord(cluster="crm", title="CRM Guides for Beginners", url="/b"),
    ]

    link = suggest_pillar_link(items, "crm")

    assert link is not None
    assert link.target == "/b"


def test_pillar_link_falls_back_to_first_item_or_none() -> None:
    items = [ExistingContentRecord(cluster="crm", title="CRM Pricing")]

    link = suggest_pillar_link(items, "crm")

    assert link is not None
    assert link.anchor == "CRM Pricing"
    assert link.target == "/crm"
    assert suggest_pillar_link([], "crm") is None


def test_uncategorized_briefs_get_no_links() -> None:
    index = build_content_index([], [ExistingContentRecord(cluster=None, title="Orphan", url="/orphan")])

    links = plan_internal_links(None, index)

    assert links.up_to_pillar is None
    assert links.same_cluster == []
