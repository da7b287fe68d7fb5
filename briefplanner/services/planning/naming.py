"""Title and URL refinement helpers."""

from __future__ import annotations

import re
from collections.abc import Sequence

from briefplanner.config import NamingRule

TITLE_SUFFIX_SEPARATOR = " | "
DEFAULT_URL_CLUSTER = "topic"

def slugify(value: str | None) -> str:
    """URL slug: lower-case, `&` -> `and`, alphanumerics and single hyphens only.

    Idempotent: slugifying a slug returns it unchanged.
    """
    slug = str(value or "").lower().strip()
    slug = slug.replace("&", " and ")
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def to_title(value: str | None) -> str:
    """Title-case words split on hyphens, underscores and whitespace."""
    words = [word for word in re.split(r"[-_\s]+", str(value or "")) if word]
    return " ".join(word[0].upper() + word[1:] for word in words)


def clean_domain(domain: str | None) -> str:
    """Strip `sc-domain:` prefixes, URL schemes and trailing slashes."""
    cleaned = str(domain or "").strip().lower()
    cleaned = re.sub(r"^sc-domain:", "", cleaned)
    cleaned = re.sub(r"^https?://", "", cleaned)
    return cleaned.rstrip("/")


def match_naming_rule(domain: str | None, rules: Sequence[NamingRule]) -> NamingRule | None:
    """First rule whose marker appears in the cleaned domain."""
    cleaned = clean_domain(domain)
    if not cleaned:
        return None
    for rule in rules:
        marker = rule.domain_marker.strip().lower()
        if marker and marker in cleaned:
            return rule
    return None


def _with_suffix(title: str, rule: NamingRule | None) -> str:
    if rule is None or not rule.title_suffix:
        return title
    return f"{title}{TITLE_SUFFIX_SEPARATOR}{rule.title_suffix}"


def refine_title(
    current: str,
    cluster: str | None,
    primary_keyword: str | None,
    rule: NamingRule | None = None,
) -> str:
    """Prefer the title-cased primary keyword, then the cluster label, then `current`."""
    primary_title = to_title(primary_keyword)
    if primary_title:
        return _with_suffix(primary_title, rule)

    cluster_title = to_title(cluster)
    if cluster_title:
        return _with_suffix(cluster_title, rule)
    return current


def build_url_path(
    cluster: str | None,
    primary_keyword: str | None,
    title: str,
    rule: NamingRule | None = None,
) -> str:
    """`/{cluster-slug}/{primary-or-title-slug}`."""
    cluster_slug = slugify(cluster) or slugify(rule.url_cluster if rule else None) or DEFAULT_URL_CLUSTER
    leaf = slugify(primary_keyword) or slugify(title)
    if not leaf:
        return f"/{cluster_slug}"
    return f"/{cluster_slug}/{leaf}"
