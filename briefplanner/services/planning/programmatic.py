"""Template-driven topic candidates ("{item_a} vs {item_b}", "{service} in {city}")."""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Literal

from briefplanner.schemas.brief import ArticleFormatHint, TopicCandidate

logger = logging.getLogger(__name__)

PatternType = Literal["comparison", "product", "location", "category", "custom"]

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")
ITEM_PAIRS_KEY = "item_pairs"

WORD_COUNT_BY_PATTERN: dict[str, tuple[int, int]] = {
    "comparison": (2000, 3000),
    "product": (1500, 2500),
    "location": (1200, 2000),
    "category": (1500, 2500),
}
DEFAULT_WORD_COUNT = (1500, 2500)

_MINOR_TITLE_WORDS = frozenset(
    {"a", "an", "the", "and", "but", "or", "for", "nor", "on", "at", "to", "by", "in", "of", "vs"}
)


def extract_placeholders(template: str) -> list[str]:
    """Placeholder names in order of first appearance."""
    names: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(template or ""):
        name = match.group(1).strip()
        if name and name not in names:
            names.append(name)
    return names


def _fill(template: str, values: Mapping[str, str]) -> str:
    return PLACEHOLDER_PATTERN.sub(
        lambda match: values.get(match.group(1).strip(), match.group(0)),
        template,
    )


def generate_permutations(template: str, term_lists: Mapping[str, Sequence[str]]) -> list[str]:
    """Expand a template against its term lists.

    `item_pairs` entries ("hubspot|salesforce") fill `{item_a}`/`{item_b}`;
    otherwise the cartesian product of the lists is taken in placeholder
    order. Any missing or empty list yields no permutations.
    """
    placeholders = extract_placeholders(template)
    if not placeholders:
        return [template]

    pairs = term_lists.get(ITEM_PAIRS_KEY)
    if pairs:
        permutations: list[str] = []
        for pair in pairs:
            item_a, separator, item_b = str(pair).partition("|")
            if not separator or not item_a.strip() or not item_b.strip():
                logger.warning("Skipping malformed item pair", extra={"pair": pair})
                continue
            permutations.append(_fill(template, {"item_a": item_a.strip(), "item_b": item_b.strip()}))
        return permutations

    lists = [[str(term).strip() for term in term_lists.get(name) or [] if str(term).strip()] for name in placeholders]
    if any(not values for values in lists):
        missing = [name for name, values in zip(placeholders, lists) if not values]
        logger.warning(
            "Empty term list for template placeholder",
            extra={"template": template, "placeholders": missing},
        )
        return []

    return [_fill(template, dict(zip(placeholders, combo))) for combo in itertools.product(*lists)]


def capitalize_title(value: str) -> str:
    """Headline case; minor words stay lower-case except in first position."""
    words = value.split()
    titled: list[str] = []
    for position, word in enumerate(words):
        lowered = word.lower()
        if position > 0 and lowered in _MINOR_TITLE_WORDS:
            titled.append(lowered)
        else:
            titled.append(word[:1].upper() + word[1:].lower())
    return " ".join(titled)


def format_hint_for_pattern(pattern_type: str) -> ArticleFormatHint:
    """Comparison patterns keep the `comparison` format so intent and page type follow."""
    return ArticleFormatHint(
        type=pattern_type,
        word_count_range=WORD_COUNT_BY_PATTERN.get(pattern_type, DEFAULT_WORD_COUNT),
    )


def keyword_variations(primary: str, pattern_type: str, year: int, limit: int = 4) -> list[str]:
    """Search variations of a programmatic keyword used as secondary keywords.

    "movers in miami" (location) -> best/top/<year>/near me variants.
    """
    base = primary.lower().strip()
    variations: list[str] = []
    if "best" not in base:
        variations.append(f"best {base}")
    if "top" not in base:
        variations.append(f"top {base}")
    variations.append(f"{base} {year}")
    if pattern_type == "location":
        variations.append(f"{base} near me")
    elif pattern_type == "product":
        variations.extend([f"{base} review", f"{base} guide"])
    return variations[:limit]


def build_programmatic_candidates(
    template: str,
    term_lists: Mapping[str, Sequence[str]],
    pattern_type: str = "custom",
    parent_cluster: str | None = None,
    max_candidates: int = 100,
    year: int | None = None,
) -> list[TopicCandidate]:
    """Turn template permutations into topic candidates for the planner."""
    permutations = generate_permutations(template, term_lists)[: max(max_candidates, 0)]
    hint = format_hint_for_pattern(pattern_type)
    year = year or datetime.now(timezone.utc).year
    candidates = [
        TopicCandidate(
            title=capitalize_title(permutation),
            parent_topic=parent_cluster,
            candidate_keywords=[permutation.lower().strip()],
            candidate_queries=keyword_variations(permutation, pattern_type, year),
            article_format=hint,
        )
        for permutation in permutations
        if permutation.strip()
    ]
    logger.info(
        "Built programmatic candidates",
        extra={"pattern_type": pattern_type, "count": len(candidates)},
    )
    return candidates
