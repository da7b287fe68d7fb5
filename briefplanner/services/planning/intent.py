"""Heuristic search-intent classification.

Rules are evaluated top-to-bottom and the first match wins. Comparison and
pricing signals are checked before generic how-to formats.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from briefplanner.schemas.brief import SearchIntent

IntentPredicate = Callable[[str, str], bool]

COMPARISON_PATTERN = re.compile(r"\b(vs|versus|compare|comparison)\b")
PRICING_PATTERN = re.compile(r"\b(pricing|price|cost|rates?|quotes?)\b")
COMMERCIAL_PATTERN = re.compile(r"\b(supplier|buy|wholesale|order|request)\b")

INFORMATIONAL_FORMATS = frozenset({"how-to", "faq", "guide", "beginner-guide"})


@dataclass(frozen=True)
class IntentRule:
    """One (predicate, label) pair in the ordered rule list."""

    name: str
    label: SearchIntent
    predicate: IntentPredicate

    def matches(self, text: str, format_type: str) -> bool:
        return self.predicate(text, format_type)


def _pattern_predicate(pattern: re.Pattern[str]) -> IntentPredicate:
    return lambda text, _format_type: bool(pattern.search(text))


def _location_predicate(terms: Iterable[str]) -> IntentPredicate:
    escaped = [re.escape(term) for term in terms if term]
    if not escaped:
        return lambda _text, _format_type: False
    pattern = re.compile(rf"\b({'|'.join(escaped)})\b")
    return _pattern_predicate(pattern)


def build_intent_rules(location_terms: Iterable[str] = ()) -> list[IntentRule]:
    """Build the ordered rule list with a configurable location vocabulary."""
    return [
        IntentRule(
            name="comparison",
            label="comparison",
            predicate=lambda text, fmt: fmt == "comparison" or bool(COMPARISON_PATTERN.search(text)),
        ),
        IntentRule(
            name="pricing",
            label="pricing",
            predicate=_pattern_predicate(PRICING_PATTERN),
        ),
        IntentRule(
            name="location",
            label="location",
            predicate=_location_predicate(term.lower() for term in location_terms),
        ),
        IntentRule(
            name="informational_format",
            label="informational",
            predicate=lambda _text, fmt: fmt in INFORMATIONAL_FORMATS,
        ),
        IntentRule(
            name="commercial",
            label="transactional",
            predicate=_pattern_predicate(COMMERCIAL_PATTERN),
        ),
    ]


def classify_intent(
    text: str,
    format_type: str | None,
    rules: Sequence[IntentRule],
    default: SearchIntent = "informational",
) -> SearchIntent:
    """Return the label of the first matching rule, else `default`."""
    lowered = (text or "").lower()
    fmt = (format_type or "").strip().lower()
    for rule in rules:
        if rule.matches(lowered, fmt):
            return rule.label
    return default
