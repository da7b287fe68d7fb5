"""Briefs API constants."""

TOPIC_SOURCE_UNAVAILABLE_DETAIL = "Topic candidate source failed"
TOPIC_SOURCE_RATE_LIMITED_DETAIL = "Topic candidate source rate limit exceeded"
