"""Custom exception classes for the application."""

from typing import Any


class BriefPlannerError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# External API Errors
class ExternalAPIError(BriefPlannerError):
    """Error calling external API."""

    def __init__(self, api_name: str, message: str) -> None:
        self.api_name = api_name
        super().__init__(f"{api_name} API error: {message}", {"api_name": api_name})


class RateLimitExceededError(ExternalAPIError):
    """Rate limit exceeded for external API."""

    def __init__(self, api_name: str) -> None:
        super().__init__(api_name, "Rate limit exceeded")


# Context + persistence errors
class ContextFetchError(BriefPlannerError):
    """Existing keyword/content context could not be read."""

    def __init__(self, website_token: str, reason: str) -> None:
        super().__init__(
            f"Context fetch failed for website {website_token}: {reason}",
            {"website_token": website_token, "reason": reason},
        )


class PersistenceError(BriefPlannerError):
    """A single brief could not be stored."""

    def __init__(self, brief_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to persist brief {brief_id}: {reason}",
            {"brief_id": brief_id, "reason": reason},
        )


# Validation Errors
class ValidationError(BriefPlannerError):
    """Planning request validation failed."""

    pass
