"""FastAPI dependencies for the brief generation service."""

from functools import partial
from typing import Annotated

from fastapi import Depends

from briefplanner.config import settings
from briefplanner.core.database import get_session_context
from briefplanner.services.brief_generation import (
    BriefGenerationService,
    default_topic_source_factory,
)
from briefplanner.services.brief_persistence import BriefPersistenceService
from briefplanner.services.context_loader import ContentContextLoader


def get_brief_generation_service() -> BriefGenerationService:
    """Build the service with read-only context sessions and committing write sessions."""
    return BriefGenerationService(
        context_loader=ContentContextLoader(
            partial(get_session_context, commit_on_exit=False),
            timeout_seconds=settings.context_fetch_timeout_seconds,
            retry_attempts=settings.context_fetch_retry_attempts,
        ),
        topic_source_factory=default_topic_source_factory,
        persistence=BriefPersistenceService(
            get_session_context,
            retry_attempts=settings.persistence_retry_attempts,
        ),
    )


BriefService = Annotated[BriefGenerationService, Depends(get_brief_generation_service)]
