"""Briefs API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from briefplanner.api.v1.briefs.constants import (
    TOPIC_SOURCE_RATE_LIMITED_DETAIL,
    TOPIC_SOURCE_UNAVAILABLE_DETAIL,
)
from briefplanner.core.exceptions import ExternalAPIError, RateLimitExceededError, ValidationError
from briefplanner.dependencies import BriefService
from briefplanner.schemas.generation import (
    BriefGenerationRequest,
    BriefGenerationResponse,
    PersistenceFailureResponse,
    PersistenceReportResponse,
)
from briefplanner.services.brief_generation import BriefGenerationInput

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=BriefGenerationResponse,
    summary="Plan content briefs",
    description=(
        "Allocate unique primary keywords, classify intent, flag cannibalization "
        "against existing content and schedule the resulting briefs."
    ),
)
async def generate_briefs(
    request: BriefGenerationRequest,
    service: BriefService,
) -> BriefGenerationResponse:
    """Run one planning batch for a website."""
    try:
        output = await service.generate(
            BriefGenerationInput(
                website_token=request.website_token,
                user_token=request.user_token,
                domain=request.domain,
                count=request.count,
                clusters=request.clusters,
                include_pillar=request.include_pillar,
                persist=request.persist,
                candidates=request.candidates,
                programmatic=request.programmatic,
            )
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        ) from e
    except RateLimitExceededError as e:
        logger.warning("Topic source rate limited", extra={"website_token": request.website_token})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=TOPIC_SOURCE_RATE_LIMITED_DETAIL,
        ) from e
    except ExternalAPIError as e:
        logger.warning(
            "Topic source failed",
            extra={"website_token": request.website_token, "error": e.message},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=TOPIC_SOURCE_UNAVAILABLE_DETAIL,
        ) from e

    persistence = None
    if output.persistence is not None:
        persistence = PersistenceReportResponse(
            attempted=output.persistence.attempted,
            saved=output.persistence.saved,
            failed=[
                PersistenceFailureResponse(
                    brief_id=failure.brief_id,
                    primary_keyword=failure.primary_keyword,
                    error=failure.error,
                )
                for failure in output.persistence.failed
            ],
        )

    return BriefGenerationResponse(
        run_id=output.run_id,
        briefs=output.briefs,
        summary=output.summary,
        persistence=persistence,
    )
