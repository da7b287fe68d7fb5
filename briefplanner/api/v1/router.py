"""API v1 router aggregator."""

from fastapi import APIRouter

from briefplanner.api.v1.briefs import routes as briefs

api_router = APIRouter()

api_router.include_router(briefs.router, prefix="/briefs", tags=["Briefs"])
