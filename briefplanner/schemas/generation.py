"""Brief generation request/response schemas."""

from pydantic import BaseModel, Field, field_validator

from briefplanner.config import settings
from briefplanner.schemas.brief import ContentBrief, RunSummary, TopicCandidate


class ProgrammaticTemplate(BaseModel):
    """Template + term lists expanded into topic candidates."""

    template: str = Field(..., min_length=1)
    term_lists: dict[str, list[str]] = Field(default_factory=dict)
    pattern_type: str = "custom"
    parent_cluster: str | None = None
    max_candidates: int = Field(100, ge=1, le=1000)


class BriefGenerationRequest(BaseModel):
    """Schema for a brief planning run."""

    website_token: str = Field(..., min_length=1)
    user_token: str | None = None
    domain: str | None = None
    count: int = Field(settings.default_brief_count, ge=1, le=settings.max_brief_count)
    clusters: list[str] = Field(default_factory=list)
    include_pillar: bool = False
    persist: bool = True
    candidates: list[TopicCandidate] | None = None
    programmatic: ProgrammaticTemplate | None = None

    @field_validator("clusters")
    @classmethod
    def _strip_clusters(cls, value: list[str]) -> list[str]:
        return [cluster.strip() for cluster in value if cluster.strip()]


class PersistenceFailureResponse(BaseModel):
    brief_id: str
    primary_keyword: str
    error: str


class PersistenceReportResponse(BaseModel):
    """Per-brief persistence outcome."""

    attempted: int = 0
    saved: int = 0
    failed: list[PersistenceFailureResponse] = Field(default_factory=list)


class BriefGenerationResponse(BaseModel):
    """Schema for a completed planning run."""

    run_id: str
    briefs: list[ContentBrief]
    summary: RunSummary
    persistence: PersistenceReportResponse | None = None
