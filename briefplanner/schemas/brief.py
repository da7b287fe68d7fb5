"""Content brief planning schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SearchIntent = Literal[
    "informational",
    "transactional",
    "comparison",
    "pricing",
    "location",
    "mixed",
]
PageType = Literal["pillar", "cluster", "supporting"]
CannibalizationRisk = Literal["none", "possible", "high"]
Recommendation = Literal["differentiate", "consolidate", "canonicalize"]
BriefStatus = Literal["draft", "scheduled", "published", "archived"]

RISK_RECOMMENDATIONS: dict[str, str] = {
    "possible": "differentiate",
    "high": "canonicalize",
}


class ArticleFormatHint(BaseModel):
    """Upstream article-format hint (type + recommended word-count range)."""

    type: str | None = None
    word_count_range: tuple[int, int] | None = None


class TopicCandidate(BaseModel):
    """Topic idea supplied by the external candidate source."""

    title: str = ""
    parent_topic: str | None = None
    candidate_keywords: list[str] = Field(default_factory=list)
    candidate_queries: list[str] = Field(default_factory=list)
    article_format: ArticleFormatHint | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def format_type(self) -> str:
        if self.article_format is None or not self.article_format.type:
            return ""
        return self.article_format.type.strip().lower()


class LinkSuggestion(BaseModel):
    """Internal link suggestion."""

    anchor: str
    target: str
    topic_cluster: str | None = None
    rationale: str | None = None


class InternalLinks(BaseModel):
    """Internal link plan for one brief."""

    up_to_pillar: LinkSuggestion | None = None
    same_cluster: list[LinkSuggestion] = Field(default_factory=list)
    cross_cluster: list[LinkSuggestion] = Field(default_factory=list)


class CannibalizationConflict(BaseModel):
    """Existing page that already targets the brief's head term."""

    url: str
    title: str | None = None
    primary_keyword: str | None = None
    intent: SearchIntent | None = None


class CannibalizationVerdict(BaseModel):
    """Cannibalization risk assessment for one brief."""

    risk: CannibalizationRisk = "none"
    conflicts: list[CannibalizationConflict] = Field(default_factory=list)
    recommendation: Recommendation | None = None
    canonical_to: str | None = None

    @model_validator(mode="after")
    def _recommendation_matches_risk(self) -> "CannibalizationVerdict":
        expected = RISK_RECOMMENDATIONS.get(self.risk)
        if expected is not None and self.recommendation != expected:
            raise ValueError(
                f"risk={self.risk} requires recommendation={expected!r}, "
                f"got {self.recommendation!r}"
            )
        return self


class BriefMetadata(BaseModel):
    """Editorial metadata attached to a brief."""

    word_count_range: tuple[int, int]
    tone: str = "professional"
    notes: list[str] = Field(default_factory=list)


class ContentBrief(BaseModel):
    """Structured content brief produced by a planning run.

    Briefs are immutable once built; the scheduler assigns `scheduled_for`
    and `sort_index` through `model_copy`.
    """

    id: str
    run_id: str
    title: str
    h1: str
    url_path: str
    page_type: PageType
    parent_cluster: str | None = None
    primary_keyword: str
    intent: SearchIntent
    secondary_keywords: list[str] = Field(default_factory=list)
    target_queries: list[str] = Field(default_factory=list)
    summary: str = ""
    internal_links: InternalLinks = Field(default_factory=InternalLinks)
    cannibalization: CannibalizationVerdict = Field(default_factory=CannibalizationVerdict)
    metadata: BriefMetadata
    scheduled_for: datetime | None = None
    sort_index: int = 0
    status: BriefStatus = "draft"

    model_config = ConfigDict(frozen=True)


class RiskCounts(BaseModel):
    """Brief counts per cannibalization risk bucket."""

    none: int = 0
    possible: int = 0
    high: int = 0


class RunSummary(BaseModel):
    """Aggregate counts for a planning run."""

    total: int = 0
    by_intent: dict[str, int] = Field(default_factory=dict)
    cannibalization: RiskCounts = Field(default_factory=RiskCounts)
    degraded: bool = False
    degraded_reason: str | None = None
    non_unique_primaries: int = 0
    skipped_malformed: int = 0
    skipped_by_cluster_filter: int = 0


class PlanningResult(BaseModel):
    """Ordered briefs plus run summary from the planning engine."""

    run_id: str
    briefs: list[ContentBrief] = Field(default_factory=list)
    summary: RunSummary = Field(default_factory=RunSummary)

    @property
    def degraded(self) -> bool:
        return self.summary.degraded
