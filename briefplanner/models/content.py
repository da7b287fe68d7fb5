"""Article brief model (persistence of planning output)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from briefplanner.models.base import Base, StringUUID, TimestampMixin, UUIDMixin


class ArticleBrief(Base, UUIDMixin, TimestampMixin):
    """Stored content brief produced by a planning run."""

    __tablename__ = "article_briefs"
    __table_args__ = (
        Index("ix_article_briefs_website_scheduled_for", "website_token", "scheduled_for"),
        Index("ix_article_briefs_run_sort", "run_id", "sort_index"),
    )

    website_token: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    run_id: Mapped[str] = mapped_column(StringUUID(), nullable=False)
    sort_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Presentation identifiers
    title: Mapped[str] = mapped_column(Text, nullable=False)
    h1: Mapped[str] = mapped_column(Text, nullable=False)
    url_path: Mapped[str] = mapped_column(String(1000), nullable=False)

    # Page definition
    page_type: Mapped[str] = mapped_column(String(20), nullable=False)
    parent_cluster: Mapped[str | None] = mapped_column(String(255), nullable=True)
    primary_keyword: Mapped[str] = mapped_column(String(500), nullable=False)
    intent: Mapped[str] = mapped_column(String(30), nullable=False)
    secondary_keywords: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    target_queries: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    internal_links: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    # Cannibalization verdict
    cannibal_risk: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    cannibal_conflicts: Mapped[list[dict] | None] = mapped_column(JSONB, nullable=True)
    recommendation: Mapped[str | None] = mapped_column(String(30), nullable=True)
    canonical_to: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Metadata
    word_count_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    word_count_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    coverage_keywords: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    # Lifecycle
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    scheduled_for: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<ArticleBrief {self.primary_keyword}>"
