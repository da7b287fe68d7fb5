"""Existing keyword inventory and cluster content models (context contract)."""

from __future__ import annotations

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from briefplanner.models.base import Base, TimestampMixin, UUIDMixin


class WebsiteKeyword(Base, UUIDMixin, TimestampMixin):
    """A keyword already tracked for a website."""

    __tablename__ = "website_keywords"
    __table_args__ = (
        Index("ix_website_keywords_website_cluster", "website_token", "topic_cluster"),
    )

    website_token: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    keyword: Mapped[str] = mapped_column(String(500), nullable=False)
    keyword_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    topic_cluster: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<WebsiteKeyword {self.keyword}>"


class TopicClusterContent(Base, UUIDMixin, TimestampMixin):
    """A page that already exists in one of the website's topic clusters."""

    __tablename__ = "topic_cluster_content"

    website_token: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    topic_cluster: Mapped[str | None] = mapped_column(String(255), nullable=True)
    article_title: Mapped[str] = mapped_column(Text, nullable=False)
    article_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_keyword: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<TopicClusterContent {self.article_title}>"
