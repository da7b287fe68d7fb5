"""SQLAlchemy database models."""
from briefplanner.models.base import Base
from briefplanner.models.content import ArticleBrief
from briefplanner.models.keyword import TopicClusterContent, WebsiteKeyword

__all__ = [
    "Base",
    "ArticleBrief",
    "TopicClusterContent",
    "WebsiteKeyword",
]
