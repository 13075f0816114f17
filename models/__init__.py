"""
Data Models
"""
from .schemas import (
    SourceType,
    Topic,
    Article,
    NewsContent,
    ApiUsage,
)
from .provider_responses import (
    BraveWebResult,
    BraveSearchResponse,
    NewsAPIArticle,
    NewsAPIResponse,
    CurrentsArticle,
    CurrentsResponse,
    MediaStackArticle,
    MediaStackResponse,
)

__all__ = [
    "SourceType",
    "Topic",
    "Article",
    "NewsContent",
    "ApiUsage",
    "BraveWebResult",
    "BraveSearchResponse",
    "NewsAPIArticle",
    "NewsAPIResponse",
    "CurrentsArticle",
    "CurrentsResponse",
    "MediaStackArticle",
    "MediaStackResponse",
]
