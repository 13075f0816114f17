"""
Data Models / Schemas
Shared records for topics, articles and usage counters
"""
from datetime import date as calendar_date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceType(str, Enum):
    """News providers"""
    BRAVE = "brave"
    NEWSAPI = "newsapi"
    CURRENTS = "currents"
    MEDIASTACK = "mediastack"


class Topic(BaseModel):
    """Catalog entry: a named subject with its search queries and freshness tier"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique, stable identifier")
    query: str = Field(..., description="Primary search query")
    fallback_query: Optional[str] = Field(None, description="Simplified query used by retries")
    freshness_hours: int = Field(..., gt=0, description="Maximum article age in hours")

    def with_query(self, query: str) -> "Topic":
        """Copy of this topic with another search query substituted"""
        return self.model_copy(update={"query": query})


class Article(BaseModel):
    """Provider-neutral article record"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Headline")
    summary: str = Field(..., description="Description / lead paragraph")
    source: str = Field(..., description="Publisher or site name")
    url: Optional[str] = Field(None, description="Canonical link")
    published_at: Optional[str] = Field(
        None,
        alias="publishedAt",
        description="ISO-8601 publish timestamp",
    )


class NewsContent(BaseModel):
    """Articles selected for one topic in one aggregation run"""
    topic: str
    articles: List[Article] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ApiUsage(BaseModel):
    """Persisted daily call counter of a metered provider"""
    date: str = Field(..., description="Calendar day, YYYY-MM-DD")
    count: int = Field(default=0, ge=0)

    @field_validator("date")
    @classmethod
    def _iso_day(cls, value: str) -> str:
        calendar_date.fromisoformat(value)
        return value
