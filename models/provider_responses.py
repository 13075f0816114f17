"""Typed response records for each news provider.

Only the fields the adapters read are declared; everything else the
providers send is ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _ProviderRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BraveWebResult(_ProviderRecord):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    age: Optional[str] = None
    page_age: Optional[str] = None


class BraveWebSection(_ProviderRecord):
    results: List[BraveWebResult] = Field(default_factory=list)


class BraveSearchResponse(_ProviderRecord):
    web: Optional[BraveWebSection] = None

    @property
    def results(self) -> List[BraveWebResult]:
        return list(self.web.results) if self.web else []


class NewsAPISource(_ProviderRecord):
    id: Optional[str] = None
    name: Optional[str] = None


class NewsAPIArticle(_ProviderRecord):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = Field(None, alias="publishedAt")
    source: Optional[NewsAPISource] = None


class NewsAPIResponse(_ProviderRecord):
    status: Optional[str] = None
    total_results: Optional[int] = Field(None, alias="totalResults")
    articles: List[NewsAPIArticle] = Field(default_factory=list)


class CurrentsArticle(_ProviderRecord):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None
    published: Optional[str] = None


class CurrentsResponse(_ProviderRecord):
    status: Optional[str] = None
    news: List[CurrentsArticle] = Field(default_factory=list)


class MediaStackArticle(_ProviderRecord):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    source: Optional[str] = None
    published_at: Optional[str] = None


class MediaStackResponse(_ProviderRecord):
    data: List[MediaStackArticle] = Field(default_factory=list)
