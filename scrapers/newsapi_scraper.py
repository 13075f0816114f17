"""
NewsAPI Scraper
Primary backup source
API docs: https://newsapi.org/docs/endpoints/everything
"""
from datetime import datetime, timedelta
from typing import List, Optional
import logging

from .base import BaseNewsScraper
from config import GeneralSettings, NewsAPISettings, get_settings
from models import Article, NewsAPIArticle, NewsAPIResponse, SourceType, Topic
from processing.dates import resolve_timestamp, to_iso


logger = logging.getLogger(__name__)


def normalize_newsapi_article(record: NewsAPIArticle, now: datetime) -> Optional[Article]:
    """Map one NewsAPI article; records without a source name or timestamp are dropped"""
    title = (record.title or "").strip()
    description = (record.description or "").strip()
    source_name = (record.source.name or "").strip() if record.source else ""

    if len(title) <= 10 or len(description) <= 30 or not source_name:
        return None

    published_at = resolve_timestamp(record.published_at, now)
    if not published_at:
        return None

    return Article(
        title=title,
        summary=description,
        source=source_name,
        url=(record.url or "").strip() or None,
        published_at=published_at,
    )


class NewsAPIScraper(BaseNewsScraper):
    """
    NewsAPI `everything` search.

    The freshness window is encoded as an absolute `from=` timestamp and the
    key travels as the `apiKey` query parameter.
    """

    API_URL = "https://newsapi.org/v2/everything"

    def __init__(
        self,
        settings: Optional[NewsAPISettings] = None,
        general: Optional[GeneralSettings] = None,
        **kwargs,
    ):
        self.newsapi_settings = settings or get_settings().newsapi
        super().__init__(
            api_key=self.newsapi_settings.api_key,
            timeout=self.newsapi_settings.timeout,
            general=general,
            **kwargs,
        )

    @property
    def source_type(self) -> SourceType:
        return SourceType.NEWSAPI

    @property
    def name(self) -> str:
        return "NewsAPI"

    async def _fetch_articles(self, topic: Topic) -> List[Article]:
        now = self._now()
        from_date = now - timedelta(hours=topic.freshness_hours)

        payload = await self._request_json(
            self.API_URL,
            params={
                "q": topic.query,
                "from": to_iso(from_date),
                "sortBy": "publishedAt",
                "language": "en",
                "pageSize": self.newsapi_settings.page_size,
                "apiKey": self.api_key,
            },
        )
        response = self._parse(NewsAPIResponse, payload)

        if not response.articles:
            logger.warning(f"[{self.name}] No articles found for {topic.name}")
            return []

        articles = [normalize_newsapi_article(record, now) for record in response.articles]
        return [article for article in articles if article is not None]
