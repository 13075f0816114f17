"""
MediaStack Scraper
Scarce backup source (free tier: 100 requests/month, capped per day)
API docs: https://mediastack.com/documentation
"""
from datetime import datetime
from typing import List, Optional
import logging

from .base import BaseNewsScraper
from config import GeneralSettings, MediaStackSettings, get_settings
from models import Article, MediaStackArticle, MediaStackResponse, SourceType, Topic
from processing.dates import resolve_timestamp


logger = logging.getLogger(__name__)


def normalize_mediastack_article(record: MediaStackArticle, now: datetime) -> Optional[Article]:
    """Map one MediaStack article; records without a source or timestamp are dropped"""
    title = (record.title or "").strip()
    description = (record.description or "").strip()
    source = (record.source or "").strip()

    if len(title) <= 10 or len(description) <= 30 or not source:
        return None

    published_at = resolve_timestamp(record.published_at, now)
    if not published_at:
        return None

    return Article(
        title=title,
        summary=description,
        source=source,
        url=(record.url or "").strip() or None,
        published_at=published_at,
    )


class MediaStackScraper(BaseNewsScraper):
    """
    MediaStack news search, newest first.

    The free tier only serves plain HTTP, and the endpoint has no date
    window parameter; freshness is left to the aggregator.
    """

    API_URL = "http://api.mediastack.com/v1/news"

    metered = True

    def __init__(
        self,
        settings: Optional[MediaStackSettings] = None,
        general: Optional[GeneralSettings] = None,
        **kwargs,
    ):
        self.mediastack_settings = settings or get_settings().mediastack
        super().__init__(
            api_key=self.mediastack_settings.api_key,
            timeout=self.mediastack_settings.timeout,
            general=general,
            **kwargs,
        )
        self.daily_limit = self.mediastack_settings.daily_limit

    @property
    def source_type(self) -> SourceType:
        return SourceType.MEDIASTACK

    @property
    def name(self) -> str:
        return "MediaStack"

    async def _fetch_articles(self, topic: Topic) -> List[Article]:
        payload = await self._request_json(
            self.API_URL,
            params={
                "access_key": self.api_key,
                "keywords": topic.query,
                "languages": "en",
                "limit": self.mediastack_settings.limit,
                "sort": "published_desc",
            },
        )
        response = self._parse(MediaStackResponse, payload)

        if not response.data:
            logger.warning(f"[{self.name}] No articles found for {topic.name}")
            return []

        now = self._now()
        articles = [normalize_mediastack_article(record, now) for record in response.data]
        return [article for article in articles if article is not None]
