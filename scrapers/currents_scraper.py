"""
CurrentsAPI Scraper
Metered backup source (free tier: 600 requests/month)
API docs: https://currentsapi.services/en/docs/
"""
from datetime import datetime, timedelta
from typing import List, Optional
import logging

from .base import BaseNewsScraper
from config import CurrentsSettings, GeneralSettings, get_settings
from models import Article, CurrentsArticle, CurrentsResponse, SourceType, Topic
from processing.dates import resolve_timestamp


logger = logging.getLogger(__name__)

DEFAULT_CURRENTS_SOURCE = "Currents News"


def _rfc3339(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def normalize_currents_article(record: CurrentsArticle, now: datetime) -> Optional[Article]:
    """Map one CurrentsAPI article; the author doubles as source"""
    title = (record.title or "").strip()
    description = (record.description or "").strip()

    if len(title) <= 10 or len(description) <= 30:
        return None

    # Currents publishes "YYYY-MM-DD HH:MM:SS +0000"
    published_at = resolve_timestamp(record.published, now)
    if not published_at:
        return None

    return Article(
        title=title,
        summary=description,
        source=(record.author or "").strip() or DEFAULT_CURRENTS_SOURCE,
        url=(record.url or "").strip() or None,
        published_at=published_at,
    )


class CurrentsScraper(BaseNewsScraper):
    """
    CurrentsAPI keyword search.

    Every request counts against a daily budget (monthly quota / 30); the
    window is sent as an RFC 3339 `start_date`.
    """

    API_URL = "https://api.currentsapi.services/v1/search"

    metered = True

    def __init__(
        self,
        settings: Optional[CurrentsSettings] = None,
        general: Optional[GeneralSettings] = None,
        **kwargs,
    ):
        self.currents_settings = settings or get_settings().currents
        super().__init__(
            api_key=self.currents_settings.api_key,
            timeout=self.currents_settings.timeout,
            general=general,
            **kwargs,
        )
        self.daily_limit = self.currents_settings.daily_budget
        self.daily_minimum = self.currents_settings.daily_minimum

    @property
    def source_type(self) -> SourceType:
        return SourceType.CURRENTS

    @property
    def name(self) -> str:
        return "CurrentsAPI"

    async def _fetch_articles(self, topic: Topic) -> List[Article]:
        now = self._now()
        start_date = now - timedelta(hours=topic.freshness_hours)

        payload = await self._request_json(
            self.API_URL,
            params={
                "keywords": topic.query,
                "start_date": _rfc3339(start_date),
                "language": "en",
                "apiKey": self.api_key,
            },
        )
        response = self._parse(CurrentsResponse, payload)

        if not response.news:
            logger.warning(f"[{self.name}] No articles found for {topic.name}")
            return []

        articles = [normalize_currents_article(record, now) for record in response.news]
        return [article for article in articles if article is not None]
