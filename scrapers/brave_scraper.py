"""
Brave Search Scraper
Primary news source (generous free tier, ~2,000 queries/month)
API docs: https://api.search.brave.com/app/documentation/web-search
"""
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse
import logging

from .base import BaseNewsScraper
from config import BraveSearchSettings, GeneralSettings, get_settings
from models import Article, BraveSearchResponse, BraveWebResult, NewsContent, SourceType, Topic
from processing.dates import resolve_timestamp, to_iso


logger = logging.getLogger(__name__)

BRAVE_SOURCE_LABEL = "Brave Search"


def _hostname(url: str) -> Optional[str]:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host[4:] if host.startswith("www.") else host


def normalize_brave_result(
    result: BraveWebResult,
    now: datetime,
    *,
    assume_now_when_undated: bool = False,
) -> Optional[Article]:
    """
    Map one Brave web result to an Article.

    The publish time comes from `age` (relative like "3 hours ago", or an
    absolute date) and then `page_age`. Undated results are dropped unless
    `assume_now_when_undated` is set, which only the targeted fallback search
    does.
    """
    title = (result.title or "").strip()
    description = (result.description or "").strip()
    url = (result.url or "").strip()

    if len(title) <= 10 or len(description) <= 30 or not url:
        return None

    host = _hostname(url)
    if not host and not assume_now_when_undated:
        return None

    published_at = resolve_timestamp(result.age, now) or resolve_timestamp(result.page_age, now)
    if not published_at:
        if not assume_now_when_undated:
            logger.info(
                f"[{BRAVE_SOURCE_LABEL}] Discarded article without parseable timestamp: "
                f"\"{title[:50]}\" (age: {result.age})"
            )
            return None
        published_at = to_iso(now)

    return Article(
        title=title,
        summary=description,
        source=host or BRAVE_SOURCE_LABEL,
        url=url,
        published_at=published_at,
    )


class BraveSearchScraper(BaseNewsScraper):
    """
    Brave web search restricted to the past day.

    Features:
    - credential in the X-Subscription-Token header
    - relative `age` strings converted to absolute timestamps
    - `fetch_relaxed` for the weekly targeted fallback
    """

    API_URL = "https://api.search.brave.com/res/v1/web/search"

    # Brave freshness codes: past day / past week
    FRESHNESS_DAY = "pd"
    FRESHNESS_WEEK = "pw"

    def __init__(
        self,
        settings: Optional[BraveSearchSettings] = None,
        general: Optional[GeneralSettings] = None,
        **kwargs,
    ):
        self.brave_settings = settings or get_settings().brave
        super().__init__(
            api_key=self.brave_settings.api_key,
            timeout=self.brave_settings.timeout,
            general=general,
            **kwargs,
        )

    @property
    def source_type(self) -> SourceType:
        return SourceType.BRAVE

    @property
    def name(self) -> str:
        return BRAVE_SOURCE_LABEL

    async def _search(self, query: str, freshness: str) -> List[BraveWebResult]:
        payload = await self._request_json(
            self.API_URL,
            params={
                "q": query,
                "count": self.brave_settings.result_count,
                "freshness": freshness,
            },
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": self.api_key,
            },
        )
        return self._parse(BraveSearchResponse, payload).results

    async def _fetch_articles(self, topic: Topic) -> List[Article]:
        results = await self._search(topic.query, self.FRESHNESS_DAY)
        if not results:
            logger.warning(f"[{self.name}] No results found for {topic.name}")
            return []

        now = self._now()
        articles = [normalize_brave_result(result, now) for result in results]
        return [article for article in articles if article is not None]

    async def fetch_relaxed(self, topic: Topic) -> NewsContent:
        """
        General search with a weekly window for underrepresented topics.

        Uses the fallback query when present. Results without a derivable
        publish time are stamped with the current time.
        """
        search_query = f"{topic.fallback_query or topic.query} news"
        logger.info(f"[Targeted Fallback] Using {self.name} general search for: {topic.name}")

        async def _relaxed() -> List[Article]:
            results = await self._search(search_query, self.FRESHNESS_WEEK)
            if not results:
                logger.warning(f"[Targeted Fallback] No results found for {topic.name}")
                return []
            now = self._now()
            articles = [
                normalize_brave_result(result, now, assume_now_when_undated=True)
                for result in results
            ]
            return [article for article in articles if article is not None]

        return await self._collect(topic, _relaxed)
