"""
News Aggregator
Adaptive per-topic escalation across providers and the three-phase daily run
"""
import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence
import logging

from rich.console import Console
from rich.table import Table

from config import AggregationSettings, NEWS_TOPICS, Settings, get_settings
from models import Article, NewsContent, Topic
from processing import dedup, filter_fresh, merge_articles, sort_newest_first, utcnow
from scrapers import (
    BaseNewsScraper,
    BraveSearchScraper,
    CurrentsScraper,
    MediaStackScraper,
    NewsAPIScraper,
)
from storage import DailyCacheStore, FileUsageStore, UsageBudgetTracker
from storage.cache import DateLike
from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

BANNER = "=" * 60


class NewsAggregator:
    """
    Multi-source news aggregator.

    Each topic is served by the primary source first; backups are only
    consulted while the merged set is below the coverage target, and the
    metered ones only while their daily budget allows it.
    """

    def __init__(
        self,
        primary: BraveSearchScraper,
        primary_backup: BaseNewsScraper,
        metered_backup: BaseNewsScraper,
        scarce_backup: BaseNewsScraper,
        usage_tracker: UsageBudgetTracker,
        cache_store: DailyCacheStore,
        aggregation: Optional[AggregationSettings] = None,
        topics: Optional[Sequence[Topic]] = None,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            primary: Brave Search, always queried
            primary_backup: NewsAPI, queried when short on coverage
            metered_backup: CurrentsAPI, daily budget plus flagship sampling
            scarce_backup: MediaStack, strict daily cap
            usage_tracker: daily counters of the metered providers
            cache_store: daily result cache
            aggregation: thresholds, batch size and phase delays
            topics: catalog to aggregate (defaults to NEWS_TOPICS)
            clock: reference time for freshness checks
            sleep: awaitable used for phase delays
        """
        self.primary = primary
        self.primary_backup = primary_backup
        self.metered_backup = metered_backup
        self.scarce_backup = scarce_backup
        self.usage_tracker = usage_tracker
        self.cache_store = cache_store
        self.aggregation = aggregation or get_settings().aggregation
        if self.aggregation.max_concurrent_topics < 1:
            raise ConfigurationError("max_concurrent_topics must be at least 1")
        if self.aggregation.min_articles_per_topic > self.aggregation.max_articles_per_topic:
            raise ConfigurationError(
                "min_articles_per_topic cannot exceed max_articles_per_topic",
                {
                    "min_articles_per_topic": self.aggregation.min_articles_per_topic,
                    "max_articles_per_topic": self.aggregation.max_articles_per_topic,
                },
            )
        self.topics: List[Topic] = list(topics if topics is not None else NEWS_TOPICS)
        self._clock = clock
        self._sleep = sleep

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleep(seconds)

    def _usage(self, source: BaseNewsScraper) -> int:
        return self.usage_tracker.usage_today(source.source_type.value)

    def _has_budget(self, source: BaseNewsScraper, limit: int) -> bool:
        return self.usage_tracker.has_budget(source.source_type.value, limit)

    @staticmethod
    def _integrate(
        topic: Topic,
        result: NewsContent,
        source: BaseNewsScraper,
        merged: List[Article],
        contributions: Dict[str, int],
    ) -> None:
        if not result.articles:
            logger.info(f"[Escalation] {source.name} returned no usable articles for {topic.name}")
            return
        added = merge_articles(merged, result.articles, source.name, contributions)
        logger.info(f"[Escalation] {source.name} contributed {added} new article(s) for {topic.name}")

    async def scrape_news(self, topic: Topic) -> NewsContent:
        """
        Collect one topic, escalating through the providers.

        Returns:
            Up to max_articles_per_topic fresh articles, newest first; an
            empty NewsContent when nothing fresh was found
        """
        logger.info(f"[Escalation] Fetching news for: {topic.name}")
        minimum = self.aggregation.min_articles_per_topic

        merged: List[Article] = []
        contributions: Dict[str, int] = {}

        self._integrate(topic, await self.primary.fetch(topic), self.primary, merged, contributions)

        if len(merged) < minimum:
            self._integrate(
                topic, await self.primary_backup.fetch(topic), self.primary_backup, merged, contributions
            )
        else:
            logger.info(
                f"[Escalation] Skipping {self.primary_backup.name} for {topic.name} "
                f"- already have {len(merged)} articles"
            )

        metered = self.metered_backup
        metered_budget = metered.daily_limit or 0
        sample_metered = (len(merged) < minimum and self._has_budget(metered, metered_budget)) or (
            topic.name == self.aggregation.flagship_topic
            and self._has_budget(metered, metered.daily_minimum)
        )
        if sample_metered:
            self._integrate(topic, await metered.fetch(topic), metered, merged, contributions)
        else:
            logger.info(
                f"[Escalation] Skipping {metered.name} for {topic.name} "
                f"- usage {self._usage(metered)}/{metered_budget}"
            )

        scarce = self.scarce_backup
        scarce_limit = scarce.daily_limit or 0
        if len(merged) >= minimum:
            logger.info(
                f"[Escalation] Skipping {scarce.name} for {topic.name} "
                f"- already satisfied with {len(merged)} article(s)"
            )
        elif self._has_budget(scarce, scarce_limit):
            self._integrate(topic, await scarce.fetch(topic), scarce, merged, contributions)
        else:
            logger.info(
                f"[Escalation] Skipping {scarce.name} for {topic.name} "
                f"- usage {self._usage(scarce)}/{scarce_limit}"
            )

        if not merged:
            logger.error(f"[Escalation] {topic.name} - No articles from any source")
            return NewsContent(topic=topic.name, articles=[])

        fresh = filter_fresh(merged, topic.freshness_hours, self._clock())
        if not fresh:
            logger.warning(
                f"[Escalation] {topic.name} - All {len(merged)} articles filtered as stale "
                f"(>{topic.freshness_hours}h)"
            )
            return NewsContent(topic=topic.name, articles=[])

        selected = sort_newest_first(fresh)[: self.aggregation.max_articles_per_topic]

        contribution_log = ", ".join(f"{name}:{count}" for name, count in contributions.items()) or "none"
        logger.info(
            f"[Escalation] {topic.name} - {len(merged)} unique -> {len(fresh)} fresh -> "
            f"top {len(selected)} selected ({contribution_log})"
        )
        return NewsContent(topic=topic.name, articles=selected)

    async def _scrape_topic_safely(self, topic: Topic) -> NewsContent:
        try:
            return await self.scrape_news(topic)
        except Exception as e:
            logger.error(f"[Phase 1] Error scraping news for {topic.name}: {e}")
            return NewsContent(topic=topic.name, articles=[])

    async def retry_with_fallback_query(self, topic: Topic) -> NewsContent:
        """Run the escalation again with the topic's simplified query"""
        if not topic.fallback_query:
            logger.info(f"[Retry] No fallback query available for {topic.name}")
            return NewsContent(topic=topic.name, articles=[])

        logger.info(f"[Retry] Attempting {topic.name} with simplified query: \"{topic.fallback_query}\"")
        return await self.scrape_news(topic.with_query(topic.fallback_query))

    async def targeted_fallback(self, topic: Topic) -> NewsContent:
        """
        Weekly-window primary search for a topic missing from recent reports.

        Freshness is relaxed to at least targeted_freshness_hours; the result
        is deduplicated, filtered, sorted and capped like a regular topic.
        """
        window = max(topic.freshness_hours, self.aggregation.targeted_freshness_hours)
        content = await self.primary.fetch_relaxed(topic)

        fresh = filter_fresh(dedup(content.articles), window, self._clock())
        selected = sort_newest_first(fresh)[: self.aggregation.max_articles_per_topic]

        if selected:
            logger.info(f"[Targeted Fallback] Found {len(selected)} articles for {topic.name}")
        return NewsContent(topic=topic.name, articles=selected)

    async def scrape_all_news(
        self,
        force_refresh: bool = False,
        underrepresented_topics: Optional[Iterable[str]] = None,
    ) -> List[NewsContent]:
        """
        Produce today's news set.

        Args:
            force_refresh: skip the cache read
            underrepresented_topics: topic names missing from recent reports;
                still-failed ones get a targeted search in Phase 3

        Returns:
            Non-empty NewsContent entries in discovery order
        """
        if not force_refresh:
            cached = self.cache_store.read()
            if cached:
                logger.info("[Cache] Using cached news data - no API calls made")
                return cached

        underrepresented = set(underrepresented_topics or [])
        total = len(self.topics)
        results: List[NewsContent] = []
        failed: List[Topic] = []

        logger.info(f"{BANNER}  STARTING MULTI-SOURCE NEWS AGGREGATION  {BANNER}")

        # Phase 1: concurrent batches
        batch_size = self.aggregation.max_concurrent_topics
        for start in range(0, total, batch_size):
            batch = self.topics[start:start + batch_size]
            contents = await asyncio.gather(*(self._scrape_topic_safely(topic) for topic in batch))

            for topic, content in zip(batch, contents):
                if content.articles:
                    results.append(content)
                else:
                    failed.append(topic)

            if start + batch_size < total:
                await self._pause(self.aggregation.batch_delay)

        logger.info(f"[Phase 1 Complete] {len(results)}/{total} topics successful, {len(failed)} failed")

        # Phase 2: sequential retries with simplified queries
        if failed:
            logger.info(f"[Phase 2] Retrying {len(failed)} failed topics with simplified queries...")
            await self._pause(self.aggregation.retry_cooldown)

            for topic in list(failed):
                if not topic.fallback_query:
                    logger.info(f"[Retry] No fallback query available for {topic.name}")
                    continue
                try:
                    content = await self.retry_with_fallback_query(topic)
                except Exception as e:
                    logger.error(f"[Retry] Error retrying {topic.name}: {e}")
                    continue

                if content.articles:
                    results.append(content)
                    failed.remove(topic)
                await self._pause(self.aggregation.retry_delay)

            logger.info(f"[Phase 2 Complete] {len(results)}/{total} topics now successful")

        # Phase 3: targeted search for chronically missing topics
        missing = [topic for topic in failed if topic.name in underrepresented]
        if missing:
            targets = missing[: self.aggregation.max_targeted_topics]
            logger.info(f"[Phase 3] Targeted fallback for {len(targets)} underrepresented topics...")
            await self._pause(self.aggregation.targeted_cooldown)

            for topic in targets:
                try:
                    content = await self.targeted_fallback(topic)
                except Exception as e:
                    logger.error(f"[Targeted Fallback] Error for {topic.name}: {e}")
                    continue

                if content.articles:
                    results.append(content)
                    failed.remove(topic)
                await self._pause(self.aggregation.targeted_delay)

            logger.info(f"[Phase 3 Complete] Final count: {len(results)}/{total} topics successful")

        logger.info(f"{BANNER}  AGGREGATION COMPLETE: {len(results)}/{total} topics successful  {BANNER}")

        self.cache_store.write(results)
        return results

    async def aggregate(
        self,
        force_refresh: bool = False,
        underrepresented_topics: Optional[Iterable[str]] = None,
    ) -> List[NewsContent]:
        """Public entry point for callers that produce the daily report"""
        return await self.scrape_all_news(
            force_refresh=force_refresh,
            underrepresented_topics=underrepresented_topics,
        )

    def clear_cache(self, day: DateLike = None) -> bool:
        return self.cache_store.clear(day)

    def usage_report(self) -> Dict[str, Dict[str, int]]:
        """Today's counters of the metered providers against their limits"""
        report: Dict[str, Dict[str, int]] = {}
        for source in (self.metered_backup, self.scarce_backup):
            report[source.source_type.value] = {
                "count": self._usage(source),
                "daily_limit": source.daily_limit or 0,
            }
        return report


def print_summary(results: Sequence[NewsContent], topics: Sequence[Topic], console: Optional[Console] = None) -> None:
    """Render per-topic coverage as a table"""
    console = console or Console(stderr=True)
    covered = {content.topic: content for content in results}

    table = Table(title="News Aggregation Summary", show_header=True)
    table.add_column("Topic", style="cyan")
    table.add_column("Articles", justify="right", style="green")
    table.add_column("Sources", style="magenta")

    for topic in topics:
        content = covered.get(topic.name)
        if content is None:
            table.add_row(topic.name, "[red]0[/red]", "")
            continue
        sources = ", ".join(dict.fromkeys(article.source for article in content.articles))
        table.add_row(topic.name, str(len(content.articles)), sources)

    table.add_row("", "", "")
    table.add_row("[bold]Covered[/bold]", f"[bold]{len(covered)}/{len(topics)}[/bold]", "")

    console.print()
    console.print(table)
    console.print()


def build_aggregator(settings: Optional[Settings] = None, **scraper_kwargs) -> NewsAggregator:
    """
    Wire adapters, usage tracker and cache from configuration.

    Extra keyword arguments (e.g. an httpx transport) are passed to every
    adapter.
    """
    settings = settings or get_settings()

    tracker = UsageBudgetTracker(FileUsageStore(settings.storage.usage_dir))
    cache = DailyCacheStore(
        cache_dir=settings.storage.cache_dir,
        min_topics=settings.storage.min_topics_for_cache,
        fallback_to_latest=settings.storage.cache_fallback_to_latest,
    )

    common = dict(general=settings.general, usage_tracker=tracker, **scraper_kwargs)
    return NewsAggregator(
        primary=BraveSearchScraper(settings.brave, **common),
        primary_backup=NewsAPIScraper(settings.newsapi, **common),
        metered_backup=CurrentsScraper(settings.currents, **common),
        scarce_backup=MediaStackScraper(settings.mediastack, **common),
        usage_tracker=tracker,
        cache_store=cache,
        aggregation=settings.aggregation,
    )
