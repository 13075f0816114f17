from __future__ import annotations

from config import (
    NEWS_TOPICS,
    CurrentsSettings,
    FreshnessTier,
    NewsAPISettings,
    Settings,
    StorageSettings,
    get_topic,
)
from aggregator import build_aggregator
from scrapers import BraveSearchScraper, CurrentsScraper, MediaStackScraper, NewsAPIScraper
from storage import FileUsageStore


def test_currents_daily_budget_derives_from_monthly_quota(monkeypatch) -> None:
    monkeypatch.setenv("CURRENTS_MONTHLY_LIMIT", "900")

    assert CurrentsSettings().daily_budget == 30
    assert CurrentsSettings(monthly_limit=600).daily_budget == 20


def test_newsapi_key_accepts_both_env_names(monkeypatch) -> None:
    monkeypatch.delenv("NEWSAPI_API_KEY", raising=False)
    monkeypatch.setenv("NEWSAPI_KEY", "from-env")
    assert NewsAPISettings().api_key == "from-env"

    monkeypatch.delenv("NEWSAPI_KEY")
    monkeypatch.setenv("NEWSAPI_API_KEY", "alternate")
    assert NewsAPISettings().api_key == "alternate"


def test_storage_settings_read_prefixed_env(monkeypatch) -> None:
    monkeypatch.setenv("STORAGE_CACHE_FALLBACK_TO_LATEST", "true")
    monkeypatch.setenv("STORAGE_MIN_TOPICS_FOR_CACHE", "7")

    storage = StorageSettings()

    assert storage.cache_fallback_to_latest is True
    assert storage.min_topics_for_cache == 7


def test_topic_catalog_is_unique_and_tiered() -> None:
    names = [topic.name for topic in NEWS_TOPICS]

    assert len(NEWS_TOPICS) == 13
    assert len(set(names)) == len(names)
    assert all(topic.fallback_query for topic in NEWS_TOPICS)
    assert {topic.freshness_hours for topic in NEWS_TOPICS} == {FreshnessTier.BREAKING, FreshnessTier.TECH}
    assert get_topic("World News").freshness_hours == 24
    assert get_topic("Humanoid Robots").freshness_hours == 120
    assert get_topic("Unknown") is None


def test_build_aggregator_wires_sources_from_settings(tmp_path) -> None:
    settings = Settings(
        storage=StorageSettings(cache_dir=str(tmp_path / "cache"), usage_dir=str(tmp_path / "data")),
        currents=CurrentsSettings(api_key="currents-key", monthly_limit=600),
    )

    aggregator = build_aggregator(settings)

    assert isinstance(aggregator.primary, BraveSearchScraper)
    assert isinstance(aggregator.primary_backup, NewsAPIScraper)
    assert isinstance(aggregator.metered_backup, CurrentsScraper)
    assert isinstance(aggregator.scarce_backup, MediaStackScraper)
    assert aggregator.metered_backup.daily_limit == 20
    assert aggregator.metered_backup.daily_minimum == 1
    assert aggregator.scarce_backup.daily_limit == 3
    assert aggregator.metered_backup.is_configured()
    assert isinstance(aggregator.usage_tracker.store, FileUsageStore)
    assert aggregator.cache_store.cache_dir == tmp_path / "cache"
    assert aggregator.topics == NEWS_TOPICS
