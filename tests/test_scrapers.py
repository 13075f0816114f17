from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
import pytest

from config import (
    BraveSearchSettings,
    CurrentsSettings,
    GeneralSettings,
    MediaStackSettings,
    NewsAPISettings,
)
from models import BraveWebResult, Topic
from scrapers import (
    BraveSearchScraper,
    CurrentsScraper,
    MediaStackScraper,
    NewsAPIScraper,
    normalize_brave_result,
)
from storage import InMemoryUsageStore, UsageBudgetTracker

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
SUMMARY = "A description that is comfortably longer than thirty characters."
FAST_RETRY = GeneralSettings(max_retries=2, retry_backoff_base=0, retry_backoff_max=0)

NBA = Topic(
    name="NBA",
    query="NBA games highlights players",
    fallback_query="NBA basketball",
    freshness_hours=24,
)


def _clock() -> datetime:
    return NOW


def _transport(handler, seen: list[httpx.Request]) -> httpx.MockTransport:
    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return httpx.MockTransport(_record)


def _brave(handler, seen: list[httpx.Request], api_key: str | None = "brave-key") -> BraveSearchScraper:
    return BraveSearchScraper(
        BraveSearchSettings(api_key=api_key),
        general=FAST_RETRY,
        transport=_transport(handler, seen),
        clock=_clock,
    )


def _brave_result(title: str, age: str | None = "2 hours ago", **extra) -> dict:
    result = {
        "title": title,
        "description": SUMMARY,
        "url": f"https://www.reuters.com/{title.lower().replace(' ', '-')}",
        "age": age,
    }
    result.update(extra)
    return result


def _tracker() -> UsageBudgetTracker:
    return UsageBudgetTracker(InMemoryUsageStore(), clock=_clock)


@pytest.mark.asyncio
async def test_brave_normalizes_results_and_sends_subscription_token() -> None:
    seen: list[httpx.Request] = []
    payload = {
        "web": {
            "results": [
                _brave_result("Lakers beat Celtics in overtime thriller"),
                _brave_result("Undated result that must be dropped", age=None),
                _brave_result("Short", age="1 hour ago"),
                _brave_result("Warriors sign veteran guard", age=None, page_age="2026-10-17T08:00:00"),
            ]
        }
    }
    scraper = _brave(lambda request: httpx.Response(200, json=payload), seen)

    content = await scraper.fetch(NBA)

    assert len(seen) == 1
    request = seen[0]
    assert request.headers["X-Subscription-Token"] == "brave-key"
    assert request.url.params["q"] == NBA.query
    assert request.url.params["count"] == "5"
    assert request.url.params["freshness"] == "pd"

    assert [(a.title, a.source, a.published_at) for a in content.articles] == [
        ("Lakers beat Celtics in overtime thriller", "reuters.com", "2026-10-17T10:00:00+00:00"),
        ("Warriors sign veteran guard", "reuters.com", "2026-10-17T08:00:00+00:00"),
    ]


@pytest.mark.asyncio
async def test_brave_keeps_at_most_three_articles() -> None:
    seen: list[httpx.Request] = []
    titles = ["Alpha", "Bravo", "Charlie", "Delta", "Echo"]
    payload = {"web": {"results": [_brave_result(f"{title} headline about the game") for title in titles]}}
    scraper = _brave(lambda request: httpx.Response(200, json=payload), seen)

    content = await scraper.fetch(NBA)

    assert [a.title for a in content.articles] == [
        "Alpha headline about the game",
        "Bravo headline about the game",
        "Charlie headline about the game",
    ]


def test_normalize_brave_result_only_fabricates_time_when_asked() -> None:
    record = BraveWebResult(
        title="Undated weekly roundup article",
        description=SUMMARY,
        url="https://www.example.org/roundup",
    )

    assert normalize_brave_result(record, NOW) is None

    article = normalize_brave_result(record, NOW, assume_now_when_undated=True)
    assert article is not None
    assert article.source == "example.org"
    assert article.published_at == "2026-10-17T12:00:00+00:00"


def test_normalize_brave_result_parses_absolute_age() -> None:
    record = BraveWebResult(
        title="Trade deadline moves recap",
        description=SUMMARY,
        url="https://nba.com/news/recap",
        age="October 15, 2026",
    )

    article = normalize_brave_result(record, NOW)

    assert article is not None
    assert article.source == "nba.com"
    assert article.published_at == "2026-10-15T00:00:00+00:00"


@pytest.mark.asyncio
async def test_brave_skips_results_with_malformed_url_or_age() -> None:
    seen: list[httpx.Request] = []
    payload = {
        "web": {
            "results": [
                _brave_result("Lakers beat Celtics in overtime thriller"),
                _brave_result("Result with a broken host in the link", url="https://[broken/path"),
                _brave_result("Result whose age points before year one", age="1000000 days ago"),
            ]
        }
    }
    scraper = _brave(lambda request: httpx.Response(200, json=payload), seen)

    content = await scraper.fetch(NBA)

    assert [a.title for a in content.articles] == ["Lakers beat Celtics in overtime thriller"]


@pytest.mark.asyncio
async def test_unexpected_errors_degrade_to_empty_result(caplog) -> None:
    seen: list[httpx.Request] = []

    def _explode(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("handler blew up")

    scraper = _brave(_explode, seen)

    with caplog.at_level(logging.ERROR):
        content = await scraper.fetch(NBA)

    assert content.topic == "NBA"
    assert content.articles == []
    assert len(seen) == 1
    assert "Error fetching NBA" in caplog.text


@pytest.mark.asyncio
async def test_brave_relaxed_search_uses_fallback_query_and_weekly_window() -> None:
    seen: list[httpx.Request] = []
    payload = {"web": {"results": [_brave_result("Basketball season preview article", age=None)]}}
    scraper = _brave(lambda request: httpx.Response(200, json=payload), seen)

    content = await scraper.fetch_relaxed(NBA)

    assert seen[0].url.params["q"] == "NBA basketball news"
    assert seen[0].url.params["freshness"] == "pw"
    assert [a.published_at for a in content.articles] == ["2026-10-17T12:00:00+00:00"]


@pytest.mark.asyncio
async def test_rate_limit_is_not_retried() -> None:
    seen: list[httpx.Request] = []
    scraper = _brave(lambda request: httpx.Response(429, json={"error": "quota"}), seen)

    content = await scraper.fetch(NBA)

    assert content.articles == []
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_server_errors_are_retried_twice_then_give_up() -> None:
    seen: list[httpx.Request] = []
    scraper = _brave(lambda request: httpx.Response(503, text="unavailable"), seen)

    content = await scraper.fetch(NBA)

    assert content.articles == []
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_server_error_then_success_returns_articles() -> None:
    seen: list[httpx.Request] = []
    payload = {"web": {"results": [_brave_result("Recovered after one failed attempt")]}}

    def _handler(request: httpx.Request) -> httpx.Response:
        if len(seen) == 1:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json=payload)

    scraper = _brave(_handler, seen)

    content = await scraper.fetch(NBA)

    assert len(seen) == 2
    assert [a.title for a in content.articles] == ["Recovered after one failed attempt"]


@pytest.mark.asyncio
async def test_client_errors_are_not_retried() -> None:
    seen: list[httpx.Request] = []
    scraper = _brave(lambda request: httpx.Response(401, json={"error": "bad token"}), seen)

    content = await scraper.fetch(NBA)

    assert content.articles == []
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_timeouts_are_retried_and_logged_distinctly(caplog) -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    scraper = _brave(_handler, seen)

    with caplog.at_level(logging.ERROR):
        content = await scraper.fetch(NBA)

    assert content.articles == []
    assert len(seen) == 3
    assert "Timeout fetching NBA" in caplog.text


@pytest.mark.asyncio
async def test_missing_credential_makes_no_request() -> None:
    seen: list[httpx.Request] = []
    scraper = _brave(lambda request: httpx.Response(200, json={}), seen, api_key=None)

    content = await scraper.fetch(NBA)

    assert content.articles == []
    assert seen == []


@pytest.mark.asyncio
async def test_unparsable_bodies_yield_empty_results() -> None:
    seen: list[httpx.Request] = []
    scraper = _brave(lambda request: httpx.Response(200, text="<html>not json</html>"), seen)
    assert (await scraper.fetch(NBA)).articles == []
    assert len(seen) == 1

    seen.clear()
    scraper = _brave(lambda request: httpx.Response(200, json={"web": {"results": "oops"}}), seen)
    assert (await scraper.fetch(NBA)).articles == []
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_newsapi_encodes_absolute_window_and_maps_source_name() -> None:
    seen: list[httpx.Request] = []
    payload = {
        "status": "ok",
        "totalResults": 3,
        "articles": [
            {
                "title": "Celtics extend winning streak to nine",
                "description": SUMMARY,
                "url": "https://espn.com/celtics",
                "publishedAt": "2026-10-17T09:15:00Z",
                "source": {"id": "espn", "name": "ESPN"},
            },
            {
                "title": "Article without a timestamp is dropped",
                "description": SUMMARY,
                "url": "https://espn.com/undated",
                "source": {"id": "espn", "name": "ESPN"},
            },
            {
                "title": "Article without a source name is dropped",
                "description": SUMMARY,
                "url": "https://unknown.example/x",
                "publishedAt": "2026-10-17T09:15:00Z",
                "source": {"id": None, "name": None},
            },
        ],
    }
    scraper = NewsAPIScraper(
        NewsAPISettings(api_key="newsapi-key"),
        general=FAST_RETRY,
        transport=_transport(lambda request: httpx.Response(200, json=payload), seen),
        clock=_clock,
    )

    content = await scraper.fetch(NBA)

    params = seen[0].url.params
    assert seen[0].url.host == "newsapi.org"
    assert params["apiKey"] == "newsapi-key"
    assert params["from"] == "2026-10-16T12:00:00+00:00"
    assert params["sortBy"] == "publishedAt"
    assert params["language"] == "en"
    assert params["pageSize"] == "5"
    assert [(a.title, a.source, a.published_at) for a in content.articles] == [
        ("Celtics extend winning streak to nine", "ESPN", "2026-10-17T09:15:00+00:00"),
    ]


@pytest.mark.asyncio
async def test_currents_counts_usage_and_defaults_source() -> None:
    seen: list[httpx.Request] = []
    tracker = _tracker()
    payload = {
        "status": "ok",
        "news": [
            {
                "title": "Nuggets rally past Suns in the fourth",
                "description": SUMMARY,
                "url": "https://currents.example/nuggets",
                "author": "",
                "published": "2026-10-17 07:45:00 +0000",
            }
        ],
    }
    scraper = CurrentsScraper(
        CurrentsSettings(api_key="currents-key"),
        general=FAST_RETRY,
        usage_tracker=tracker,
        transport=_transport(lambda request: httpx.Response(200, json=payload), seen),
        clock=_clock,
    )

    content = await scraper.fetch(NBA)

    params = seen[0].url.params
    assert params["keywords"] == NBA.query
    assert params["start_date"] == "2026-10-16T12:00:00.000Z"
    assert params["language"] == "en"
    assert params["apiKey"] == "currents-key"
    assert [(a.source, a.published_at) for a in content.articles] == [
        ("Currents News", "2026-10-17T07:45:00+00:00"),
    ]
    assert scraper.daily_limit == 20
    assert tracker.usage_today("currents") == 1


@pytest.mark.asyncio
async def test_metered_usage_counts_every_response_but_not_timeouts() -> None:
    seen: list[httpx.Request] = []
    tracker = _tracker()
    failing = CurrentsScraper(
        CurrentsSettings(api_key="currents-key"),
        general=FAST_RETRY,
        usage_tracker=tracker,
        transport=_transport(lambda request: httpx.Response(500, text="boom"), seen),
        clock=_clock,
    )
    await failing.fetch(NBA)
    assert tracker.usage_today("currents") == 3

    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    timing_out = CurrentsScraper(
        CurrentsSettings(api_key="currents-key"),
        general=FAST_RETRY,
        usage_tracker=tracker,
        transport=_transport(_timeout, seen),
        clock=_clock,
    )
    await timing_out.fetch(NBA)
    assert tracker.usage_today("currents") == 3


@pytest.mark.asyncio
async def test_mediastack_uses_plain_http_and_access_key() -> None:
    seen: list[httpx.Request] = []
    tracker = _tracker()
    payload = {
        "data": [
            {
                "title": "Knicks guard returns from injury",
                "description": SUMMARY,
                "url": "https://mediastack.example/knicks",
                "source": "New York Post",
                "published_at": "2026-10-17T06:00:00+00:00",
            }
        ]
    }
    scraper = MediaStackScraper(
        MediaStackSettings(api_key="mediastack-key"),
        general=FAST_RETRY,
        usage_tracker=tracker,
        transport=_transport(lambda request: httpx.Response(200, json=payload), seen),
        clock=_clock,
    )

    content = await scraper.fetch(NBA)

    url = seen[0].url
    assert url.scheme == "http"
    assert url.host == "api.mediastack.com"
    assert url.params["access_key"] == "mediastack-key"
    assert url.params["sort"] == "published_desc"
    assert url.params["languages"] == "en"
    assert [a.source for a in content.articles] == ["New York Post"]
    assert tracker.usage_today("mediastack") == 1


@pytest.mark.asyncio
async def test_unconfigured_metered_source_does_not_consume_budget() -> None:
    seen: list[httpx.Request] = []
    tracker = _tracker()
    scraper = MediaStackScraper(
        MediaStackSettings(api_key=None),
        general=FAST_RETRY,
        usage_tracker=tracker,
        transport=_transport(lambda request: httpx.Response(200, json={"data": []}), seen),
        clock=_clock,
    )

    content = await scraper.fetch(NBA)

    assert content.articles == []
    assert seen == []
    assert tracker.usage_today("mediastack") == 0
