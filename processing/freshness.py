"""
Freshness Filter
Rejects articles that are undated or older than a topic's freshness tier
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from models import Article
from processing.dates import parse_datetime, utcnow


logger = logging.getLogger(__name__)


def article_age_hours(article: Article, now: Optional[datetime] = None) -> Optional[float]:
    """Age of the article in hours, or None when its timestamp is unusable"""
    published = parse_datetime(article.published_at)
    if published is None:
        return None
    reference = now or utcnow()
    return (reference - published).total_seconds() / 3600.0


def is_fresh(article: Article, max_age_hours: float, now: Optional[datetime] = None) -> bool:
    """
    Check whether an article is usable for a topic.

    Args:
        article: candidate article
        max_age_hours: freshness tier of the topic
        now: reference time (defaults to the current UTC time)

    Returns:
        False for missing or unparsable timestamps and for articles older
        than max_age_hours, True otherwise
    """
    if not article.published_at:
        logger.warning(f"[Freshness] Article missing publishedAt timestamp: {article.title[:50]}")
        return False

    age = article_age_hours(article, now)
    if age is None:
        logger.warning(f"[Freshness] Failed to parse publishedAt for article: {article.title[:50]}")
        return False

    if age > max_age_hours:
        logger.info(
            f"[Freshness] Rejected stale article ({age:.1f}h old, max {max_age_hours}h): {article.title[:60]}"
        )
        return False

    return True


def filter_fresh(
    articles: Sequence[Article],
    max_age_hours: float,
    now: Optional[datetime] = None,
) -> List[Article]:
    """Keep only fresh articles, preserving order"""
    reference = now or utcnow()
    return [article for article in articles if is_fresh(article, max_age_hours, reference)]


def published_sort_key(article: Article) -> float:
    """Epoch seconds of the publish time; undated articles sort as oldest"""
    published = parse_datetime(article.published_at)
    return published.timestamp() if published else 0.0


def sort_newest_first(articles: Sequence[Article]) -> List[Article]:
    return sorted(articles, key=published_sort_key, reverse=True)
