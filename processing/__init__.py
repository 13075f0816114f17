"""
Processing Module
Timestamp parsing, freshness filtering and deduplication
"""
from .dates import (
    parse_datetime,
    parse_relative_age,
    resolve_timestamp,
    to_iso,
    utcnow,
)
from .freshness import (
    article_age_hours,
    is_fresh,
    filter_fresh,
    published_sort_key,
    sort_newest_first,
)
from .dedup import normalize_title, is_duplicate, merge_articles, dedup

__all__ = [
    # Dates
    "parse_datetime",
    "parse_relative_age",
    "resolve_timestamp",
    "to_iso",
    "utcnow",
    # Freshness
    "article_age_hours",
    "is_fresh",
    "filter_fresh",
    "published_sort_key",
    "sort_newest_first",
    # Dedup
    "normalize_title",
    "is_duplicate",
    "merge_articles",
    "dedup",
]
