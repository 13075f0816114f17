"""
Scrapers Module
One adapter per news provider behind a common fetch contract
"""
from .base import BaseNewsScraper
from .brave_scraper import BraveSearchScraper, normalize_brave_result
from .newsapi_scraper import NewsAPIScraper, normalize_newsapi_article
from .currents_scraper import CurrentsScraper, normalize_currents_article
from .mediastack_scraper import MediaStackScraper, normalize_mediastack_article

__all__ = [
    # Base
    "BaseNewsScraper",
    # Brave Search (primary)
    "BraveSearchScraper",
    "normalize_brave_result",
    # NewsAPI (primary backup)
    "NewsAPIScraper",
    "normalize_newsapi_article",
    # CurrentsAPI (metered backup)
    "CurrentsScraper",
    "normalize_currents_article",
    # MediaStack (scarce backup)
    "MediaStackScraper",
    "normalize_mediastack_article",
]
