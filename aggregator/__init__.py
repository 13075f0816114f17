"""
Aggregator Module
Per-topic escalation and the daily multi-phase run
"""
from .news_aggregator import NewsAggregator, build_aggregator, print_summary

__all__ = [
    "NewsAggregator",
    "build_aggregator",
    "print_summary",
]
