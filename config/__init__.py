"""
Configuration Management Module
Settings tree and the static topic catalog
"""
from .settings import (
    Settings,
    BraveSearchSettings,
    NewsAPISettings,
    CurrentsSettings,
    MediaStackSettings,
    GeneralSettings,
    AggregationSettings,
    StorageSettings,
    get_settings,
)
from .topics import FreshnessTier, NEWS_TOPICS, get_topic

__all__ = [
    "Settings",
    "BraveSearchSettings",
    "NewsAPISettings",
    "CurrentsSettings",
    "MediaStackSettings",
    "GeneralSettings",
    "AggregationSettings",
    "StorageSettings",
    "get_settings",
    "FreshnessTier",
    "NEWS_TOPICS",
    "get_topic",
]
