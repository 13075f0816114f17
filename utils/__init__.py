"""
Utils Module
Logging and error taxonomy
"""
from .logger import setup_logger, get_logger, configure_package_logging
from .exceptions import (
    NewsAggregatorError,
    ConfigurationError,
    SourceError,
    MissingCredentialError,
    RateLimitedError,
    ServerError,
    ClientError,
    SourceTimeoutError,
    UnparsableResponseError,
    StorageError,
    CacheError,
    UsageStoreError,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "configure_package_logging",
    "NewsAggregatorError",
    "ConfigurationError",
    "SourceError",
    "MissingCredentialError",
    "RateLimitedError",
    "ServerError",
    "ClientError",
    "SourceTimeoutError",
    "UnparsableResponseError",
    "StorageError",
    "CacheError",
    "UsageStoreError",
]
