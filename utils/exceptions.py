"""
Custom Exceptions
Error taxonomy for news sources and storage
"""


class NewsAggregatorError(Exception):
    """Base exception for the news aggregator"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NewsAggregatorError):
    """Invalid or incomplete configuration"""
    pass


class SourceError(NewsAggregatorError):
    """
    Failure talking to a news provider.
    `retryable` marks transient failures eligible for backoff retries.
    """

    retryable = True

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class MissingCredentialError(SourceError):
    """Provider API key is not configured"""
    retryable = False


class RateLimitedError(SourceError):
    """Provider answered HTTP 429"""
    retryable = False


class ServerError(SourceError):
    """Provider answered HTTP 5xx"""

    def __init__(self, message: str, source: str = None, status_code: int = None, **kwargs):
        super().__init__(message, source, status_code=status_code, **kwargs)
        self.status_code = status_code


class ClientError(SourceError):
    """Provider answered a 4xx other than 429"""
    retryable = False

    def __init__(self, message: str, source: str = None, status_code: int = None, **kwargs):
        super().__init__(message, source, status_code=status_code, **kwargs)
        self.status_code = status_code


class SourceTimeoutError(SourceError):
    """Request exceeded the provider timeout budget"""
    pass


class UnparsableResponseError(SourceError):
    """Response body is not the JSON shape the provider documents"""
    retryable = False


class StorageError(NewsAggregatorError):
    """Storage error"""
    pass


class CacheError(StorageError):
    """Daily cache read/write error"""
    pass


class UsageStoreError(StorageError):
    """Usage counter persistence error"""
    pass
