"""
Base Scraper
Abstract base class and shared HTTP/retry helper for every news source
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar
import logging

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from config import GeneralSettings, get_settings
from models import Article, NewsContent, SourceType, Topic
from processing.dates import utcnow
from storage.usage import UsageBudgetTracker
from utils.exceptions import (
    ClientError,
    MissingCredentialError,
    RateLimitedError,
    ServerError,
    SourceError,
    SourceTimeoutError,
    UnparsableResponseError,
)


logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, SourceError) and error.retryable


class BaseNewsScraper(ABC):
    """
    News source base class.

    `fetch(topic)` is the only contract the aggregator relies on: it always
    returns a NewsContent and never raises. Subclasses build the provider
    request in `_fetch_articles` and normalize records with a module-level
    mapping function.
    """

    # Metered providers count every request against a daily budget
    metered: bool = False
    daily_limit: Optional[int] = None
    daily_minimum: int = 0

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        general: Optional[GeneralSettings] = None,
        usage_tracker: Optional[UsageBudgetTracker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            api_key: provider credential; None disables the source
            timeout: per-request timeout budget in seconds
            general: retry and capping settings (defaults to global settings)
            usage_tracker: counter store for metered providers
            transport: httpx transport override (tests use MockTransport)
            clock: source of "now" for query windows and relative ages
        """
        self.api_key = (api_key or "").strip() or None
        self.timeout = timeout
        self.general = general or get_settings().general
        self.usage_tracker = usage_tracker
        self._transport = transport
        self._clock = clock

    @property
    @abstractmethod
    def source_type(self) -> SourceType:
        """Provider identity"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name used in log lines"""
        pass

    @property
    def max_articles(self) -> int:
        return self.general.max_articles_per_source

    def is_configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    async def _fetch_articles(self, topic: Topic) -> List[Article]:
        """
        Query the provider for a topic.

        Raises:
            SourceError subclasses for every failure mode
        """
        pass

    async def fetch(self, topic: Topic) -> NewsContent:
        """Fetch normalized articles for a topic; failures degrade to an empty result"""
        return await self._collect(topic, lambda: self._fetch_articles(topic))

    async def _collect(
        self,
        topic: Topic,
        fetcher: Callable[[], Awaitable[List[Article]]],
    ) -> NewsContent:
        empty = NewsContent(topic=topic.name, articles=[])

        try:
            if not self.is_configured():
                raise MissingCredentialError("API key not configured", source=self.name)
            articles = await fetcher()
        except MissingCredentialError:
            logger.error(f"[{self.name}] API key not configured - skipping {topic.name}")
            return empty
        except RateLimitedError:
            logger.warning(f"[{self.name}] Rate limit hit for {topic.name}")
            return empty
        except SourceTimeoutError:
            logger.error(f"[{self.name}] Timeout fetching {topic.name}")
            return empty
        except ClientError as e:
            logger.error(f"[{self.name}] Error for {topic.name}: {e}")
            return empty
        except ServerError as e:
            logger.error(
                f"[{self.name}] Failed to fetch {topic.name} after {self.general.max_retries} retries: {e}"
            )
            return empty
        except UnparsableResponseError as e:
            logger.error(f"[{self.name}] Unparsable response for {topic.name}: {e}")
            return empty
        except SourceError as e:
            logger.error(f"[{self.name}] Error fetching {topic.name}: {e}")
            return empty
        except Exception as e:
            logger.error(f"[{self.name}] Error fetching {topic.name}: {type(e).__name__}: {e}")
            return empty

        selected = list(articles)[: self.max_articles]
        if not selected:
            logger.warning(f"[{self.name}] No valid articles after filtering for {topic.name}")
            return empty

        logger.info(f"[{self.name}] Successfully fetched {len(selected)} articles for {topic.name}")
        return NewsContent(topic=topic.name, articles=selected)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.general.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.general.retry_backoff_base,
                max=self.general.retry_backoff_max,
            ),
            retry=retry_if_exception(_is_retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.info(
            f"[{self.name}] Retry {retry_state.attempt_number}/{self.general.max_retries} "
            f"after {delay:.1f}s: {error}"
        )

    async def _request_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        GET a JSON document, retrying transient failures with exponential backoff.

        5xx answers, timeouts and transport errors are retried; 429 and other
        4xx answers are terminal.
        """
        async for attempt in self._retrying():
            with attempt:
                return await self._send_once(url, params=params, headers=headers)

    async def _send_once(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        request_headers = {"User-Agent": self.general.user_agent}
        request_headers.update(headers or {})

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(url, params=params, headers=request_headers)
            except httpx.TimeoutException as e:
                raise SourceTimeoutError(f"Request timed out after {self.timeout}s", source=self.name) from e
            except httpx.HTTPError as e:
                raise SourceError(f"Request failed: {e}", source=self.name) from e

        self._record_usage()
        return self._classify(response)

    def _record_usage(self) -> None:
        if self.metered and self.usage_tracker is not None:
            self.usage_tracker.increment(self.source_type.value, self.daily_limit)

    def _classify(self, response: httpx.Response) -> Any:
        status = response.status_code
        if status == 429:
            raise RateLimitedError("Rate limit exceeded", source=self.name)
        if status >= 500:
            raise ServerError(f"Server error: {status}", source=self.name, status_code=status)
        if status >= 400:
            raise ClientError(
                f"HTTP {status}: {response.text[:300]}",
                source=self.name,
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UnparsableResponseError("Response is not valid JSON", source=self.name) from e

    def _parse(self, model: Type[R], payload: Any) -> R:
        """Validate a payload against the provider's typed response record"""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise UnparsableResponseError(
                f"Unexpected {model.__name__} shape",
                source=self.name,
                errors=e.error_count(),
            ) from e

    def _now(self) -> datetime:
        return self._clock()
