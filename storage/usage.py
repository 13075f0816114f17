"""
Usage Budget Tracker
Persisted per-provider daily call counters for metered news APIs
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Callable, Dict, Optional
import json
import logging

from pydantic import ValidationError

from models import ApiUsage
from utils.exceptions import UsageStoreError


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UsageCounterStore(ABC):
    """
    Storage for {date, count} records keyed by provider name
    """

    @abstractmethod
    def read(self, provider: str) -> Optional[ApiUsage]:
        """Return the stored record, or None when nothing usable is stored"""
        pass

    @abstractmethod
    def write(self, provider: str, usage: ApiUsage) -> None:
        """Persist the record for a provider"""
        pass


class InMemoryUsageStore(UsageCounterStore):
    """
    Dictionary-backed store, for tests and single-process runs
    """

    def __init__(self, initial: Optional[Dict[str, ApiUsage]] = None):
        self._records: Dict[str, ApiUsage] = dict(initial or {})
        self._lock = Lock()

    def read(self, provider: str) -> Optional[ApiUsage]:
        with self._lock:
            record = self._records.get(provider)
            return record.model_copy() if record else None

    def write(self, provider: str, usage: ApiUsage) -> None:
        with self._lock:
            self._records[provider] = usage.model_copy()


class FileUsageStore(UsageCounterStore):
    """
    One JSON file per provider: <directory>/<provider>-usage.json
    """

    def __init__(self, directory: str = "./data"):
        self.directory = Path(directory)

    def _get_path(self, provider: str) -> Path:
        return self.directory / f"{provider}-usage.json"

    def read(self, provider: str) -> Optional[ApiUsage]:
        path = self._get_path(provider)
        if not path.exists():
            return None
        try:
            return self._load(path)
        except UsageStoreError as e:
            logger.warning(f"[Usage] {e}")
            return None

    @staticmethod
    def _load(path: Path) -> ApiUsage:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return ApiUsage.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            raise UsageStoreError(f"Unreadable usage file {path}", {"error": str(e)}) from e

    def write(self, provider: str, usage: ApiUsage) -> None:
        path = self._get_path(provider)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(usage.model_dump(), f, indent=2)
        except OSError as e:
            logger.error(f"[Usage] Failed to update usage tracking for {provider}: {e}")


class UsageBudgetTracker:
    """
    Daily call counters for metered providers.

    Counters reset lazily: a record stored for another day reads as 0 and is
    only overwritten by the next increment. Budgets are advisory; the tracker
    never blocks a call and never raises.
    """

    def __init__(
        self,
        store: UsageCounterStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self._clock = clock

    def today(self) -> str:
        return self._clock().date().isoformat()

    def usage_today(self, provider: str) -> int:
        """Calls made to the provider today"""
        record = self.store.read(provider)
        if record is None or record.date != self.today():
            return 0
        return record.count

    def increment(self, provider: str, daily_limit: Optional[int] = None) -> int:
        """
        Record one call.

        Args:
            provider: provider name
            daily_limit: only used for the log line

        Returns:
            The new count for today
        """
        usage = ApiUsage(date=self.today(), count=self.usage_today(provider) + 1)
        self.store.write(provider, usage)

        if daily_limit:
            logger.info(f"[Usage] {provider}: {usage.count}/{daily_limit} calls today")
        else:
            logger.info(f"[Usage] {provider}: {usage.count} calls today")
        return usage.count

    def has_budget(self, provider: str, daily_limit: int) -> bool:
        return self.usage_today(provider) < daily_limit
