"""
Daily Cache
File-backed store of one aggregation result per calendar day
"""
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union
import json
import logging

from pydantic import ValidationError

from models import NewsContent
from utils.exceptions import CacheError


logger = logging.getLogger(__name__)

CACHE_FILE_PREFIX = "news-"
CACHE_FILE_SUFFIX = ".json"

DateLike = Union[date, datetime, str, None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DailyCacheStore:
    """
    Disk cache keyed by calendar date (news-YYYY-MM-DD.json).

    An entry is only trusted when it covers at least `min_topics` topics;
    smaller results are neither written nor served.
    """

    def __init__(
        self,
        cache_dir: str = "./cache",
        min_topics: int = 5,
        fallback_to_latest: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize the cache.

        Args:
            cache_dir: directory holding the daily files
            min_topics: minimum entries for a usable cache
            fallback_to_latest: when the requested day is missing, serve the
                most recent file instead (interactive / testing mode)
            clock: source of "today"
        """
        self.cache_dir = Path(cache_dir)
        self.min_topics = min_topics
        self.fallback_to_latest = fallback_to_latest
        self._clock = clock

    def _date_key(self, day: DateLike) -> str:
        if day is None:
            return self._clock().date().isoformat()
        if isinstance(day, datetime):
            return day.astimezone(timezone.utc).date().isoformat()
        if isinstance(day, date):
            return day.isoformat()
        return date.fromisoformat(str(day)).isoformat()

    def get_path(self, day: DateLike = None) -> Path:
        return self.cache_dir / f"{CACHE_FILE_PREFIX}{self._date_key(day)}{CACHE_FILE_SUFFIX}"

    def latest_cache_file(self) -> Optional[Path]:
        """Most recent cache file by date in its name"""
        if not self.cache_dir.is_dir():
            return None
        files = sorted(self.cache_dir.glob(f"{CACHE_FILE_PREFIX}*{CACHE_FILE_SUFFIX}"), reverse=True)
        return files[0] if files else None

    @staticmethod
    def _load(path: Path) -> List[NewsContent]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if not isinstance(payload, list):
                raise ValueError("cache payload is not a list")
            return [NewsContent.model_validate(item) for item in payload]
        except (OSError, ValueError, ValidationError) as e:
            raise CacheError(f"Unreadable cache {path}", {"error": str(e)}) from e

    def read(self, day: DateLike = None) -> Optional[List[NewsContent]]:
        """
        Load the entry for a day.

        Returns:
            The cached topics, or None when the file is missing, unparsable
            or below the coverage threshold
        """
        path = self.get_path(day)

        if not path.exists() and self.fallback_to_latest:
            logger.info("[Cache] Today's cache not found, looking for most recent cache...")
            latest = self.latest_cache_file()
            if latest is not None:
                logger.info(f"[Cache] Using most recent cache: {latest.name}")
                path = latest

        if not path.exists():
            logger.info(f"[Cache] Miss for {path} - fetching fresh data")
            return None

        try:
            entries = self._load(path)
        except CacheError as e:
            logger.warning(f"[Cache] {e}")
            return None

        if len(entries) < self.min_topics:
            logger.warning(
                f"[Cache] Cache has insufficient coverage ({len(entries)}/{self.min_topics} topics) "
                "- fetching fresh data"
            )
            return None

        logger.info(f"[Cache] Loaded {len(entries)} topics from cache ({path})")
        return entries

    def write(self, entries: Sequence[NewsContent], day: DateLike = None) -> bool:
        """
        Save the entry for a day.

        Returns:
            True when the file was written; False for results below the
            coverage threshold (a failed run gets another chance next time)
            or on I/O errors
        """
        if len(entries) < self.min_topics:
            logger.warning(
                f"[Cache] Not caching insufficient data ({len(entries)}/{self.min_topics} topics) "
                "- will retry on next request"
            )
            return False

        path = self.get_path(day)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump([entry.to_json_dict() for entry in entries], f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"[Cache] Error writing cache {path}: {e}")
            return False

        logger.info(f"[Cache] Saved {len(entries)} topics to cache ({path})")
        return True

    def clear(self, day: DateLike = None) -> bool:
        """Delete the file for a day if present; errors are logged, not raised"""
        try:
            path = self.get_path(day)
        except ValueError as e:
            logger.warning(f"[Cache] Invalid cache date {day!r}: {e}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.info(f"[Cache] No cache to clear ({path})")
            return False
        except OSError as e:
            logger.warning(f"[Cache] Could not clear cache {path}: {e}")
            return False

        logger.info(f"[Cache] Cleared cache ({path})")
        return True
