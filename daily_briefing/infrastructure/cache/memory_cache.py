import copy
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from daily_briefing.core.logging import get_logger
from daily_briefing.domain.models import Category

logger = get_logger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """Last fetched payload for a category and when it was stored."""
    data: Optional[Any] = None
    timestamp: int = 0  # unix millis


class BriefingCache:
    """
    In-memory, process-wide cache holding one entry per category.

    Entries expire after a fixed TTL and are overwritten on refresh. There is
    no eviction beyond TTL expiry and the key set is bounded by ``Category``.
    """

    def __init__(self, ttl: int = 3600, clock: Callable[[], int] = _now_millis):
        """
        Initialize the cache with every category empty.

        Args:
            ttl: Time-to-live in seconds
            clock: Callable returning the current unix time in milliseconds
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[Category, CacheEntry] = {
            category: CacheEntry() for category in Category
        }
        self._lock = threading.RLock()

        logger.info(f"Briefing cache initialized with TTL {ttl}s")

    @property
    def ttl_millis(self) -> int:
        return self.ttl * 1000

    def get(self, category: Category) -> CacheEntry:
        """
        Get the entry for a category.

        Args:
            category: Cache category

        Returns:
            A copy of the stored entry; ``data`` is None if never populated
        """
        with self._lock:
            entry = self._entries[category]
            return CacheEntry(data=copy.deepcopy(entry.data), timestamp=entry.timestamp)

    def is_valid(self, entry: CacheEntry) -> bool:
        """
        Check whether an entry is populated and younger than the TTL.

        Args:
            entry: Entry returned by ``get``

        Returns:
            True if the entry can be served without an upstream call
        """
        return entry.data is not None and (self._clock() - entry.timestamp) < self.ttl_millis

    def set(self, category: Category, payload: Any) -> None:
        """
        Store a fully-formed payload for a category, stamped with the current time.

        Args:
            category: Cache category
            payload: Canonical payload for the category
        """
        if payload is None:
            raise ValueError("Cannot cache an empty payload")

        entry = CacheEntry(data=copy.deepcopy(payload), timestamp=self._clock())
        with self._lock:
            self._entries[category] = entry

        logger.debug(f"Set cache entry {category.value} with TTL {self.ttl}s")

    def invalidate(self, category: Category) -> None:
        """Reset a category to empty."""
        with self._lock:
            self._entries[category] = CacheEntry()
        logger.debug(f"Invalidated cache entry {category.value}")

    def clear(self) -> None:
        """Reset every category to empty."""
        with self._lock:
            for category in Category:
                self._entries[category] = CacheEntry()
        logger.info("Cleared all briefing cache entries")

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """
        Describe every entry without exposing payloads.

        Returns:
            Mapping of category name to population, validity and age in seconds
        """
        now = self._clock()
        with self._lock:
            entries = dict(self._entries)

        report = {}
        for category, entry in entries.items():
            populated = entry.data is not None
            report[category.value] = {
                "populated": populated,
                "valid": self.is_valid(entry),
                "age_seconds": round((now - entry.timestamp) / 1000, 1) if populated else None,
            }
        return report
