"""
Query cache for merged search results.

Keyed by the exact trimmed query string. Unbounded with no expiry unless an
eviction policy is configured.
"""

import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from catalog_core.models import ResultRecord


class QueryCache:
    """
    Mapping from query string to its merged, ordered result list.

    Attributes:
        max_entries: Least recently used entries beyond this count are evicted
        ttl_seconds: Entries older than this are treated as misses
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Tuple[ResultRecord, ...]]]" = OrderedDict()

    def get(self, query: str) -> Optional[Tuple[ResultRecord, ...]]:
        """
        Look up the cached records for an exact query.

        Args:
            query: Trimmed query string

        Returns:
            Cached records in merge order, or None on miss or expiry
        """
        entry = self._entries.get(query)
        if entry is None:
            return None

        stored_at, records = entry
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            del self._entries[query]
            return None

        self._entries.move_to_end(query)
        return records

    def put(self, query: str, records: Tuple[ResultRecord, ...]) -> None:
        self._entries[query] = (self._clock(), tuple(records))
        self._entries.move_to_end(query)

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, query: str) -> bool:
        return self.get(query) is not None

    def __len__(self) -> int:
        return len(self._entries)
