"""
In-memory result cache.

Maps an exact rendered query string to the rows last returned for it. Keys
are compared verbatim; two queries differing only in whitespace are separate
entries. There is no invalidation API: entries live for the lifetime of the
process unless the optional capacity or TTL limits are configured.

One instance is created per application and injected into the executor.
All access happens on the event loop thread, so racing writers to the same
key simply overwrite each other (last write wins).
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional


logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]


@dataclass
class CacheEntry:
    rows: Rows
    inserted_at: float


class ResultCache:
    """
    Query-string keyed row cache.

    Args:
        max_entries: Keep at most this many entries, evicting the oldest
            insertion first. None means unbounded.
        ttl_seconds: Treat entries older than this as missing. None means
            entries never expire.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, key: str) -> Optional[Rows]:
        """Return the cached rows for a key, or None on a miss."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._ttl_seconds is not None and self._clock() - entry.inserted_at > self._ttl_seconds:
            self._entries.pop(key, None)
            logger.debug("Cache entry expired")
            return None

        return entry.rows

    def put(self, key: str, rows: Rows) -> None:
        """Store rows under a key, replacing any previous entry."""
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(rows=rows, inserted_at=self._clock())

        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
                logger.debug("Cache full, evicted oldest entry")

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
