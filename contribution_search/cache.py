"""Short-lived result cache backing CSV export of bulk searches."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .exceptions import NotFoundError
from .schema import CACHE_TTL_SECONDS, Contribution

logger = logging.getLogger(__name__)


def new_search_id() -> str:
    """Random 128-bit identifier for a bulk search run."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CacheEntry:
    """Cached records plus the clock reading at which they expire."""

    records: tuple[Contribution, ...]
    expires_at: float


class ResultCache:
    """
    Expiring map from search id to a flattened result set.

    Entries expire a fixed ``ttl_seconds`` after insertion. Expiry is lazy:
    a lookup past the deadline deletes the entry and reports a miss, and
    ``purge_expired`` sweeps everything stale (run on every ``put``). All
    operations are guarded by a single lock.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, search_id: object) -> bool:
        return isinstance(search_id, str) and self.get(search_id) is not None

    def put(self, search_id: str, records: Sequence[Contribution]) -> None:
        """Store ``records`` under ``search_id``, replacing any earlier entry."""
        self.purge_expired()
        entry = CacheEntry(records=tuple(records), expires_at=self._clock() + self.ttl_seconds)
        with self._lock:
            self._entries[search_id] = entry
        logger.debug("Cached %d contributions under %s", len(entry.records), search_id)

    def get(self, search_id: str) -> tuple[Contribution, ...] | None:
        """Cached records, or None if the id is unknown or expired."""
        with self._lock:
            entry = self._entries.get(search_id)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[search_id]
                logger.debug("Cache entry %s expired", search_id)
                return None
            return entry.records

    def require(self, search_id: str) -> tuple[Contribution, ...]:
        """
        Cached records for ``search_id``.

        Raises:
            NotFoundError: If the id is unknown or expired
        """
        records = self.get(search_id)
        if records is None:
            raise NotFoundError(message="Export data not found or expired", search_id=search_id)
        return records

    def delete(self, search_id: str) -> None:
        """Drop an entry; unknown ids are ignored."""
        with self._lock:
            self._entries.pop(search_id, None)

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Purged %d expired cache entries", len(stale))
        return len(stale)
