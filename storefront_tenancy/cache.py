"""
Process-local resolution cache for storefront tenants.

Entries are keyed by bare hostname and expire lazily: an entry past its
expiry is evicted by the read that finds it. Nothing sweeps the cache in
the background.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from storefront_tenancy.records import TenantRecord


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A cached resolution. record is None for a cached miss."""

    record: Optional[TenantRecord]
    expires_at: float


class TenantCache:
    """
    Thread-safe TTL map from hostname to TenantRecord.

    Concurrent misses for the same hostname may each call the directory;
    the last write wins. There is no single-flight guarantee.

    Args:
        ttl: Lifetime of a positive entry, in seconds
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, ttl: float = 600, clock: Clock = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def lookup(self, hostname: str) -> Optional[CacheEntry]:
        """
        Return the live entry for a hostname, evicting it if expired.

        Returns:
            The CacheEntry, or None if absent or expired
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(hostname)
            if entry is None:
                return None
            if now > entry.expires_at:
                del self._entries[hostname]
                logger.debug("Cache entry for %s expired", hostname)
                return None
            return entry

    def get(self, hostname: str) -> Optional[TenantRecord]:
        """Return the cached record for a hostname, or None."""
        entry = self.lookup(hostname)
        return entry.record if entry is not None else None

    def set(self, hostname: str, record: TenantRecord, ttl: float = None) -> None:
        """Store a record, overwriting any existing entry."""
        self._store(hostname, record, self.ttl if ttl is None else ttl)

    def set_missing(self, hostname: str, ttl: float) -> None:
        """Remember that a hostname matched no tenant, for ttl seconds."""
        if ttl > 0:
            self._store(hostname, None, ttl)

    def _store(self, hostname: str, record: Optional[TenantRecord], ttl: float) -> None:
        entry = CacheEntry(record=record, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[hostname] = entry

    def invalidate(self, hostname: str = None) -> None:
        """
        Drop one hostname, or every entry when hostname is None.
        """
        with self._lock:
            if hostname is None:
                self._entries.clear()
            else:
                self._entries.pop(hostname, None)

    def evict_tenant(self, tenant_id: str) -> int:
        """
        Drop every hostname bound to a tenant.

        Returns:
            Number of entries removed
        """
        tenant_id = str(tenant_id)
        return self.evict_where(
            lambda hostname, entry: entry.record is not None and entry.record.id == tenant_id
        )

    def evict_where(self, predicate: Callable[[str, CacheEntry], bool]) -> int:
        """Drop every entry for which predicate(hostname, entry) is true."""
        with self._lock:
            stale = [
                hostname
                for hostname, entry in self._entries.items()
                if predicate(hostname, entry)
            ]
            for hostname in stale:
                del self._entries[hostname]
        return len(stale)


_default_cache = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> TenantCache:
    """
    Return the process-wide cache shared by the middleware and the
    invalidation signals, creating it from CACHE_TTL on first use.
    """
    global _default_cache
    if _default_cache is None:
        from storefront_tenancy.conf import storefront_settings

        with _default_cache_lock:
            if _default_cache is None:
                _default_cache = TenantCache(ttl=storefront_settings.CACHE_TTL)
    return _default_cache
