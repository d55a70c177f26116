"""
Tests for the tenant resolution cache.
"""

import threading

from storefront_tenancy.cache import TenantCache
from tests.fakes import ACME, VENDOR, FakeClock


class TestTenantCache:
    """Tests for TenantCache."""

    def test_get_missing(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        assert cache.get("acme.platform.test") is None
        assert cache.lookup("acme.platform.test") is None

    def test_set_and_get(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set("acme.platform.test", ACME)
        assert cache.get("acme.platform.test") == ACME
        assert len(cache) == 1

    def test_entry_alive_until_ttl(self):
        clock = FakeClock()
        cache = TenantCache(ttl=600, clock=clock)
        cache.set("acme.platform.test", ACME)

        clock.advance(600)
        assert cache.get("acme.platform.test") == ACME

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = TenantCache(ttl=600, clock=clock)
        cache.set("acme.platform.test", ACME)

        clock.advance(600.5)
        assert cache.get("acme.platform.test") is None
        # Expired entries are evicted by the read that finds them
        assert len(cache) == 0

    def test_per_entry_ttl(self):
        clock = FakeClock()
        cache = TenantCache(ttl=600, clock=clock)
        cache.set("acme.platform.test", ACME, ttl=5)

        clock.advance(6)
        assert cache.get("acme.platform.test") is None

    def test_set_overwrites(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set("acme.platform.test", ACME)
        cache.set("acme.platform.test", VENDOR)
        assert cache.get("acme.platform.test") == VENDOR

    def test_set_missing(self):
        clock = FakeClock()
        cache = TenantCache(ttl=600, clock=clock)
        cache.set_missing("ghost.platform.test", ttl=30)

        entry = cache.lookup("ghost.platform.test")
        assert entry is not None
        assert entry.record is None

        clock.advance(31)
        assert cache.lookup("ghost.platform.test") is None

    def test_set_missing_disabled(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set_missing("ghost.platform.test", ttl=0)
        assert cache.lookup("ghost.platform.test") is None

    def test_invalidate_one(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set("acme.platform.test", ACME)
        cache.set("vendor.com", VENDOR)

        cache.invalidate("acme.platform.test")

        assert cache.get("acme.platform.test") is None
        assert cache.get("vendor.com") == VENDOR

    def test_invalidate_all(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set("acme.platform.test", ACME)
        cache.set("vendor.com", VENDOR)

        cache.invalidate()

        assert len(cache) == 0

    def test_evict_tenant(self):
        cache = TenantCache(ttl=600, clock=FakeClock())
        cache.set("acme.platform.test", ACME)
        cache.set("acme.localhost", ACME)
        cache.set("vendor.com", VENDOR)
        cache.set_missing("ghost.platform.test", ttl=30)

        assert cache.evict_tenant(ACME.id) == 2
        assert cache.get("vendor.com") == VENDOR
        assert cache.lookup("ghost.platform.test") is not None

    def test_concurrent_writers(self):
        """Concurrent set/get/invalidate never corrupt the map."""
        cache = TenantCache(ttl=600)
        errors = []

        def worker(n):
            try:
                for i in range(200):
                    hostname = f"store{i % 10}.platform.test"
                    cache.set(hostname, ACME)
                    cache.get(hostname)
                    if i % 50 == n:
                        cache.invalidate(hostname)
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) <= 10
