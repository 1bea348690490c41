"""TTL cache tests"""

from genereport.services.admission import InMemoryCacheStore, TTLCache


class TestTTLCache:
    """Per-entry expiry"""

    def test_get_before_and_after_expiry(self, fake_clock):
        cache = TTLCache(default_ttl_seconds=300, clock=fake_clock)
        cache.set("clinvar:rs1", {"found": True})

        fake_clock.advance(300_000)
        assert cache.get("clinvar:rs1") == {"found": True}

        fake_clock.advance(1)
        assert cache.get("clinvar:rs1") is None
        assert cache.size() == 0

    def test_ttl_override(self, fake_clock):
        cache = TTLCache(default_ttl_seconds=300, clock=fake_clock)
        cache.set("short", 1, ttl_seconds=1)
        cache.set("default", 2)

        fake_clock.advance(1_001)
        assert cache.get("short") is None
        assert cache.get("default") == 2

    def test_missing_key(self):
        assert TTLCache().get("nope") is None

    def test_delete_and_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert cache.size() == 0

    def test_cleanup_evicts_only_expired(self, fake_clock):
        cache = TTLCache(default_ttl_seconds=10, clock=fake_clock)
        cache.set("old", 1)
        fake_clock.advance(5_000)
        cache.set("new", 2)
        fake_clock.advance(6_000)

        assert cache.cleanup() == 1
        assert cache.get("new") == 2
        assert cache.size() == 1

    def test_injected_store(self):
        store = InMemoryCacheStore()
        cache = TTLCache(store=store)
        cache.set("k", "v")
        assert len(store) == 1

    def test_shared_store_is_used_while_empty(self, fake_clock):
        # An empty store must not be replaced by a private one
        store = InMemoryCacheStore()
        writer = TTLCache(store=store, clock=fake_clock)
        reader = TTLCache(store=store, clock=fake_clock)

        assert writer.store is store
        writer.set("clinvar:rs1", {"found": True})
        assert reader.get("clinvar:rs1") == {"found": True}
        assert reader.size() == 1
