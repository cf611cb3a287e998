"""Tests for data/cache.py."""

from data.cache import TTLCache


class TestTTLCache:
    def test_set_and_get(self):
        cache = TTLCache(default_ttl=60)
        cache.set("graph", {"models": []})
        assert cache.get("graph") == {"models": []}

    def test_missing(self):
        assert TTLCache().get("nope") is None

    def test_expired_entry_removed(self):
        cache = TTLCache(default_ttl=60)
        cache.set("graph", "stale", ttl=-1)
        assert cache.get("graph") is None
        assert "graph" not in cache._store

    def test_default_ttl_used(self):
        cache = TTLCache(default_ttl=-1)
        cache.set("graph", "stale")
        assert cache.get("graph") is None

    def test_delete_and_clear(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        cache.delete("missing")
        assert cache.get("a") is None
        cache.clear()
        assert cache.get("b") is None
