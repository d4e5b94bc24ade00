"""Tests for the expiring result cache."""

import threading

import pytest
from conftest import make_contribution

from contribution_search.cache import ResultCache, new_search_id
from contribution_search.exceptions import NotFoundError


@pytest.fixture
def records():
    return [make_contribution("A"), make_contribution("B")]


class TestResultCache:
    """Tests for ResultCache."""

    def test_get_after_put(self, records, clock):
        cache = ResultCache(600, clock=clock)
        cache.put("abc", records)
        assert cache.get("abc") == tuple(records)

    def test_unknown_id_misses(self, clock):
        cache = ResultCache(600, clock=clock)
        assert cache.get("never-created") is None

    def test_expires_after_ttl(self, records, clock):
        """A lookup at or past the TTL is a miss."""
        cache = ResultCache(600, clock=clock)
        cache.put("abc", records)
        clock.advance(599.9)
        assert cache.get("abc") is not None
        clock.advance(0.1)
        assert cache.get("abc") is None
        assert len(cache) == 0

    def test_expired_entry_looks_like_unknown(self, records, clock):
        cache = ResultCache(10, clock=clock)
        cache.put("abc", records)
        clock.advance(11)
        with pytest.raises(NotFoundError) as exc_info:
            cache.require("abc")
        assert exc_info.value.search_id == "abc"
        assert "abc" not in cache

    def test_delete(self, records, clock):
        cache = ResultCache(600, clock=clock)
        cache.put("abc", records)
        cache.delete("abc")
        cache.delete("missing")
        assert cache.get("abc") is None

    def test_purge_expired(self, records, clock):
        cache = ResultCache(60, clock=clock)
        cache.put("old", records)
        clock.advance(30)
        cache.put("new", records)
        clock.advance(30)
        assert cache.purge_expired() == 1
        assert "new" in cache
        assert "old" not in cache

    def test_put_sweeps_stale_entries(self, records, clock):
        cache = ResultCache(60, clock=clock)
        cache.put("old", records)
        clock.advance(61)
        cache.put("new", records)
        assert len(cache) == 1

    def test_stored_records_are_a_snapshot(self, clock):
        records = [make_contribution("A")]
        cache = ResultCache(600, clock=clock)
        cache.put("abc", records)
        records.append(make_contribution("B"))
        assert len(cache.get("abc")) == 1

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            ResultCache(0)

    def test_concurrent_access(self, records):
        """Parallel puts and gets leave every entry readable."""
        cache = ResultCache(600)
        ids = [new_search_id() for _ in range(200)]

        def worker(chunk):
            for search_id in chunk:
                cache.put(search_id, records)
                assert cache.get(search_id) == tuple(records)

        threads = [threading.Thread(target=worker, args=(ids[i::4],)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 200


class TestNewSearchId:
    """Tests for new_search_id."""

    def test_unique_hex(self):
        ids = {new_search_id() for _ in range(1000)}
        assert len(ids) == 1000
        assert all(len(i) == 32 for i in ids)
