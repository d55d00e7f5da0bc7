"""Tests for the FIFO-bounded, TTL-expiring TimedCache."""

from __future__ import annotations

import pytest

from gamescout.services.cache import TimedCache


def test_get_returns_stored_value(fake_clock):
    cache = TimedCache(capacity=3, ttl_seconds=300, clock=fake_clock)
    cache.set("a", 1)
    assert cache.get("a") == 1
    assert cache.get("missing") is None


def test_overflow_evicts_earliest_inserted_key(fake_clock):
    cache = TimedCache(capacity=3, ttl_seconds=300, clock=fake_clock)
    for key in ("a", "b", "c"):
        cache.set(key, key.upper())

    # Reads do not refresh eviction order.
    assert cache.get("a") == "A"
    cache.set("d", "D")

    assert len(cache) == 3
    assert cache.get("a") is None
    assert [cache.get(key) for key in ("b", "c", "d")] == ["B", "C", "D"]


def test_overwrite_at_capacity_does_not_evict(fake_clock):
    cache = TimedCache(capacity=2, ttl_seconds=300, clock=fake_clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)

    assert len(cache) == 2
    assert cache.get("a") == 10
    assert cache.get("b") == 2

    # "a" keeps its original slot, so it is still the oldest.
    cache.set("c", 3)
    assert cache.get("a") is None
    assert cache.get("b") == 2


def test_entry_expires_after_ttl_and_is_removed(fake_clock):
    cache = TimedCache(capacity=5, ttl_seconds=300, clock=fake_clock)
    cache.set("a", "value")

    fake_clock.advance(300)
    assert cache.get("a") == "value"

    fake_clock.advance(0.001)
    assert cache.get("a") is None
    assert "a" not in cache
    assert len(cache) == 0


def test_expired_unread_entries_still_count_toward_capacity(fake_clock):
    cache = TimedCache(capacity=2, ttl_seconds=1, clock=fake_clock)
    cache.set("a", 1)
    cache.set("b", 2)
    fake_clock.advance(5)

    assert len(cache) == 2
    cache.set("c", 3)
    assert len(cache) == 2
    assert "a" not in cache
    assert "b" in cache


def test_overwrite_refreshes_timestamp(fake_clock):
    cache = TimedCache(capacity=2, ttl_seconds=10, clock=fake_clock)
    cache.set("a", 1)
    fake_clock.advance(8)
    cache.set("a", 2)
    fake_clock.advance(8)
    assert cache.get("a") == 2


def test_delete_and_clear(fake_clock):
    cache = TimedCache(capacity=3, clock=fake_clock)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert len(cache) == 0
    assert cache.get("b") is None


def test_falsy_values_are_cached(fake_clock):
    cache = TimedCache(capacity=3, clock=fake_clock)
    cache.set("empty", ())
    assert cache.get("empty") == ()


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TimedCache(capacity=0)
