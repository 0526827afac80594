import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from pypopupanchor.utils import LRUCache


def test_overflowing_insert_evicts_oldest_entry():
    cache = LRUCache(3)
    cache.set('a', 1)
    cache.set('b', 2)
    cache.set('c', 3)
    assert cache.has('a') and cache.has('b') and cache.has('c')
    assert cache.size == 3

    cache.set('d', 4)

    assert not cache.has('a')
    assert cache.has('b') and cache.has('c') and cache.has('d')
    assert 'b' in cache and 'a' not in cache
    assert cache.size == 3


def test_read_refreshes_recency():
    cache = LRUCache(3)
    cache.set('a', 1)
    cache.set('b', 2)
    cache.set('c', 3)

    assert cache.get('a') == 1
    cache.set('d', 4)

    assert cache.has('a')
    assert not cache.has('b')
    assert cache.has('c') and cache.has('d')
    assert cache.keys() == ['c', 'a', 'd']


def test_has_does_not_refresh_recency():
    cache = LRUCache(2)
    cache.set('a', 1)
    cache.set('b', 2)
    assert cache.has('a')
    cache.set('c', 3)
    assert not cache.has('a')
    assert cache.stats().hits == 0 and cache.stats().misses == 0


def test_overwriting_existing_key_does_not_evict():
    cache = LRUCache(2)
    cache.set('a', 1)
    cache.set('b', 2)
    cache.set('a', 10)
    assert len(cache) == 2
    assert cache.keys() == ['b', 'a']
    assert cache.get('a') == 10


def test_stats_and_clear():
    cache = LRUCache(5)
    cache.set('a', 1)
    cache.set('b', 2)
    cache.set('c', 3)
    cache.get('a')
    cache.get('b')
    assert cache.get('x') is None
    assert cache.get('y', -1) == -1

    stats = cache.stats()
    assert stats.hits == 2
    assert stats.misses == 2
    assert stats.hit_ratio == 0.5
    assert stats.size == 3
    assert stats.max_size == 5

    cache.clear()
    assert cache.size == 0
    assert cache.stats().hits == 0
    assert cache.stats().misses == 0


def test_hit_ratio_is_zero_without_accesses():
    assert LRUCache(1).stats().hit_ratio == 0.0


def test_zero_value_counts_as_hit():
    cache = LRUCache(1)
    cache.set('ground', 0.0)
    assert cache.get('ground') == 0.0
    assert cache.stats().hits == 1


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        LRUCache(0)
