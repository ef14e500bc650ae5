"""
Property-based tests for the query cache.
"""

from hypothesis import given, settings, strategies as st
from catalog_core.models import ResultRecord
from catalog_core.search import QueryCache


queries = st.text(min_size=2, max_size=20)


def _records(query):
    return (ResultRecord(source_kind="room", id=query, title=query),)


@given(entries=st.dictionaries(queries, st.integers(min_value=0, max_value=5), max_size=30))
@settings(max_examples=100)
def test_unbounded_cache_keeps_everything(entries):
    """
    **Property: Exact-key retention**

    Without an eviction policy every stored query is returned unchanged.
    """
    cache = QueryCache()
    for query in entries:
        cache.put(query, _records(query))

    assert len(cache) == len(entries)
    for query in entries:
        assert cache.get(query) == _records(query)


@given(
    keys=st.lists(queries, min_size=1, max_size=40, unique=True),
    max_entries=st.integers(min_value=1, max_value=10)
)
@settings(max_examples=100)
def test_max_entries_evicts_least_recently_used(keys, max_entries):
    """
    **Property: Bounded size**

    With max_entries set the cache never holds more entries than allowed and
    keeps the most recently stored ones.
    """
    cache = QueryCache(max_entries=max_entries)
    for key in keys:
        cache.put(key, _records(key))

    assert len(cache) == min(len(keys), max_entries)
    for key in keys[-max_entries:]:
        assert key in cache


def test_lookup_is_exact():
    """Different casing or whitespace is a different key."""
    cache = QueryCache()
    cache.put("suite", _records("suite"))

    assert cache.get("suite") is not None
    assert cache.get("Suite") is None
    assert cache.get("suite ") is None


def test_get_refreshes_recency():
    cache = QueryCache(max_entries=2)
    cache.put("aa", _records("aa"))
    cache.put("bb", _records("bb"))
    cache.get("aa")
    cache.put("cc", _records("cc"))

    assert "aa" in cache
    assert "bb" not in cache


def test_ttl_expires_entries():
    """Entries older than the TTL are misses and are dropped."""
    now = [100.0]
    cache = QueryCache(ttl_seconds=10, clock=lambda: now[0])
    cache.put("room", _records("room"))

    now[0] = 105.0
    assert cache.get("room") == _records("room")

    now[0] = 111.0
    assert cache.get("room") is None
    assert len(cache) == 0


def test_clear_empties_cache():
    cache = QueryCache()
    cache.put("aa", _records("aa"))
    cache.clear()
    assert len(cache) == 0
