"""
Tests for name matching, pagination helpers and the name index cache
"""
import pytest

from creaturedex.catalog.schemas import NameIndexEntry
from creaturedex.catalog.store import (
    NameIndexCache,
    match_entries,
    name_matches,
    page_slice,
    total_pages,
)

INDEX = [
    NameIndexEntry(name="bulbasaur", identifier=1),
    NameIndexEntry(name="ivysaur", identifier=2),
    NameIndexEntry(name="venusaur-mega", identifier=3),
]


def ids(entries):
    return [entry.identifier for entry in entries]


def test_infix_is_not_a_match():
    assert match_entries(INDEX, "saur") == []


def test_whole_word_match_after_hyphen_split():
    assert ids(match_entries(INDEX, "venusaur")) == [3]
    assert ids(match_entries(INDEX, "mega")) == [3]


def test_prefix_match():
    assert ids(match_entries(INDEX, "bulb")) == [1]


def test_query_is_trimmed_and_lowercased():
    assert ids(match_entries(INDEX, "  IvySaur ")) == [2]


def test_exact_name_is_included_among_prefix_matches():
    index = [
        NameIndexEntry(name="pikachu-rock-star", identifier=10),
        NameIndexEntry(name="pikachu", identifier=25),
        NameIndexEntry(name="pikachu-belle", identifier=11),
    ]

    assert ids(match_entries(index, "pikachu")) == [10, 25, 11]


def test_matches_follow_index_order():
    index = [
        NameIndexEntry(name="mega-x", identifier=9),
        NameIndexEntry(name="charizard-mega-x", identifier=7),
        NameIndexEntry(name="megaman", identifier=8),
    ]

    assert ids(match_entries(index, "mega")) == [9, 7, 8]


def test_matching_is_idempotent():
    first = match_entries(INDEX, "v")
    second = match_entries(INDEX, "v")

    assert ids(first) == ids(second) == [3]


def test_blank_query_matches_nothing():
    assert match_entries(INDEX, "") == []
    assert match_entries(INDEX, "   ") == []


def test_name_matches_expects_normalized_query():
    assert name_matches("Venusaur-Mega", "mega")
    assert not name_matches("venusaur-mega", "saur-mega")


@pytest.mark.parametrize(
    "count,size,expected",
    [(0, 12, 0), (1, 12, 1), (12, 12, 1), (13, 12, 2), (1302, 12, 109)],
)
def test_total_pages(count, size, expected):
    assert total_pages(count, size) == expected


def test_total_pages_rejects_bad_page_size():
    with pytest.raises(ValueError):
        total_pages(10, 0)


def test_page_slice():
    items = list(range(13))

    assert page_slice(items, 1, 12) == list(range(12))
    assert page_slice(items, 2, 12) == [12]
    assert page_slice(items, 3, 12) == []


@pytest.mark.asyncio
async def test_cache_loads_once():
    cache = NameIndexCache()
    calls = []

    async def builder():
        calls.append(1)
        return list(INDEX)

    assert not cache.loaded
    await cache.load(builder)
    await cache.load(builder)

    assert len(calls) == 1
    assert cache.ready
    assert cache.entries == tuple(INDEX)


@pytest.mark.asyncio
async def test_cache_invalidate_allows_rebuild():
    cache = NameIndexCache()
    calls = []

    async def builder():
        calls.append(1)
        return list(INDEX)

    await cache.load(builder)
    cache.invalidate()
    assert not cache.loaded
    assert cache.entries == ()
    await cache.load(builder)

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_empty_build_is_loaded_but_not_ready():
    cache = NameIndexCache()

    async def builder():
        return []

    await cache.load(builder)

    assert cache.loaded
    assert not cache.ready
