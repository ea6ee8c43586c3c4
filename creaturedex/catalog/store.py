"""
In-memory name index and the search/pagination helpers built on it.

The catalogue's full name listing is fetched once and kept in a
``NameIndexCache`` owned by the browser.  Searching never goes back to
the network: ``match_entries`` filters the cached entries, and
``total_pages``/``page_slice`` turn the result into a page of
identifiers that the browser then resolves into full records.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from .schemas import NameIndexEntry


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Names such as "venusaur-mega" are searchable by each hyphenated word.
WORD_SEPARATOR = "-"


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison."""
    return (s or "").strip().lower()


def name_matches(name: str, query: str) -> bool:
    """Return whether ``name`` matches an already normalized ``query``.

    A name matches when it equals the query, starts with it, or when one
    of its hyphen-separated words equals it.
    """
    normalized = _norm(name)
    if normalized == query or normalized.startswith(query):
        return True
    return query in normalized.split(WORD_SEPARATOR)


def match_entries(entries: Sequence[NameIndexEntry], query: str) -> List[NameIndexEntry]:
    """Filter ``entries`` by ``query``, keeping the index order.

    An empty (or blank) query matches nothing; the browser treats it as
    browse mode and never calls this.
    """
    nq = _norm(query)
    if not nq:
        return []
    return [entry for entry in entries if name_matches(entry.name, nq)]


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for ``count`` items (0 for no items)."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return (max(0, count) + page_size - 1) // page_size


def page_slice(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Items on the 1-indexed ``page``."""
    start = (max(1, page) - 1) * page_size
    return list(items[start:start + page_size])


class NameIndexCache:
    """Holds the name index for one browsing session.

    The cache starts empty, is populated by the first ``load()`` and
    stays populated until ``invalidate()`` is called (on reload).  A
    lock makes concurrent first loads share a single fetch.
    """

    def __init__(self) -> None:
        self._entries: Tuple[NameIndexEntry, ...] = ()
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def entries(self) -> Tuple[NameIndexEntry, ...]:
        return self._entries

    @property
    def ready(self) -> bool:
        """True once a load produced at least one entry."""
        return bool(self._entries)

    async def load(self, builder: Callable[[], Awaitable[List[NameIndexEntry]]]) -> Tuple[NameIndexEntry, ...]:
        """Populate the cache with ``builder()`` unless already loaded."""
        if self._loaded:
            return self._entries
        async with self._lock:
            if not self._loaded:
                self._entries = tuple(await builder())
                self._loaded = True
                if not self._entries:
                    logger.warning("Name index is empty; search falls back to browsing")
        return self._entries

    def invalidate(self) -> None:
        self._entries = ()
        self._loaded = False
