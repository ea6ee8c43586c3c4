"""
Session-level orchestration of browsing and searching.

``CatalogBrowser`` keeps the page state (query, current page, total
pages) and recomputes the visible page of creatures whenever the query,
the page or the name index changes:

- **searching** when the normalized query is non-empty and the name
  index has entries: matches are filtered locally and paginated;
- **browsing** otherwise: the page is requested from the upstream
  listing with ``offset = (page - 1) * page_size``.

In both modes the identifiers on the page are then resolved into full
records concurrently.  Each refresh carries a generation number and
only the latest one may update ``view``, so a slow response for an old
page can never overwrite a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from .errors import CatalogError
from .pokeapi_service import PokeApiService
from .schemas import BrowseView, Creature, NameIndexEntry
from .store import NameIndexCache, match_entries, page_slice, total_pages


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load Pokémon data. Please try again later."


class CatalogBrowser:
    """Page state plus the refresh logic for one browsing session."""

    def __init__(
        self,
        service: PokeApiService,
        page_size: int = 12,
        index: Optional[NameIndexCache] = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.service = service
        self.page_size = page_size
        self.index = index if index is not None else NameIndexCache()
        self.query = ""
        self.current_page = 1
        self.total_pages = 0
        self._generation = 0
        self._view: Optional[BrowseView] = None

    @property
    def view(self) -> BrowseView:
        """The last committed view (an initial empty one before any load)."""
        if self._view is None:
            return BrowseView(
                query=self.query,
                current_page=self.current_page,
                total_pages=self.total_pages,
                page_size=self.page_size,
            )
        return self._view

    @property
    def loaded(self) -> bool:
        return self._view is not None

    def searching(self) -> bool:
        return bool(self.query.strip()) and self.index.ready

    # ------------------------------------------------------------------
    # State changes

    async def set_query(self, query: str) -> BrowseView:
        """Change the search text; always goes back to the first page."""
        self.query = query or ""
        self.current_page = 1
        return await self.refresh()

    async def set_page(self, page: int) -> BrowseView:
        """Move to ``page``, clamped to the known page range."""
        page = max(1, int(page))
        if self.loaded:
            page = min(page, max(self.total_pages, 1))
        self.current_page = page
        return await self.refresh()

    async def reload(self) -> BrowseView:
        """Drop the cached name index, rebuild it and refresh the page."""
        self.index.invalidate()
        return await self.refresh()

    async def refresh(self) -> BrowseView:
        """Recompute the visible page for the current state.

        Required-path failures (listing or primary record) produce a view
        with ``status="error"``; an empty result produces
        ``status="empty"``.
        """
        self._generation += 1
        generation = self._generation
        query = self.query
        page = self.current_page

        await self.index.load(self.service.build_index)
        mode = "searching" if self.searching() else "browsing"
        # page count of the previous view only carries over within a mode
        pages = self.total_pages if self.loaded and self.view.mode == mode else 0
        try:
            if mode == "searching":
                identifiers, pages, page = self._search_page(self.index.entries, query, page)
            else:
                identifiers, pages, page = await self._browse_page(page)
            records = await self._resolve(identifiers)
        except CatalogError as exc:
            logger.error("Error loading catalogue page %s (query=%r): %s", page, query, exc)
            view = BrowseView(
                mode=mode,
                status="error",
                query=query,
                current_page=min(page, max(pages, 1)),
                total_pages=pages,
                page_size=self.page_size,
                error=LOAD_ERROR_MESSAGE,
            )
        else:
            view = BrowseView(
                mode=mode,
                status="ok" if records else "empty",
                query=query,
                current_page=page,
                total_pages=pages,
                page_size=self.page_size,
                records=records,
            )

        if generation != self._generation:
            logger.debug("Discarding stale page %s for query %r", page, query)
            return view
        self.current_page = view.current_page
        self.total_pages = view.total_pages
        self._view = view
        return view

    # ------------------------------------------------------------------
    # Page computation

    def _search_page(
        self, entries: Tuple[NameIndexEntry, ...], query: str, page: int
    ) -> Tuple[List[int], int, int]:
        matches = match_entries(entries, query)
        pages = total_pages(len(matches), self.page_size)
        page = min(max(1, page), max(pages, 1))
        identifiers = [entry.identifier for entry in page_slice(matches, page, self.page_size)]
        return identifiers, pages, page

    async def _browse_page(self, page: int) -> Tuple[List[int], int, int]:
        page = max(1, page)
        listing = await self.service.fetch_page(self.page_size, (page - 1) * self.page_size)
        pages = total_pages(listing.total_count, self.page_size)
        last = max(pages, 1)
        if page > last:
            page = last
            listing = await self.service.fetch_page(self.page_size, (page - 1) * self.page_size)
        identifiers = [summary.identifier for summary in listing.summaries]
        return identifiers, pages, page

    async def _resolve(self, identifiers: List[int]) -> List[Creature]:
        """Fetch the records for ``identifiers`` concurrently, in order.

        The first failure cancels the remaining fetches and is re-raised.
        """
        if not identifiers:
            return []
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self.service.fetch_record(identifier))
                    for identifier in identifiers
                ]
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None
        return [task.result() for task in tasks]
