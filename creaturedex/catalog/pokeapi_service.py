"""
PokeAPI integration for the catalogue.  This module exposes the data
acquisition operations used by the browser:

* ``fetch_page()`` — one page of creature summaries for browse mode.

* ``build_index()`` — the full list of (name, identifier) pairs used
  for name search.  It fails soft and returns an empty list.

* ``fetch_record()`` — one creature, enriched with ability and move
  details fetched from their own endpoints.

* ``describe_move()`` — a human readable description of a single move
  with its power, accuracy and PP appended.

Sub-item lookups are paced with fixed delays (``index * stagger``)
so that a page of twelve creatures does not hit the move endpoint with
hundreds of simultaneous requests.  A failed or slow sub-item only
degrades that item; the creature itself is still returned.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

from ..config import Settings
from .errors import DataShapeError
from .pokeapi_client import PokeApiClient
from .schemas import (
    DEFAULT_MOVE_TYPE,
    DESCRIPTION_UNAVAILABLE,
    NO_DESCRIPTION,
    Ability,
    CatalogPage,
    CatalogSummary,
    Creature,
    Move,
    NameIndexEntry,
    Stat,
)


logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(r"/(\d+)/?$")


def parse_identifier(reference: str) -> int:
    """Extract the numeric identifier from a resource reference.

    PokeAPI references look like ``https://pokeapi.co/api/v2/pokemon/25/``;
    the identifier is the last path segment.  The trailing slash is
    optional.

    Raises
    ------
    DataShapeError
        If the reference does not end with a numeric path segment.
    """
    if not isinstance(reference, str):
        raise DataShapeError(f"reference must be a string, got {type(reference).__name__}")
    path = reference.strip().split("?", 1)[0].split("#", 1)[0]
    m = _REFERENCE_RE.search(path)
    if not m:
        raise DataShapeError(f"cannot extract an identifier from reference {reference!r}")
    identifier = int(m.group(1))
    if identifier <= 0:
        raise DataShapeError(f"reference {reference!r} has a non-positive identifier")
    return identifier


def capitalize(name: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return name[:1].upper() + name[1:]


def _english_entry(details: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for entry in details.get("effect_entries") or []:
        if not isinstance(entry, dict):
            continue
        language = entry.get("language") or {}
        if isinstance(language, dict) and language.get("name") == "en":
            return entry
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _int_or_none(value: Any) -> Optional[int]:
    # bool is an int subclass; PokeAPI never sends one for these fields
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def format_move_summary(move: Move) -> str:
    """Render a move description with its stats on a trailing line.

    The stats line reads ``Power: 40 | Accuracy: 100% | PP: 35`` and only
    lists the values that are known.
    """
    stats: List[str] = []
    if move.power is not None:
        stats.append(f"Power: {move.power}")
    if move.accuracy is not None:
        stats.append(f"Accuracy: {move.accuracy}%")
    if move.pp:
        stats.append(f"PP: {move.pp}")
    description = move.description
    if stats:
        description += "\n\n" + " | ".join(stats)
    return description


class PokeApiService:
    """Catalogue operations on top of a ``PokeApiClient``."""

    def __init__(self, client: PokeApiClient, settings: Settings) -> None:
        self.client = client
        self.settings = settings

    # ------------------------------------------------------------------
    # Listing

    async def fetch_page(self, limit: int, offset: int) -> CatalogPage:
        """Return one page of creature summaries.

        Parameters
        ----------
        limit : int
            Number of entries to request; must be positive.
        offset : int
            Zero-based index of the first entry; must not be negative.

        Returns
        -------
        CatalogPage
            The upstream total count and the summaries on this page.

        Raises
        ------
        UpstreamError
            On a non-2xx response or a transport failure.
        DataShapeError
            If an entry's reference carries no identifier.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        if offset < 0:
            raise ValueError("offset must not be negative")
        url = self.client.url("pokemon")
        data = await self.client.get_json(url, params={"limit": limit, "offset": offset})
        return self._parse_listing(url, data)

    def _parse_listing(self, url: str, data: Dict[str, Any]) -> CatalogPage:
        count = data.get("count")
        results = data.get("results")
        if not isinstance(count, int) or not isinstance(results, list):
            raise DataShapeError(f"{url} returned an unexpected listing payload")
        summaries: List[CatalogSummary] = []
        for item in results:
            if not isinstance(item, dict):
                raise DataShapeError(f"{url} returned a non-object listing entry")
            reference = item.get("url") or ""
            summaries.append(
                CatalogSummary(
                    identifier=parse_identifier(reference),
                    reference=reference,
                    name=str(item.get("name") or ""),
                )
            )
        return CatalogPage(total_count=count, summaries=summaries)

    async def build_index(self) -> List[NameIndexEntry]:
        """Fetch every (name, identifier) pair in one oversized request.

        Search is layered on top of browse mode, so a failure here is
        logged and an empty index is returned instead of raising.
        """
        url = self.client.url("pokemon")
        try:
            data = await self.client.get_json(
                url, params={"limit": self.settings.index_limit, "offset": 0}
            )
            page = self._parse_listing(url, data)
        except Exception as exc:
            logger.error("Could not build the name index: %s", exc)
            return []
        entries = [
            NameIndexEntry(name=s.name, identifier=s.identifier) for s in page.summaries
        ]
        logger.info("Name index built with %d entries", len(entries))
        return entries

    # ------------------------------------------------------------------
    # Records

    async def fetch_record(self, identifier: int) -> Creature:
        """Fetch one creature and enrich its abilities and moves.

        The primary lookup is required and its ``UpstreamError``
        propagates.  Ability and move lookups run concurrently, each
        delayed by its position times the configured stagger, and any
        individual failure is replaced by placeholder values.
        """
        url = self.client.url(f"pokemon/{int(identifier)}")
        data = await self.client.get_json(url)

        raw_abilities = [a for a in data.get("abilities") or [] if isinstance(a, dict)]
        raw_moves = [m for m in data.get("moves") or [] if isinstance(m, dict)]
        abilities_task = asyncio.gather(
            *(
                self._enrich_ability(entry, index)
                for index, entry in enumerate(raw_abilities[: self.settings.ability_cap])
            )
        )
        moves_task = asyncio.gather(
            *(
                self._enrich_move(entry, index)
                for index, entry in enumerate(raw_moves[: self.settings.move_cap])
            )
        )
        abilities, moves = await asyncio.gather(abilities_task, moves_task)

        name = str(data.get("name") or "")
        return Creature(
            id=_int_or_none(data.get("id")) or int(identifier),
            name=name,
            display_name=capitalize(name),
            types=self._parse_types(data),
            stats=self._parse_stats(data),
            sprite_url=self._parse_sprite(data),
            abilities=list(abilities),
            moves=list(moves),
        )

    @staticmethod
    def _parse_types(data: Dict[str, Any]) -> List[str]:
        types: List[str] = []
        for slot in data.get("types") or []:
            type_info = slot.get("type") if isinstance(slot, dict) else None
            if isinstance(type_info, dict) and type_info.get("name"):
                types.append(str(type_info["name"]))
        return types

    @staticmethod
    def _parse_stats(data: Dict[str, Any]) -> List[Stat]:
        stats: List[Stat] = []
        for entry in data.get("stats") or []:
            if not isinstance(entry, dict):
                continue
            stat_info = entry.get("stat") or {}
            base = _int_or_none(entry.get("base_stat"))
            if isinstance(stat_info, dict) and stat_info.get("name") and base is not None:
                stats.append(Stat(name=str(stat_info["name"]), base_stat=base))
        return stats

    @staticmethod
    def _parse_sprite(data: Dict[str, Any]) -> Optional[str]:
        other = _as_dict(_as_dict(data.get("sprites")).get("other"))
        url = _as_dict(other.get("official-artwork")).get("front_default")
        return url if isinstance(url, str) else None

    async def _enrich_ability(self, entry: Dict[str, Any], index: int) -> Ability:
        info = _as_dict(entry.get("ability"))
        name = str(info.get("name") or "")
        url = str(info.get("url") or "")
        ability = Ability(name=name, url=url, is_hidden=bool(entry.get("is_hidden")))
        if not url:
            logger.warning("Ability entry %d has no reference", index)
            return ability
        await asyncio.sleep(index * self.settings.ability_stagger)
        try:
            details = await self.client.get_json(url)
        except Exception as exc:
            logger.warning("Error fetching ability %s: %s", name, exc)
            return ability
        english = _english_entry(details)
        ability.description = (english or {}).get("effect") or NO_DESCRIPTION
        return ability

    async def _enrich_move(self, entry: Dict[str, Any], index: int) -> Move:
        info = _as_dict(entry.get("move"))
        name = str(info.get("name") or "")
        url = str(info.get("url") or "")
        if not url:
            logger.warning("Move entry %d has no reference", index)
            return Move(name=name, url=url)
        await asyncio.sleep(index * self.settings.move_stagger)
        try:
            details = await self.client.get_json(url, timeout=self.settings.move_timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching move %s", name)
            return Move(name=name, url=url)
        except Exception as exc:
            logger.warning("Error fetching move %s: %s", name, exc)
            return Move(name=name, url=url)
        return self._move_from_details(name, url, details)

    @staticmethod
    def _move_from_details(name: str, url: str, details: Dict[str, Any]) -> Move:
        english = _english_entry(details) or {}
        type_info = _as_dict(details.get("type"))
        return Move(
            name=name,
            url=url,
            description=english.get("short_effect") or english.get("effect") or NO_DESCRIPTION,
            power=_int_or_none(details.get("power")),
            accuracy=_int_or_none(details.get("accuracy")),
            pp=_int_or_none(details.get("pp")),
            type=type_info.get("name") or DEFAULT_MOVE_TYPE,
        )

    async def describe_move(self, reference: str) -> str:
        """Return a move's description followed by its stats line.

        Any failure yields ``DESCRIPTION_UNAVAILABLE``.
        """
        try:
            details = await self.client.get_json(reference, timeout=self.settings.move_timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out fetching move details from %s", reference)
            return DESCRIPTION_UNAVAILABLE
        except Exception as exc:
            logger.warning("Error fetching move details from %s: %s", reference, exc)
            return DESCRIPTION_UNAVAILABLE
        return format_move_summary(self._move_from_details("", reference, details))
