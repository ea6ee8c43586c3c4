"""
Pydantic schema definitions for the catalog module.

``Creature`` is the enriched record handed to the front-end: the
primary PokeAPI entry plus two capped bundles of sub-items (abilities
and moves) whose descriptions were fetched separately.  ``BrowseView``
bundles a page of creatures with pagination metadata and a status so
that clients can tell an empty result apart from a failed load.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal


# Placeholder texts used when a description cannot be produced.
DESCRIPTION_UNAVAILABLE = "Description unavailable."
NO_DESCRIPTION = "No description available."
DEFAULT_MOVE_TYPE = "normal"


class CatalogSummary(BaseModel):
    """One entry of a list page: the creature's identifier and reference."""

    identifier: int
    reference: str
    name: str = ""


class CatalogPage(BaseModel):
    """A single page of the upstream listing."""

    total_count: int
    summaries: List[CatalogSummary] = Field(default_factory=list)


class NameIndexEntry(BaseModel):
    """A (name, identifier) pair from the full catalogue listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    identifier: int


class Stat(BaseModel):
    name: str
    base_stat: int


class Ability(BaseModel):
    """An ability with its resolved description.

    ``description`` is the English effect text.  When the ability has no
    English entry it is ``NO_DESCRIPTION``; when the lookup itself failed
    it is ``DESCRIPTION_UNAVAILABLE``.
    """

    name: str
    url: str
    is_hidden: bool = False
    description: str = DESCRIPTION_UNAVAILABLE


class Move(BaseModel):
    """A move with its resolved metadata.

    When the lookup fails or times out the description falls back to
    ``DESCRIPTION_UNAVAILABLE``, the type to ``"normal"`` and the numeric
    fields stay ``None``.
    """

    name: str
    url: str
    description: str = DESCRIPTION_UNAVAILABLE
    power: Optional[int] = None
    accuracy: Optional[int] = None
    pp: Optional[int] = None
    type: str = DEFAULT_MOVE_TYPE


class Creature(BaseModel):
    """A fully enriched catalogue entry."""

    id: int
    name: str
    display_name: str = ""
    types: List[str] = Field(default_factory=list)
    stats: List[Stat] = Field(default_factory=list)
    sprite_url: Optional[str] = None
    abilities: List[Ability] = Field(default_factory=list)
    moves: List[Move] = Field(default_factory=list)


BrowseMode = Literal["browsing", "searching"]
BrowseStatus = Literal["ok", "empty", "error"]


class BrowseView(BaseModel):
    """What the rendering side receives after each state change."""

    mode: BrowseMode = "browsing"
    status: BrowseStatus = "ok"
    query: str = ""
    current_page: int = 1
    total_pages: int = 0
    page_size: int
    records: List[Creature] = Field(default_factory=list)
    error: Optional[str] = None
