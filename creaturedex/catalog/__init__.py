"""
Catalog package for the creature catalogue API.

This package contains the PokeAPI data layer (paginated listing,
record enrichment, name index), the browsing/search orchestration and
the routes that expose them to a front-end.  Everything is held in
process memory; nothing is persisted.
"""

from .router import router as catalog_router  # noqa: F401
