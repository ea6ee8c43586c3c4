"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET  /view                      : current page of creatures (loads on first call)
- PUT  /view/query                : change the search text (back to page 1)
- PUT  /view/page                 : change the page
- POST /view/reload               : rebuild the name index and refresh
- GET  /creatures/{creature_id}   : one enriched creature
- GET  /moves/{move_id}/description : move description with its stats line
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request

from .browser import CatalogBrowser
from .errors import DataShapeError, UpstreamError
from .pokeapi_service import PokeApiService
from .schemas import BrowseView, Creature


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_browser(request: Request) -> CatalogBrowser:
    browser = getattr(request.app.state, "browser", None)
    if browser is None:
        raise HTTPException(status_code=503, detail="Catalogue is not ready")
    return browser


def get_service(browser: CatalogBrowser = Depends(get_browser)) -> PokeApiService:
    return browser.service


@router.get("/view", response_model=BrowseView)
async def current_view(browser: CatalogBrowser = Depends(get_browser)) -> BrowseView:
    """Return the current page; the first call triggers the initial load."""
    if not browser.loaded:
        return await browser.refresh()
    return browser.view


@router.put("/view/query", response_model=BrowseView)
async def update_query(
    query: str = Body(..., embed=True, max_length=100),
    browser: CatalogBrowser = Depends(get_browser),
) -> BrowseView:
    return await browser.set_query(query)


@router.put("/view/page", response_model=BrowseView)
async def update_page(
    page: int = Body(..., embed=True, ge=1),
    browser: CatalogBrowser = Depends(get_browser),
) -> BrowseView:
    return await browser.set_page(page)


@router.post("/view/reload", response_model=BrowseView)
async def reload_view(browser: CatalogBrowser = Depends(get_browser)) -> BrowseView:
    return await browser.reload()


@router.get("/creatures/{creature_id}", response_model=Creature)
async def get_creature(
    creature_id: int = Path(..., ge=1),
    service: PokeApiService = Depends(get_service),
) -> Creature:
    try:
        return await service.fetch_record(creature_id)
    except UpstreamError as exc:
        if exc.status == 404:
            raise HTTPException(status_code=404, detail="Creature not found")
        raise HTTPException(status_code=502, detail="Failed to load Pokémon data")
    except DataShapeError:
        raise HTTPException(status_code=502, detail="Unexpected data from PokeAPI")


@router.get("/moves/{move_id}/description")
async def get_move_description(
    move_id: int = Path(..., ge=1),
    service: PokeApiService = Depends(get_service),
):
    """Describe a move; unavailable details yield a placeholder text."""
    description = await service.describe_move(service.client.url(f"move/{move_id}/"))
    return {"id": move_id, "description": description}
