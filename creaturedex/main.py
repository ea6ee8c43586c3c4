# creaturedex/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog.browser import CatalogBrowser
from .catalog.pokeapi_client import PokeApiClient
from .catalog.pokeapi_service import PokeApiService
from .config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = PokeApiClient(settings)
    service = PokeApiService(client, settings)
    app.state.browser = CatalogBrowser(service, page_size=settings.page_size)
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(
    title="Creaturedex",
    description=(
        "Browse and search the PokeAPI creature catalogue: paginated "
        "listing, name search across the whole catalogue and enriched "
        "per-creature details."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(catalog_router)


# Quick liveness check
@app.get("/")
def health_check():
    return {"status": "ok"}
