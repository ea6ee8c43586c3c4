"""
Shared fixtures: an in-process fake of the PokeAPI endpoints served
through ``httpx.MockTransport``.
"""
import asyncio
from typing import Dict, List, Optional, Set

import httpx
import pytest

from creaturedex.catalog.browser import CatalogBrowser
from creaturedex.catalog.pokeapi_client import PokeApiClient
from creaturedex.catalog.pokeapi_service import PokeApiService
from creaturedex.config import Settings

BASE = "https://pokeapi.test/api/v2"
PREFIX = "/api/v2/"


class FakePokeApi:
    """Serves listing, creature, ability and move payloads for tests."""

    def __init__(self, names: List[str], abilities: int = 6, moves: int = 25) -> None:
        self.names = list(names)
        self.abilities = abilities
        self.moves = moves
        self.failing: Set[str] = set()
        self.slow: Set[str] = set()
        self.offline_index = False
        self.offline_listing = False
        self.gates: Dict[int, asyncio.Event] = {}
        self.requests: List[str] = []
        self.index_requests = 0
        self.cancelled: List[str] = []
        self.creature_overrides: Dict[str, object] = {}

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len(PREFIX):].strip("/")
        self.requests.append(path)
        if path in self.slow:
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                self.cancelled.append(path)
                raise
        if path in self.failing:
            return httpx.Response(500, json={"detail": "boom"})

        parts = path.split("/")
        if parts == ["pokemon"]:
            return await self._listing(request)
        if len(parts) == 2 and parts[0] == "pokemon":
            return self._creature(int(parts[1]))
        if len(parts) == 2 and parts[0] == "ability":
            return httpx.Response(200, json=self._ability(int(parts[1])))
        if len(parts) == 2 and parts[0] == "move":
            return httpx.Response(200, json=self._move(int(parts[1])))
        return httpx.Response(404, json={"detail": "not found"})

    async def _listing(self, request: httpx.Request) -> httpx.Response:
        limit = int(request.url.params["limit"])
        offset = int(request.url.params["offset"])
        if limit == 2000:
            self.index_requests += 1
        if limit == 2000 and self.offline_index:
            raise httpx.ConnectError("index unreachable", request=request)
        if limit != 2000 and self.offline_listing:
            raise httpx.ConnectError("listing unreachable", request=request)
        gate = self.gates.get(offset)
        if gate is not None:
            await gate.wait()
        results = [
            {"name": name, "url": f"{BASE}/pokemon/{i + 1}/"}
            for i, name in enumerate(self.names)
        ][offset:offset + limit]
        return httpx.Response(200, json={"count": len(self.names), "results": results})

    def _creature(self, identifier: int) -> httpx.Response:
        if not 1 <= identifier <= len(self.names):
            return httpx.Response(404, json={"detail": "not found"})
        payload = {
            "id": identifier,
            "name": self.names[identifier - 1],
            "types": [{"slot": 1, "type": {"name": "grass"}}, {"slot": 2, "type": {"name": "poison"}}],
            "stats": [
                {"base_stat": 45, "stat": {"name": "hp"}},
                {"base_stat": 49, "stat": {"name": "attack"}},
            ],
            "sprites": {"other": {"official-artwork": {"front_default": f"https://img.test/{identifier}.png"}}},
            "abilities": [
                {
                    "ability": {"name": f"ability-{k}", "url": f"{BASE}/ability/{k}/"},
                    "is_hidden": k == 2,
                    "slot": k,
                }
                for k in range(1, self.abilities + 1)
            ],
            "moves": [
                {"move": {"name": f"move-{k}", "url": f"{BASE}/move/{k}/"}}
                for k in range(1, self.moves + 1)
            ],
        }
        payload.update(self.creature_overrides)
        return httpx.Response(200, json=payload)

    @staticmethod
    def _ability(identifier: int) -> dict:
        return {
            "effect_entries": [
                {"effect": f"Wirkung {identifier}", "language": {"name": "de"}},
                {"effect": f"Ability effect {identifier}", "language": {"name": "en"}},
            ]
        }

    @staticmethod
    def _move(identifier: int) -> dict:
        return {
            "effect_entries": [
                {
                    "effect": f"Long effect {identifier}",
                    "short_effect": f"Short effect {identifier}",
                    "language": {"name": "en"},
                }
            ],
            "power": 40,
            "accuracy": 100,
            "pp": 35,
            "type": {"name": "grass"},
        }


def make_settings(**overrides) -> Settings:
    values = dict(
        api_base_url=BASE,
        ability_stagger=0,
        move_stagger=0,
        move_timeout=0.2,
        index_limit=2000,
        page_size=12,
    )
    values.update(overrides)
    return Settings(**values)


def make_service(fake: FakePokeApi, settings: Optional[Settings] = None) -> PokeApiService:
    settings = settings or make_settings()
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    return PokeApiService(PokeApiClient(settings, client=http), settings)


@pytest.fixture
def fake_api():
    return FakePokeApi(["bulbasaur", "ivysaur", "venusaur-mega"])


@pytest.fixture
def service(fake_api):
    return make_service(fake_api)


@pytest.fixture
def browser(service):
    return CatalogBrowser(service, page_size=12)
