"""
Runtime settings for the creature catalogue.

Values are read from environment variables prefixed with
``CREATUREDEX_`` (or from a local ``.env`` file).  The defaults match
the public PokeAPI and the pacing used by the browsing front-end:
abilities are requested 100 ms apart, moves 50 ms apart, and each move
lookup is abandoned after five seconds.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CREATUREDEX_",
        env_file=".env",
        case_sensitive=False,
    )

    # Upstream API
    api_base_url: str = "https://pokeapi.co/api/v2"
    user_agent: str = "creaturedex/1.0 (+https://pokeapi.co)"
    request_timeout: float = 10.0

    # Browsing
    page_size: int = 12
    index_limit: int = 2000

    # Enrichment
    ability_cap: int = 4
    move_cap: int = 20
    ability_stagger: float = 0.1
    move_stagger: float = 0.05
    move_timeout: float = 5.0

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
