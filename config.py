"""
Centralised settings loader.

Every value can be overridden with a ``MENSA_``-prefixed env-var
(e.g. ``MENSA_CACHE_TTL=600``) or a local ``.env`` file; the defaults are
the fixed feed constants the service was built around.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.meal_builder import ALLOWED_LOCATIONS
from core.menu_cache import DEFAULT_TTL_SECONDS
from services.feed import DEFAULT_TIMEOUT_SECONDS, FEED_URL, USER_AGENT


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"

    # ─── upstream feed ───────────────────────────────────────────────
    feed_url: str = FEED_URL
    feed_timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    feed_user_agent: str = USER_AGENT

    # ─── menu cache / filtering ─────────────────────────────────────
    cache_ttl: float = Field(DEFAULT_TTL_SECONDS, gt=0)
    allowed_locations: list[str] = list(ALLOWED_LOCATIONS)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        env_prefix="MENSA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def get_settings() -> _Settings:  # pragma: no cover
    return _Settings()


settings: _Settings = get_settings()
