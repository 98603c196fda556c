# api/mensa.py
from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from config import get_settings
from core.errors import FeedError
from core.menu_cache import MenuCache
from core.menu_feed import load_menu
from api.schemas import ErrorOut, MealRecord

_LOG = logging.getLogger(__name__)

router = APIRouter()

LOAD_FAILED = "Failed to load the meal plan"


@lru_cache
def get_menu_cache() -> MenuCache:
    """Process-wide cache, built lazily from settings on first request."""
    settings = get_settings()
    return MenuCache(lambda: load_menu(settings), ttl=settings.cache_ttl)


@router.get(
    "",
    response_model=list[MealRecord],
    status_code=status.HTTP_200_OK,
    summary="Current meal plan for the allowed locations",
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorOut}},
)
async def list_meals(
    cache: MenuCache = Depends(get_menu_cache),
):
    try:
        return await cache.get_or_refresh()
    except FeedError as exc:
        _LOG.exception("meal plan request failed")
        body = ErrorOut(error=LOAD_FAILED, details=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )
