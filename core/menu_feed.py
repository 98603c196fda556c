"""
core/menu_feed.py
────────────────────────────────────────────────────────────────────────
Feed document → ordered list of `MealRecord`.

The upstream XML is a flat attribute-per-row packet:

    <DATAPACKET>
      <ROWDATA>
        <ROW DATUM="…" MENSA="Hauptmensa" BESCHREIBUNG="…" NAEHRWERTE="…" … />
      </ROWDATA>
    </DATAPACKET>

Responsibilities
----------------
1.   `parse_feed_rows()` – XML text → list of attribute dicts.
2.   `build_menu()`      – rows → records, via `core.meal_builder`.
3.   `load_menu()`       – fetch + parse + build; what the cache calls.

Fetch and parse failures propagate as `FetchError` / `ParseError`.
Row problems never leave this module.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, List, Mapping

import httpx

from config import _Settings, get_settings
from core.errors import ParseError
from core.meal_builder import ALLOWED_LOCATIONS, build_meal
from core.models.meal import MealRecord
from services.feed import fetch_feed

_LOG = logging.getLogger(__name__)

ROOT_TAG = "DATAPACKET"
ROW_PATH = "./ROWDATA/ROW"


def parse_feed_rows(body: str) -> List[Dict[str, str]]:
    try:
        root = ET.fromstring(body)
    except ET.ParseError as exc:
        raise ParseError(f"menu feed is not valid XML: {exc}") from exc

    if root.tag != ROOT_TAG:
        _LOG.warning("unexpected feed root <%s> – no rows read", root.tag)
        return []

    rows = [dict(el.attrib) for el in root.findall(ROW_PATH)]
    _LOG.info("menu feed parsed: %d rows", len(rows))
    return rows


def build_menu(
    rows: Iterable[Mapping[str, str]],
    allowed_locations: Iterable[str] = ALLOWED_LOCATIONS,
) -> List[MealRecord]:
    allowed = frozenset(allowed_locations)
    meals: List[MealRecord] = []
    for row in rows:
        meal = build_meal(row, allowed)
        if meal is not None:
            meals.append(meal)
    _LOG.info("menu built: %d meals", len(meals))
    return meals


async def load_menu(
    settings: _Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> List[MealRecord]:
    settings = settings or get_settings()
    body = await fetch_feed(
        settings.feed_url,
        timeout=settings.feed_timeout,
        user_agent=settings.feed_user_agent,
        client=client,
    )
    return build_menu(parse_feed_rows(body), settings.allowed_locations)
