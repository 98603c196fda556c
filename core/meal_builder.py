"""
core/meal_builder.py
────────────────────────────────────────────────────────────────────────
Turns one raw feed row (attribute name → string) into a `MealRecord`.

Only two things drop a row: a location outside the allow-list and a
missing meal name.  Everything else is best-effort – a price, CO2 or
nutrition value that does not parse falls back to its default.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Collection, List, Mapping

from core.models.meal import MealRecord, Price
from core.nutrition_parser import parse_nutrition

_LOG = logging.getLogger(__name__)

ALLOWED_LOCATIONS: tuple[str, ...] = ("Mensa Campus Linden", "Hauptmensa", "Contine")

# feed attribute names
DATE = "DATUM"
LOCATION = "MENSA"
NAME = "BESCHREIBUNG"
NUTRITION = "NAEHRWERTE"
ALLERGENS = "KENNZEICHNUNG"
PRICE_STUDENT = "PREIS_STUDENT"
PRICE_EMPLOYEE = "PREIS_BEDIENSTETER"
PRICE_GUEST = "PREIS_GAST"
CO2_RATING = "EXTINFO_CO2_BEWERTUNG"
CO2_VALUE = "EXTINFO_CO2_WERT"
CO2_SAVINGS = "EXTINFO_CO2_EINSPARUNG"

# leading decimal number ("3.5 €" → 3.5)
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


# ───────────────────────────── primitives ───────────────────────────── #
def parse_decimal(raw: str | None, decimal_comma: bool = True) -> float | None:
    """
    Parse a feed number.

    With `decimal_comma` the first comma counts as the decimal point
    ("3,50" → 3.5); without it parsing stops at the comma ("312,5" → 312).
    Returns None when `raw` is absent, has no leading number or
    overflows to infinity.
    """
    if raw is None:
        return None
    if decimal_comma:
        raw = raw.replace(",", ".", 1)
    m = _LEADING_NUMBER.match(raw)
    if not m:
        return None
    value = float(m.group(1))
    return value if math.isfinite(value) else None


def format_price(raw: str | None) -> str:
    value = parse_decimal(raw)
    if value is None:
        if raw:
            _LOG.debug("unparsable price %r – using 0.00", raw)
        value = 0.0
    return f"{value:.2f}"


def split_allergens(raw: str | None) -> List[str]:
    return [tok.strip() for tok in (raw or "").split(",") if tok.strip()]


# ───────────────────────────── builder ──────────────────────────────── #
def build_meal(
    row: Mapping[str, str],
    allowed_locations: Collection[str] = ALLOWED_LOCATIONS,
) -> MealRecord | None:
    location = row.get(LOCATION) or ""
    if location not in allowed_locations:
        _LOG.debug("skipping row for location %r", location)
        return None

    name = row.get(NAME) or ""
    if not name.strip():
        _LOG.warning("skipping row for %s dated %s: missing name", location, row.get(DATE))
        return None

    nutrition = parse_nutrition(row.get(NUTRITION))
    if nutrition.is_empty:
        _LOG.warning("no nutrition values found for %r", name)

    # CO2 figures are read up to the first comma, unlike prices
    co2_value = parse_decimal(row.get(CO2_VALUE), decimal_comma=False)
    co2_savings = parse_decimal(row.get(CO2_SAVINGS), decimal_comma=False)

    return MealRecord(
        date=row.get(DATE) or "",
        location=location,
        name=name,
        price=Price(
            student=format_price(row.get(PRICE_STUDENT)),
            employee=format_price(row.get(PRICE_EMPLOYEE)),
            guest=format_price(row.get(PRICE_GUEST)),
        ),
        nutrition=nutrition,
        allergens=split_allergens(row.get(ALLERGENS)),
        co2_rating=row.get(CO2_RATING) or "",
        co2_value=co2_value if co2_value is not None else 0,
        is_climate_friendly=(co2_savings or 0) > 0,
    )
