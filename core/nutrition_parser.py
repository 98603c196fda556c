"""
core/nutrition_parser.py
────────────────────────────────────────────────────────────────────────
Pulls calories + macros out of the feed's free-text nutrition attribute,
e.g.

    Brennwert=1046 kJ (250 kcal) Eiweiß=10,5 g Kohlenhydrate=30,2 g Fett=8,1 g
    Energy=1046 kJ (250 kcal) Protein=10,5 g Carbohydrates=30,2 g Fat=8,1 g

Each quantity has an ordered list of (language, pattern) pairs; the first
pattern that matches wins.  Every pattern captures its number in the
``value`` group.  A quantity without a match keeps its default – this
module never raises on bad input.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Tuple

from core.models.meal import Nutrition

_LOG = logging.getLogger(__name__)

_NUM = r"\d+[,.]?\d*"

NUTRITION_PATTERNS: Dict[str, Tuple[Tuple[str, re.Pattern[str]], ...]] = {
    "calories": (
        ("de", re.compile(r"Brennwert=\d+\s*kJ\s*\((?P<value>\d+)\s*kcal\)")),
        ("en", re.compile(r"Energy=\d+\s*kJ\s*\((?P<value>\d+)\s*kcal\)")),
    ),
    "protein": (
        ("de", re.compile(rf"Eiweiß=(?P<value>{_NUM})\s*g")),
        ("en", re.compile(rf"Protein=(?P<value>{_NUM})\s*g")),
    ),
    "carbs": (
        ("de", re.compile(rf"Kohlenhydrate=(?P<value>{_NUM})\s*g")),
        ("en", re.compile(rf"Carbohydrates=(?P<value>{_NUM})\s*g")),
    ),
    "fat": (
        ("de", re.compile(rf"Fett=(?P<value>{_NUM})\s*g")),
        ("en", re.compile(rf"Fat=(?P<value>{_NUM})\s*g")),
    ),
}


def match_quantity(field: str, text: str) -> Tuple[str, str] | None:
    """Return ``(language, raw_value)`` of the first matching pattern."""
    for lang, pattern in NUTRITION_PATTERNS[field]:
        m = pattern.search(text)
        if m:
            return lang, m.group("value")
    return None


def parse_nutrition(text: str | None) -> Nutrition:
    if not text or not text.strip():
        _LOG.debug("no nutrition text provided")
        return Nutrition()

    clean = text.strip()
    values: Dict[str, str] = {}
    for field in NUTRITION_PATTERNS:
        hit = match_quantity(field, clean)
        if hit is None:
            _LOG.debug("nutrition field %r not found in %r", field, clean)
            continue
        lang, raw = hit
        values[field] = raw.replace(",", ".")
        _LOG.debug("nutrition field %r=%s (%s)", field, values[field], lang)

    return Nutrition(**values)
