"""
Fetch the menu feed once (no cache) and dump the meal records as JSON.

Usage
-----

    # print to stdout
    python -m scripts.dump_menu

    # other feed URL, write to a file
    python -m scripts.dump_menu --url https://example.org/SP-UTF8.xml --output menu.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List

from config import get_settings
from core.errors import FeedError
from core.menu_feed import load_menu


async def _dump(url: str | None) -> List[dict[str, Any]]:
    settings = get_settings()
    if url:
        settings = settings.model_copy(update={"feed_url": url})
    meals = await load_menu(settings)
    return [m.model_dump(by_alias=True) for m in meals]


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--url", help="feed URL (defaults to MENSA_FEED_URL)")
    parser.add_argument(
        "--output",
        type=Path,
        help="write JSON here instead of stdout",
    )
    args = parser.parse_args(argv)

    try:
        meals = asyncio.run(_dump(args.url))
    except FeedError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    text = json.dumps(meals, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"✓ wrote {len(meals)} meals to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
