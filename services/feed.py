# services/feed.py
from __future__ import annotations

import logging

import httpx

from core.errors import FetchError

_LOG = logging.getLogger(__name__)

# ───────────── Upstream ─────────────
FEED_URL = "https://www.studentenwerk-hannover.de/fileadmin/user_upload/Speiseplan/SP-UTF8.xml"
USER_AGENT = "MensaApp/1.0"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _headers(user_agent: str) -> dict[str, str]:
    return {"Accept": "application/xml", "User-Agent": user_agent}


# ───────────── Fetch (async, single attempt) ─────────────
async def fetch_feed(
    url: str = FEED_URL,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = USER_AGENT,
    client: httpx.AsyncClient | None = None,
) -> str:
    """
    GET the menu document and return its body text.

    Raises `FetchError` on transport errors, timeouts, non-2xx responses
    and empty bodies.  There is no retry – the next cache miss tries again.
    """
    _LOG.info("fetching menu feed from %s", url)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own:
                resp = await own.get(url, headers=_headers(user_agent))
        else:
            resp = await client.get(url, headers=_headers(user_agent), timeout=timeout)
        resp.raise_for_status()
    except httpx.TimeoutException as exc:
        raise FetchError(f"menu feed timed out after {timeout:g}s: {exc}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"menu feed request failed: {exc}") from exc

    body = resp.text
    if not body.strip():
        raise FetchError("menu feed returned an empty body")

    _LOG.info("menu feed fetched (%d bytes)", len(resp.content))
    return body
