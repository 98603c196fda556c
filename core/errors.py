"""
core/errors.py
────────────────────────────────────────────────────────────────────────
Document-level failures of a menu refresh.

Row-level problems (unknown location, missing name, unparsable numbers)
are never raised – the builder falls back to defaults or drops the row.
"""

from __future__ import annotations


class FeedError(Exception):
    """Base class for anything that aborts a whole refresh."""


class FetchError(FeedError):
    """Network failure, timeout, bad status or empty body from upstream."""


class ParseError(FeedError):
    """Upstream body could not be parsed as the row-oriented XML feed."""
