from __future__ import annotations

"""Controlled collection errors.

Intent:
- Collection must be failure-tolerant and never crash a detection run.
- Collectors raise these internally and catch them at `collect()`.
- A failed source degrades to its empty payload; the run continues.
"""


class CollectionError(RuntimeError):
    """Base error for collection; should be caught and logged, not propagated."""


class FetchError(CollectionError):
    """Raised when a source fetch fails (network, HTTP status, JSON-RPC error)."""


class ParseError(CollectionError):
    """Raised when a response does not have the expected shape."""
