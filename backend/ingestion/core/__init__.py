"""Ingestion core primitives for collectors.

- Collectors fetch and shape raw payloads only; no scoring
- Every collector degrades to an empty payload on failure
"""

from ingestion.core.adapter import BaseCollector
from ingestion.core.errors import CollectionError, FetchError, ParseError
from ingestion.core.fetch_context import FetchContext
from ingestion.core.source_registry import SourceRegistry, load_sources_yaml

__all__ = [
    "BaseCollector",
    "CollectionError",
    "FetchError",
    "ParseError",
    "FetchContext",
    "SourceRegistry",
    "load_sources_yaml",
]
