from __future__ import annotations

"""BaseCollector contract.

Non-negotiable rules:
- Collector MUST swallow its own exceptions.
- Collector MUST return its empty payload on failure, never None.
- Collector MUST NOT score or classify; it only shapes raw data.
"""

import abc
import logging
from typing import Any

from ingestion.core.errors import CollectionError
from ingestion.core.fetch_context import FetchContext


class BaseCollector(abc.ABC):
    """Abstract collector for one source kind."""

    source_type: str  # "helius" | "github" | "social"

    def __init__(self, context: FetchContext | None = None) -> None:
        self.context = context or FetchContext()
        self.logger = logging.getLogger(f"solradar.ingestion.{self.source_type}")

    @abc.abstractmethod
    def fetch(self) -> Any:
        """Fetch and shape the payload. May raise CollectionError."""

    @abc.abstractmethod
    def empty_payload(self) -> Any:
        """Payload returned when the source is unavailable."""

    def collect(self) -> Any:
        try:
            return self.fetch()
        except CollectionError as e:
            self.logger.warning(f"{self.source_type} collection failed: {e}")
        except Exception:  # noqa: BLE001
            self.logger.exception(f"{self.source_type} collection crashed")
        return self.empty_payload()
