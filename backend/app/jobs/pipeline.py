"""Narrative detection pipeline orchestrator.

Coordinates one stateless detection run:
1. Collection (on-chain, repository, social), sequential
2. Signal extraction per source
3. Narrative aggregation and confidence sort

Architecture:
- Cron-driven (stateless runs, nothing carried between runs)
- Failure-tolerant (a failed source degrades to its empty payload)

Execution Flow:
    NarrativePipeline.run()
    ├── Phase 1: Collection
    │   ├── Helius  → on-chain payload
    │   ├── GitHub  → repository payload
    │   └── Social  → post list
    ├── Phase 2: Extraction
    │   └── payloads → flat Signal list (on-chain, repository, social order)
    └── Phase 3: Aggregation
        └── one Narrative per definition, sorted by confidence
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from app.core.config import Settings
from derive.core.aggregation import DetectionResult, detect_narratives
from derive.core.extractors import (
    extract_onchain_signals,
    extract_repository_signals,
    extract_social_signals,
)
from derive.core.signals import Signal
from ingestion.adapters.github_adapter import GitHubCollector, empty_repository_payload
from ingestion.adapters.helius_adapter import HeliusCollector, empty_onchain_payload
from ingestion.adapters.social_adapter import SocialCollector
from ingestion.core.adapter import BaseCollector
from ingestion.core.fetch_context import FetchContext
from ingestion.core.source_registry import SourceRegistry


UTC = timezone.utc

logger = logging.getLogger("solradar.pipeline")


@dataclass(frozen=True, slots=True)
class CollectedPayloads:
    onchain: dict[str, Any]
    repository: dict[str, Any]
    social: list[dict[str, Any]]


def build_collectors(
    settings: Settings,
    registry: SourceRegistry,
    *,
    context: Optional[FetchContext] = None,
) -> tuple[HeliusCollector, GitHubCollector, SocialCollector]:
    ctx = context or FetchContext(
        timeout_seconds=settings.http_timeout_seconds,
        jitter_seconds_min=1.0,
        jitter_seconds_max=3.0,
    )
    return (
        HeliusCollector(registry.helius, api_key=settings.helius_api_key, context=ctx),
        GitHubCollector(
            registry.github,
            token=settings.github_token,
            lookback_days=settings.lookback_days,
            context=ctx,
        ),
        SocialCollector(registry.social, context=ctx),
    )


class NarrativePipeline:
    def __init__(
        self,
        onchain: BaseCollector,
        repository: BaseCollector,
        social: BaseCollector,
    ) -> None:
        self.onchain = onchain
        self.repository = repository
        self.social = social

    async def _collect_one(self, collector: BaseCollector, fallback: Callable[[], Any]) -> Any:
        """Await one collector; any escape degrades to the fallback payload."""
        name = getattr(collector, "source_type", type(collector).__name__)
        logger.info(f"Collecting {name}")
        try:
            payload = await asyncio.to_thread(collector.collect)
        except Exception:  # noqa: BLE001
            logger.exception(f"Collector {name} raised; continuing with empty payload")
            return fallback()
        return payload if payload is not None else fallback()

    async def collect(self) -> CollectedPayloads:
        # Sequential by design: one source at a time, no fan-out.
        onchain = await self._collect_one(self.onchain, empty_onchain_payload)
        repository = await self._collect_one(self.repository, empty_repository_payload)
        social = await self._collect_one(self.social, list)
        return CollectedPayloads(onchain=onchain, repository=repository, social=social)

    @staticmethod
    def extract(payloads: CollectedPayloads) -> list[Signal]:
        return [
            *extract_onchain_signals(payloads.onchain),
            *extract_repository_signals(payloads.repository),
            *extract_social_signals(payloads.social),
        ]

    async def run(self) -> DetectionResult:
        started = time.monotonic()
        payloads = await self.collect()
        signals = self.extract(payloads)
        result = detect_narratives(signals, now=datetime.now(tz=UTC).isoformat())
        volume = payloads.onchain.get("transactionVolume") or {}

        logger.info(
            json.dumps(
                {
                    "event": "detection_run_summary",
                    "timestamp": result.timestamp,
                    "slot": payloads.onchain.get("slot", 0),
                    "tx_count": volume.get("txCount", 0),
                    "volume_spike": bool(volume.get("volumeSpike")),
                    "signals_count": len(signals),
                    "narratives_count": len(result.narratives),
                    "detected_count": sum(1 for n in result.narratives if not n.is_placeholder),
                    "duration_seconds": round(time.monotonic() - started, 2),
                }
            )
        )
        return result
