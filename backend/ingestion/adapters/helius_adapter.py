from __future__ import annotations

"""Helius (Solana JSON-RPC) collector.

Scope:
- Network stats: `getSlot`, `getBlockHeight`, and a signature sample of a
  busy address (`getSignaturesForAddress`) → `slot`, `blockHeight`,
  `transactionVolume {txCount, txPerSecond, volumeSpike}`.
- Watched mints: DAS `getAsset` → fungible tokens become `tokenTransfers`,
  NFT interfaces become `nftEvents` (grouped by collection).
- Watched programs: `getSignaturesForAddress` → a program with recent
  signatures becomes a `programInteractions` entry.

Non-goals:
- No scoring or keyword matching; extractors own that.
- No transaction decoding beyond what DAS returns.

Partial success: a failing stat, mint or program is logged and skipped.
"""

import os
from datetime import datetime, timezone
from typing import Any, Optional

from ingestion.core.adapter import BaseCollector
from ingestion.core.errors import CollectionError, FetchError, ParseError
from ingestion.core.fetch_context import FetchContext
from ingestion.core.source_registry import HeliusSourceConfig, WatchedMint, WatchedProgram


UTC = timezone.utc

NFT_INTERFACES = frozenset({"V1_NFT", "V2_NFT", "LEGACY_NFT", "ProgrammableNFT", "MplCoreAsset"})


def empty_transaction_volume() -> dict[str, Any]:
    return {"txCount": 0, "txPerSecond": 0.0, "volumeSpike": False}


def empty_onchain_payload(timestamp: Optional[str] = None) -> dict[str, Any]:
    return {
        "timestamp": timestamp or datetime.now(tz=UTC).isoformat(),
        "slot": 0,
        "blockHeight": 0,
        "transactionVolume": empty_transaction_volume(),
        "tokenTransfers": [],
        "nftEvents": [],
        "programInteractions": [],
    }


def transaction_volume(tx_count: int, *, window_seconds: float, spike_tps: float) -> dict[str, Any]:
    """Rough throughput from a fixed-size signature sample assumed to span `window_seconds`."""
    tps = tx_count / window_seconds if window_seconds > 0 else 0.0
    return {"txCount": tx_count, "txPerSecond": tps, "volumeSpike": tps > spike_tps}


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"helius: {what} is {type(value).__name__}, expected object")
    return value


def shape_asset(watched: WatchedMint, asset: Any) -> tuple[str, dict[str, Any]]:
    """Return ("nft", nftEvent) or ("token", tokenTransfer) for a DAS asset."""
    if not isinstance(asset, dict):
        raise ParseError(f"helius: getAsset({watched.mint}) returned no asset")

    interface = str(asset.get("interface") or "")
    content = _mapping(asset.get("content"), f"getAsset({watched.mint}).content")
    metadata = _mapping(content.get("metadata"), f"getAsset({watched.mint}).content.metadata")

    if interface in NFT_INTERFACES:
        grouping = asset.get("grouping") or []
        if not isinstance(grouping, list):
            raise ParseError(f"helius: getAsset({watched.mint}).grouping is not a list")
        collection = None
        for group in grouping:
            if isinstance(group, dict) and group.get("group_key") == "collection":
                collection = group.get("group_value")
                break
        return "nft", {"collection": collection or watched.mint}

    token_info = _mapping(asset.get("token_info"), f"getAsset({watched.mint}).token_info")
    return "token", {
        "tokenName": metadata.get("name") or watched.label,
        "tokenSymbol": metadata.get("symbol") or token_info.get("symbol"),
        "mint": watched.mint,
    }


class HeliusCollector(BaseCollector):
    source_type = "helius"

    def __init__(
        self,
        config: HeliusSourceConfig,
        *,
        api_key: Optional[str] = None,
        context: Optional[FetchContext] = None,
    ) -> None:
        super().__init__(context)
        self.config = config
        self._api_key = api_key if api_key is not None else os.environ.get("HELIUS_API_KEY", "")

    def empty_payload(self) -> dict[str, Any]:
        return empty_onchain_payload()

    def _endpoint(self) -> str:
        sep = "&" if "?" in self.config.rpc_url else "?"
        return f"{self.config.rpc_url}{sep}api-key={self._api_key}"

    def _program_interaction(self, program: WatchedProgram) -> Optional[dict[str, Any]]:
        result = self.context.rpc_call(
            self._endpoint(),
            "getSignaturesForAddress",
            [program.id, {"limit": self.config.signature_limit}],
            source_key=f"helius:{program.id}",
        )
        if not isinstance(result, list):
            raise ParseError(f"helius: getSignaturesForAddress({program.id}) returned {type(result).__name__}")
        if not result:
            return None
        return {
            "programName": program.name,
            "programId": program.id,
            "recentSignatures": len(result),
        }

    def _rpc_int(self, method: str) -> int:
        result = self.context.rpc_call(self._endpoint(), method, source_key=f"helius:{method}")
        if isinstance(result, bool) or not isinstance(result, int):
            raise ParseError(f"helius: {method} returned {type(result).__name__}")
        return result

    def _sample_volume(self) -> dict[str, Any]:
        result = self.context.rpc_call(
            self._endpoint(),
            "getSignaturesForAddress",
            [self.config.volume_sample_address, {"limit": self.config.volume_sample_limit}],
            source_key="helius:volume",
        )
        if not isinstance(result, list):
            raise ParseError(f"helius: volume sample returned {type(result).__name__}")
        return transaction_volume(
            len(result),
            window_seconds=self.config.volume_window_seconds,
            spike_tps=self.config.volume_spike_tps,
        )

    def _network_stats(self, payload: dict[str, Any]) -> None:
        for key, read in (
            ("slot", lambda: self._rpc_int("getSlot")),
            ("blockHeight", lambda: self._rpc_int("getBlockHeight")),
            ("transactionVolume", self._sample_volume),
        ):
            try:
                payload[key] = read()
            except CollectionError as e:
                self.logger.warning(f"Skipping network stat {key}: {e}")

    def fetch(self) -> dict[str, Any]:
        payload = self.empty_payload()
        if not self.config.enabled:
            self.logger.info("helius source disabled; skipping")
            return payload
        if not self._api_key:
            raise FetchError("helius: HELIUS_API_KEY not set")

        self._network_stats(payload)

        for watched in self.config.watched_mints:
            try:
                asset = self.context.rpc_call(
                    self._endpoint(), "getAsset", {"id": watched.mint}, source_key=f"helius:{watched.mint}"
                )
                kind, item = shape_asset(watched, asset)
            except CollectionError as e:
                self.logger.warning(f"Skipping mint {watched.mint}: {e}")
                continue
            if kind == "nft":
                payload["nftEvents"].append(item)
            else:
                payload["tokenTransfers"].append(item)

        for program in self.config.watched_programs:
            try:
                interaction = self._program_interaction(program)
            except CollectionError as e:
                self.logger.warning(f"Skipping program {program.id}: {e}")
                continue
            if interaction is not None:
                payload["programInteractions"].append(interaction)

        self.logger.info(
            f"helius collected slot={payload['slot']} txs={payload['transactionVolume']['txCount']} "
            f"tokens={len(payload['tokenTransfers'])} "
            f"nfts={len(payload['nftEvents'])} programs={len(payload['programInteractions'])}"
        )
        return payload
