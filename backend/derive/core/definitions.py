from __future__ import annotations

"""Static narrative definitions.

Rules:
- The table is fixed at import time and never mutated.
- Every output Narrative maps 1:1 to exactly one definition, in declaration order.
- Keywords are matched as case-insensitive substrings; original casing is kept for display.
"""

from dataclasses import dataclass
from typing import Iterable

from derive.core.errors import DefinitionError


@dataclass(frozen=True, slots=True)
class NarrativeDefinition:
    id: str
    name: str
    description: str
    keywords: tuple[str, ...]

    def lowered_keywords(self) -> frozenset[str]:
        return frozenset(k.lower() for k in self.keywords)


NARRATIVE_DEFINITIONS: tuple[NarrativeDefinition, ...] = (
    NarrativeDefinition(
        id="defi-innovation",
        name="DeFi Innovation",
        description="Decentralized finance protocols and innovations",
        keywords=(
            "yield", "liquidity", "AMM", "vault", "lending", "borrow",
            "stake", "farm", "dex", "swap", "perp", "derivative",
        ),
    ),
    NarrativeDefinition(
        id="gaming-nft",
        name="Gaming & NFT",
        description="Blockchain gaming and NFT ecosystems",
        keywords=(
            "game", "gaming", "NFT", "metaverse", "play-to-earn",
            "P2E", "collectible", "avatar", "virtual", "world",
        ),
    ),
    NarrativeDefinition(
        id="infrastructure",
        name="Infrastructure",
        description="Core blockchain infrastructure and tooling",
        keywords=(
            "validator", "RPC", "indexer", "oracle", "bridge",
            "layer2", "rollup", "sequencer", "node", "network",
        ),
    ),
    NarrativeDefinition(
        id="ai-crypto",
        name="AI x Crypto",
        description="Artificial intelligence meets blockchain",
        keywords=(
            "AI", "agent", "model", "inference", "ML",
            "machine learning", "neural", "autonomous", "bot", "intelligence",
        ),
    ),
    NarrativeDefinition(
        id="social-consumer",
        name="Social & Consumer",
        description="Social platforms and consumer applications",
        keywords=(
            "social", "community", "DAO", "governance", "vote",
            "profile", "content", "creator", "fan", "engagement",
        ),
    ),
    NarrativeDefinition(
        id="dev-tools",
        name="Developer Tools",
        description="Tools and infrastructure for developers",
        keywords=(
            "SDK", "framework", "CLI", "testing", "debug",
            "deploy", "build", "compile", "library", "API",
        ),
    ),
)


def validate_definitions(definitions: Iterable[NarrativeDefinition]) -> None:
    """Reject duplicate ids and empty vocabularies."""
    seen: set[str] = set()
    for d in definitions:
        if not d.id or d.id in seen:
            raise DefinitionError(f"Duplicate or empty narrative id: {d.id!r}")
        if not d.keywords:
            raise DefinitionError(f"Narrative {d.id!r} has an empty vocabulary")
        seen.add(d.id)


def get_definition(narrative_id: str) -> NarrativeDefinition | None:
    for d in NARRATIVE_DEFINITIONS:
        if d.id == narrative_id:
            return d
    return None


validate_definitions(NARRATIVE_DEFINITIONS)
