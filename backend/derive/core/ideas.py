from __future__ import annotations

"""Project idea policy.

Known narratives get their fixed idea list verbatim. Anything else gets three
template ideas filled from the first trending keywords.
"""

from typing import Mapping, Sequence


PROJECT_IDEAS: Mapping[str, tuple[str, ...]] = {
    "defi-innovation": (
        "Build a yield aggregator that auto-compounds across Solana DeFi protocols",
        "Create a decentralized lending platform with isolated risk markets",
        "Develop a perpetual DEX with advanced order types",
        "Build a liquidity mining analytics dashboard",
    ),
    "gaming-nft": (
        "Create a no-code NFT collection launcher with built-in marketplace",
        "Build a gaming guild management platform with scholarship tracking",
        "Develop an on-chain achievement system for games",
        "Create a metaverse land rental marketplace",
    ),
    "infrastructure": (
        "Build a decentralized RPC load balancer for Solana",
        "Create a validator performance monitoring dashboard",
        "Develop a bridge aggregator for cross-chain transfers",
        "Build an oracle comparison and aggregation service",
    ),
    "ai-crypto": (
        "Create an AI-powered trading assistant with on-chain execution",
        "Build a decentralized model marketplace for AI agents",
        "Develop an autonomous agent for DeFi yield optimization",
        "Create an AI content moderator for DAO governance",
    ),
    "social-consumer": (
        "Build a decentralized social graph protocol",
        "Create a creator monetization platform with micro-tipping",
        "Develop a DAO governance participation reward system",
        "Build a reputation-based social discovery app",
    ),
    "dev-tools": (
        "Create a Solana program testing framework with auto-generated tests",
        "Build a no-code contract deployment platform",
        "Develop a real-time program monitoring and alerting tool",
        "Create an IDE extension for Solana development",
    ),
}

FALLBACK_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("Build a {} analytics dashboard", "Solana"),
    ("Create a {} automation tool", "web3"),
    ("Develop a {} integration service", "blockchain"),
)


def generate_project_ideas(narrative_id: str, trending_keywords: Sequence[str]) -> list[str]:
    fixed = PROJECT_IDEAS.get(narrative_id)
    if fixed is not None:
        return list(fixed)

    ideas: list[str] = []
    for i, (template, default) in enumerate(FALLBACK_TEMPLATES):
        keyword = trending_keywords[i] if i < len(trending_keywords) else ""
        ideas.append(template.format(keyword or default))
    return ideas
