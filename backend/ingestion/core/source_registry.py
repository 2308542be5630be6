from __future__ import annotations

"""Source registry and YAML loader.

Intent:
- Sources on/off and watch lists controllable without code changes.
- Missing sections fall back to defaults; a malformed file is fatal.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_SOCIAL_KEYWORDS: tuple[str, ...] = (
    "solana",
    "new project",
    "launch",
    "announcement",
    "airdrop",
)


# Vote program signatures serve as the network throughput sample.
VOTE_PROGRAM_ID = "Vote111111111111111111111111111111111111111"


@dataclass(frozen=True, slots=True)
class WatchedMint:
    mint: str
    label: str | None = None


@dataclass(frozen=True, slots=True)
class WatchedProgram:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class HeliusSourceConfig:
    enabled: bool = True
    rpc_url: str = "https://mainnet.helius-rpc.com/"
    signature_limit: int = 25
    volume_sample_address: str = VOTE_PROGRAM_ID
    volume_sample_limit: int = 100
    volume_window_seconds: float = 5.0
    volume_spike_tps: float = 50.0
    watched_mints: tuple[WatchedMint, ...] = ()
    watched_programs: tuple[WatchedProgram, ...] = ()


@dataclass(frozen=True, slots=True)
class GitHubSourceConfig:
    enabled: bool = True
    api_url: str = "https://api.github.com"
    trending_query: str = "topic:solana"
    new_query: str = "solana"
    per_page: int = 20


@dataclass(frozen=True, slots=True)
class SocialSourceConfig:
    enabled: bool = True
    nitter_url: str = "https://nitter.net"
    accounts: tuple[str, ...] = ()
    keywords: tuple[str, ...] = DEFAULT_SOCIAL_KEYWORDS
    max_posts_per_account: int = 5


@dataclass(frozen=True, slots=True)
class SourceRegistry:
    helius: HeliusSourceConfig = field(default_factory=HeliusSourceConfig)
    github: GitHubSourceConfig = field(default_factory=GitHubSourceConfig)
    social: SocialSourceConfig = field(default_factory=SocialSourceConfig)


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Invalid sources.yaml: 'sources.{key}' must be a mapping.")
    return value


def _parse_helius(cfg: dict[str, Any]) -> HeliusSourceConfig:
    mints = tuple(
        WatchedMint(mint=str(m["mint"]), label=str(m["label"]) if m.get("label") else None)
        for m in cfg.get("watched_mints") or []
        if isinstance(m, dict) and m.get("mint")
    )
    programs = tuple(
        WatchedProgram(id=str(p["id"]), name=str(p.get("name") or ""))
        for p in cfg.get("watched_programs") or []
        if isinstance(p, dict) and p.get("id")
    )
    defaults = HeliusSourceConfig()
    return HeliusSourceConfig(
        enabled=bool(cfg.get("enabled", True)),
        rpc_url=str(cfg.get("rpc_url") or defaults.rpc_url),
        signature_limit=int(cfg.get("signature_limit", defaults.signature_limit)),
        volume_sample_address=str(cfg.get("volume_sample_address") or defaults.volume_sample_address),
        volume_sample_limit=int(cfg.get("volume_sample_limit", defaults.volume_sample_limit)),
        volume_window_seconds=float(cfg.get("volume_window_seconds", defaults.volume_window_seconds)),
        volume_spike_tps=float(cfg.get("volume_spike_tps", defaults.volume_spike_tps)),
        watched_mints=mints,
        watched_programs=programs,
    )


def _parse_github(cfg: dict[str, Any]) -> GitHubSourceConfig:
    defaults = GitHubSourceConfig()
    return GitHubSourceConfig(
        enabled=bool(cfg.get("enabled", True)),
        api_url=str(cfg.get("api_url") or defaults.api_url).rstrip("/"),
        trending_query=str(cfg.get("trending_query") or defaults.trending_query),
        new_query=str(cfg.get("new_query") or defaults.new_query),
        per_page=int(cfg.get("per_page", defaults.per_page)),
    )


def _parse_social(cfg: dict[str, Any]) -> SocialSourceConfig:
    defaults = SocialSourceConfig()
    keywords = cfg.get("keywords")
    return SocialSourceConfig(
        enabled=bool(cfg.get("enabled", True)),
        nitter_url=str(cfg.get("nitter_url") or defaults.nitter_url).rstrip("/"),
        accounts=tuple(str(a).lstrip("@") for a in cfg.get("accounts") or []),
        keywords=tuple(str(k) for k in keywords) if keywords else DEFAULT_SOCIAL_KEYWORDS,
        max_posts_per_account=int(cfg.get("max_posts_per_account", defaults.max_posts_per_account)),
    )


def parse_sources(raw: Any) -> SourceRegistry:
    if not isinstance(raw, dict) or not isinstance(raw.get("sources"), dict):
        raise ValueError("Invalid sources.yaml: expected top-level mapping with 'sources'.")
    sources = raw["sources"]
    return SourceRegistry(
        helius=_parse_helius(_section(sources, "helius")),
        github=_parse_github(_section(sources, "github")),
        social=_parse_social(_section(sources, "social")),
    )


def load_sources_yaml(path: Path) -> SourceRegistry:
    return parse_sources(yaml.safe_load(path.read_text(encoding="utf-8")))
