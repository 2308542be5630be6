from __future__ import annotations

"""Signal extractors, one per source kind.

Each extractor is a pure function over an already-collected raw payload:
- Absent arrays and optional fields degrade to empty/zero, never raise.
- Items whose keyword match set is empty are dropped.
- Weights are source-local heuristics and are never renormalized across sources.

Payload shapes (camelCase, as produced by ingestion adapters):
- on-chain:   {timestamp, tokenTransfers, nftEvents, programInteractions}
- repository: {timestamp, trendingRepos, newRepos}
- social:     [{keywords, engagement, timestamp, author, content, urls}, ...]
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from derive.core.keywords import match_keywords
from derive.core.signals import Signal, SignalSource


UTC = timezone.utc

TOKEN_TRANSFER_WEIGHT = 0.3
NFT_EVENT_WEIGHT = 0.4
PROGRAM_INTERACTION_WEIGHT = 0.5
NEW_REPO_WEIGHT = 0.6

# Hardcoded association: NFT events are not text-matched.
NFT_EVENT_KEYWORDS: tuple[str, ...] = ("NFT", "collectible")

SOCIAL_CONTENT_PREVIEW_CHARS = 100


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def _sequence(value: Any) -> list[Any]:
    # A bare string is not a list of keywords, topics or urls.
    return list(value) if isinstance(value, (list, tuple)) else []


def _items(payload: Optional[Mapping[str, Any]], key: str) -> list[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return []
    return [v for v in _sequence(payload.get(key)) if isinstance(v, Mapping)]


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _payload_time(payload: Optional[Mapping[str, Any]], observed_at: Optional[str]) -> str:
    if isinstance(payload, Mapping) and payload.get("timestamp"):
        return str(payload["timestamp"])
    return observed_at or _now_iso()


def repository_weight(stars: Any) -> float:
    """0.5 base, +0.3 per 1000 stars, capped at 0.8."""
    return min(0.5 + (max(_number(stars), 0.0) / 1000) * 0.3, 0.8)


def engagement_score(engagement: Optional[Mapping[str, Any]]) -> float:
    """Replies weigh 3x, retweets 2x, likes 1x; scaled per 100 interactions."""
    e = engagement if isinstance(engagement, Mapping) else {}
    return (_number(e.get("likes")) + _number(e.get("retweets")) * 2 + _number(e.get("replies")) * 3) / 100


def social_weight(engagement: Optional[Mapping[str, Any]]) -> float:
    return min(0.4 + max(engagement_score(engagement), 0.0) * 0.4, 0.9)


def extract_onchain_signals(
    payload: Optional[Mapping[str, Any]],
    *,
    observed_at: Optional[str] = None,
) -> list[Signal]:
    ts = _payload_time(payload, observed_at)
    signals: list[Signal] = []

    for transfer in _items(payload, "tokenTransfers"):
        keywords = match_keywords(f"{transfer.get('tokenName') or ''} {transfer.get('tokenSymbol') or ''}")
        if keywords:
            signals.append(
                Signal(
                    source=SignalSource.HELIUS,
                    timestamp=ts,
                    keywords=tuple(keywords),
                    weight=TOKEN_TRANSFER_WEIGHT,
                    metadata={"type": "token", "mint": transfer.get("mint")},
                )
            )

    for event in _items(payload, "nftEvents"):
        signals.append(
            Signal(
                source=SignalSource.HELIUS,
                timestamp=ts,
                keywords=NFT_EVENT_KEYWORDS,
                weight=NFT_EVENT_WEIGHT,
                metadata={"type": "nft", "collection": event.get("collection")},
            )
        )

    for interaction in _items(payload, "programInteractions"):
        keywords = match_keywords(interaction.get("programName") or "")
        if keywords:
            signals.append(
                Signal(
                    source=SignalSource.HELIUS,
                    timestamp=ts,
                    keywords=tuple(keywords),
                    weight=PROGRAM_INTERACTION_WEIGHT,
                    metadata={"type": "program", "programId": interaction.get("programId")},
                )
            )

    return signals


def extract_repository_signals(
    payload: Optional[Mapping[str, Any]],
    *,
    observed_at: Optional[str] = None,
) -> list[Signal]:
    ts = _payload_time(payload, observed_at)
    signals: list[Signal] = []

    for repo in _items(payload, "trendingRepos"):
        topics = " ".join(str(t) for t in _sequence(repo.get("topics")))
        keywords = match_keywords(f"{repo.get('name') or ''} {repo.get('description') or ''} {topics}")
        if keywords:
            signals.append(
                Signal(
                    source=SignalSource.GITHUB,
                    timestamp=ts,
                    keywords=tuple(keywords),
                    weight=repository_weight(repo.get("stars")),
                    metadata={
                        "type": "repo",
                        "name": repo.get("name"),
                        "stars": repo.get("stars"),
                        "url": repo.get("url"),
                    },
                )
            )

    # Freshness outweighs popularity: fixed weight above a typical trending repo.
    for repo in _items(payload, "newRepos"):
        keywords = match_keywords(f"{repo.get('name') or ''} {repo.get('description') or ''}")
        if keywords:
            signals.append(
                Signal(
                    source=SignalSource.GITHUB,
                    timestamp=ts,
                    keywords=tuple(keywords),
                    weight=NEW_REPO_WEIGHT,
                    metadata={
                        "type": "new_repo",
                        "name": repo.get("name"),
                        "createdAt": repo.get("createdAt"),
                    },
                )
            )

    return signals


def extract_social_signals(
    posts: Optional[Sequence[Mapping[str, Any]]],
    *,
    observed_at: Optional[str] = None,
) -> list[Signal]:
    """Keywords arrive pre-matched by the social collector against its own list."""
    signals: list[Signal] = []
    for post in _sequence(posts):
        if not isinstance(post, Mapping):
            continue
        keywords = tuple(str(k) for k in _sequence(post.get("keywords")) if k)
        if not keywords:
            continue
        content = post.get("content")
        signals.append(
            Signal(
                source=SignalSource.SOCIAL,
                timestamp=str(post.get("timestamp") or observed_at or _now_iso()),
                keywords=keywords,
                weight=social_weight(post.get("engagement")),
                metadata={
                    "type": "social",
                    "author": post.get("author"),
                    "content": content[:SOCIAL_CONTENT_PREVIEW_CHARS] if isinstance(content, str) else None,
                    "urls": _sequence(post.get("urls")),
                },
            )
        )
    return signals
