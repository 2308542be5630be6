"""Narrative aggregation over a flat signal list.

Computes, for every narrative definition independently:
- Confidence: summed signal weight / 5, capped at 1.0
- Trending keywords: most frequent own-vocabulary keywords (max 8)
- Top projects: first 5 matched signals that carry a name or program id
- Data sources: matched signal count per origin
- Project ideas: via the idea policy

Placeholder policy:
- A definition with no matching signal still yields a Narrative at a fixed
  confidence floor of 0.1, so the output always has one row per definition.
- Both branches live in `build_narrative` so the two paths cannot drift.

Pure and deterministic: no I/O, no cache, recomputed from scratch every run.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from derive.core.definitions import NARRATIVE_DEFINITIONS, NarrativeDefinition
from derive.core.ideas import generate_project_ideas
from derive.core.signals import Signal, SignalSource


UTC = timezone.utc

PLACEHOLDER_CONFIDENCE = 0.1
CONFIDENCE_DIVISOR = 5
MAX_TRENDING_KEYWORDS = 8
MAX_TOP_PROJECTS = 5
PLACEHOLDER_KEYWORDS = 5
PLACEHOLDER_IDEA_KEYWORDS = 3


@dataclass(frozen=True, slots=True)
class TopProject:
    name: str
    source: str
    description: str = ""
    url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DataSources:
    helius: int = 0
    github: int = 0
    social: int = 0


@dataclass(frozen=True, slots=True)
class Narrative:
    id: str
    name: str
    description: str
    confidence: float
    trending_keywords: list[str]
    top_projects: list[TopProject]
    project_ideas: list[str]
    data_sources: DataSources
    last_updated: str

    @property
    def is_placeholder(self) -> bool:
        return self.data_sources == DataSources()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "confidence": self.confidence,
            "trendingKeywords": list(self.trending_keywords),
            "topProjects": [asdict(p) for p in self.top_projects],
            "projectIdeas": list(self.project_ideas),
            "dataSources": asdict(self.data_sources),
            "lastUpdated": self.last_updated,
        }


@dataclass(frozen=True, slots=True)
class DetectionResult:
    timestamp: str
    narratives: list[Narrative] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "narratives": [n.to_dict() for n in self.narratives],
        }


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def select_matching(signals: Iterable[Signal], definition: NarrativeDefinition) -> list[Signal]:
    """Signals whose keywords intersect the vocabulary (case-insensitive), in input order."""
    vocab = definition.lowered_keywords()
    return [s for s in signals if any(k.lower() in vocab for k in s.keywords)]


def compute_confidence(matching: Sequence[Signal]) -> float:
    # Summed, not averaged: corroboration raises confidence.
    total = sum(s.weight for s in matching)
    return min(total / CONFIDENCE_DIVISOR, 1.0)


def rank_trending_keywords(matching: Sequence[Signal], definition: NarrativeDefinition) -> list[str]:
    """Count own-vocabulary keywords only; ties keep first-seen order.

    Signals may carry keywords of other narratives (the matcher runs over all
    vocabularies); those are ignored here, not stripped from the signal.
    """
    vocab = definition.lowered_keywords()
    counts: dict[str, int] = {}
    display: dict[str, str] = {}
    for s in matching:
        for kw in s.keywords:
            key = kw.lower()
            if key not in vocab:
                continue
            display.setdefault(key, kw)
            counts[key] = counts.get(key, 0) + 1

    # sorted() is stable; dict order is first-seen order.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [display[key] for key, _ in ranked[:MAX_TRENDING_KEYWORDS]]


def collect_top_projects(matching: Sequence[Signal]) -> list[TopProject]:
    """Display sample in collection order; no dedup, no ranking."""
    projects: list[TopProject] = []
    for s in matching:
        name = s.metadata.get("name") or s.metadata.get("programId")
        if not name:
            continue
        projects.append(
            TopProject(
                name=str(name),
                source=s.source.value,
                description=str(s.metadata.get("description") or ""),
                url=s.metadata.get("url"),
            )
        )
        if len(projects) >= MAX_TOP_PROJECTS:
            break
    return projects


def count_data_sources(matching: Sequence[Signal]) -> DataSources:
    return DataSources(
        helius=sum(1 for s in matching if s.source == SignalSource.HELIUS),
        github=sum(1 for s in matching if s.source == SignalSource.GITHUB),
        social=sum(1 for s in matching if s.source == SignalSource.SOCIAL),
    )


def build_narrative(
    definition: NarrativeDefinition,
    signals: Sequence[Signal],
    *,
    now: Optional[str] = None,
) -> Narrative:
    last_updated = now or _now_iso()
    matching = select_matching(signals, definition)

    if not matching:
        # Placeholder: defined but currently undetected.
        return Narrative(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            confidence=PLACEHOLDER_CONFIDENCE,
            trending_keywords=list(definition.keywords[:PLACEHOLDER_KEYWORDS]),
            top_projects=[],
            project_ideas=generate_project_ideas(
                definition.id, list(definition.keywords[:PLACEHOLDER_IDEA_KEYWORDS])
            ),
            data_sources=DataSources(),
            last_updated=last_updated,
        )

    trending = rank_trending_keywords(matching, definition)
    return Narrative(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        confidence=compute_confidence(matching),
        trending_keywords=trending,
        top_projects=collect_top_projects(matching),
        project_ideas=generate_project_ideas(definition.id, trending),
        data_sources=count_data_sources(matching),
        last_updated=last_updated,
    )


def aggregate_narratives(
    signals: Iterable[Signal],
    definitions: Sequence[NarrativeDefinition] = NARRATIVE_DEFINITIONS,
    *,
    now: Optional[str] = None,
) -> list[Narrative]:
    """One Narrative per definition, in declaration order."""
    stamp = now or _now_iso()
    pool = list(signals)
    return [build_narrative(d, pool, now=stamp) for d in definitions]


def sort_by_confidence(narratives: Iterable[Narrative]) -> list[Narrative]:
    # Stable: exact ties keep definition order.
    return sorted(narratives, key=lambda n: n.confidence, reverse=True)


def detect_narratives(
    signals: Iterable[Signal],
    definitions: Sequence[NarrativeDefinition] = NARRATIVE_DEFINITIONS,
    *,
    now: Optional[str] = None,
) -> DetectionResult:
    stamp = now or _now_iso()
    narratives = aggregate_narratives(signals, definitions, now=stamp)
    return DetectionResult(timestamp=stamp, narratives=sort_by_confidence(narratives))
