"""Derive core primitives: signal extraction and narrative scoring."""

from derive.core.aggregation import (
    DataSources,
    DetectionResult,
    Narrative,
    TopProject,
    aggregate_narratives,
    detect_narratives,
    sort_by_confidence,
)
from derive.core.definitions import (
    NARRATIVE_DEFINITIONS,
    NarrativeDefinition,
    get_definition,
)
from derive.core.extractors import (
    extract_onchain_signals,
    extract_repository_signals,
    extract_social_signals,
)
from derive.core.ideas import generate_project_ideas
from derive.core.keywords import match_keywords
from derive.core.signals import Signal, SignalSource
