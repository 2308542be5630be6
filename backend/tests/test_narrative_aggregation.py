from __future__ import annotations

import pytest

from derive.core.aggregation import (
    MAX_TOP_PROJECTS,
    MAX_TRENDING_KEYWORDS,
    DataSources,
    aggregate_narratives,
    build_narrative,
    detect_narratives,
)
from derive.core.definitions import NARRATIVE_DEFINITIONS, NarrativeDefinition, get_definition
from derive.core.signals import Signal, SignalSource


NOW = "2026-01-01T00:00:00+00:00"


def _by_id(narratives):
    return {n.id: n for n in narratives}


def test_empty_signals_yield_one_placeholder_per_definition():
    result = detect_narratives([], now=NOW)
    assert result.timestamp == NOW
    assert len(result.narratives) == len(NARRATIVE_DEFINITIONS)
    for narrative, definition in zip(result.narratives, NARRATIVE_DEFINITIONS):
        # All tied at 0.1: stable sort keeps declaration order.
        assert narrative.id == definition.id
        assert narrative.confidence == 0.1
        assert narrative.top_projects == []
        assert narrative.data_sources == DataSources(0, 0, 0)
        assert narrative.trending_keywords == list(definition.keywords[:5])
        assert narrative.last_updated == NOW
        assert narrative.is_placeholder


def test_single_weak_signal_ranks_below_placeholders(make_signal):
    result = detect_narratives([make_signal(["yield"], weight=0.3)], now=NOW)

    defi = _by_id(result.narratives)["defi-innovation"]
    assert defi.confidence == pytest.approx(0.06)
    assert defi.trending_keywords == ["yield"]
    assert defi.data_sources == DataSources(helius=1, github=0, social=0)

    assert result.narratives[-1].id == "defi-innovation"
    assert all(n.confidence == 0.1 for n in result.narratives[:-1])
    assert [n.id for n in result.narratives[:-1]] == [
        d.id for d in NARRATIVE_DEFINITIONS if d.id != "defi-innovation"
    ]


def test_confidence_sums_weights_and_caps_at_one(make_signal):
    defi = get_definition("defi-innovation")
    two = build_narrative(defi, [make_signal(["swap"], 0.5), make_signal(["dex"], 0.5)], now=NOW)
    assert two.confidence == pytest.approx(0.2)

    many = build_narrative(defi, [make_signal(["swap"], 0.9) for _ in range(10)], now=NOW)
    assert many.confidence == 1.0


def test_adding_a_matching_signal_never_lowers_confidence(make_signal):
    defi = get_definition("defi-innovation")
    signals = []
    previous = 0.0
    for weight in (0.3, 0.6, 0.8, 0.9, 0.5, 0.4, 0.7):
        signals.append(make_signal(["vault"], weight))
        current = build_narrative(defi, signals, now=NOW).confidence
        assert 0.0 <= current <= 1.0
        assert current >= previous
        previous = current


def test_matching_is_case_insensitive(make_signal):
    gaming = get_definition("gaming-nft")
    narrative = build_narrative(gaming, [make_signal(["nft"], 0.4)], now=NOW)
    assert not narrative.is_placeholder
    assert narrative.trending_keywords == ["nft"]


def test_trending_counts_only_own_vocabulary_with_first_seen_ties(make_signal):
    defi = get_definition("defi-innovation")
    signals = [
        make_signal(["swap", "bot", "vault"]),
        make_signal(["vault", "SDK"]),
        make_signal(["dex"]),
        make_signal(["swap"]),
    ]
    narrative = build_narrative(defi, signals, now=NOW)
    # swap=2, vault=2 (swap first seen), dex=1; "bot"/"SDK" belong elsewhere.
    assert narrative.trending_keywords == ["swap", "vault", "dex"]


def test_cross_vocabulary_keywords_count_for_each_narrative(make_signal):
    result = aggregate_narratives([make_signal(["lending", "bot"], 0.5)], now=NOW)
    by_id = _by_id(result)
    assert by_id["defi-innovation"].trending_keywords == ["lending"]
    assert by_id["ai-crypto"].trending_keywords == ["bot"]
    assert by_id["defi-innovation"].confidence == pytest.approx(0.1)
    assert by_id["ai-crypto"].confidence == pytest.approx(0.1)


def test_trending_keywords_capped():
    vocab = tuple(f"kw{i}" for i in range(12))
    definition = NarrativeDefinition(id="wide", name="Wide", description="", keywords=vocab)

    signal = Signal(source=SignalSource.SOCIAL, timestamp=NOW, keywords=vocab, weight=0.5)
    narrative = build_narrative(definition, [signal], now=NOW)
    assert len(narrative.trending_keywords) == MAX_TRENDING_KEYWORDS
    assert narrative.trending_keywords == list(vocab[:MAX_TRENDING_KEYWORDS])


def test_top_projects_first_five_named_in_collection_order(make_signal):
    infra = get_definition("infrastructure")
    signals = [
        make_signal(["oracle"], 0.3, SignalSource.HELIUS, type="token", mint="m1"),
        make_signal(["oracle"], 0.5, SignalSource.HELIUS, type="program", programId="prog-1"),
    ]
    signals += [
        make_signal(["node"], 0.6, SignalSource.GITHUB, type="repo", name=f"repo-{i}", url=f"https://g/{i}")
        for i in range(6)
    ]
    narrative = build_narrative(infra, signals, now=NOW)

    assert len(narrative.top_projects) == MAX_TOP_PROJECTS
    first = narrative.top_projects[0]
    assert first.name == "prog-1"
    assert first.source == "helius"
    assert first.url is None
    assert first.description == ""
    assert [p.name for p in narrative.top_projects[1:]] == ["repo-0", "repo-1", "repo-2", "repo-3"]
    assert narrative.top_projects[1].url == "https://g/0"


def test_data_sources_count_matched_signals_per_origin(make_signal):
    signals = [
        make_signal(["DAO"], 0.5, SignalSource.HELIUS),
        make_signal(["governance"], 0.6, SignalSource.GITHUB),
        make_signal(["community"], 0.4, SignalSource.SOCIAL),
        make_signal(["content"], 0.4, SignalSource.SOCIAL),
        make_signal(["yield"], 0.4, SignalSource.SOCIAL),
    ]
    social = _by_id(aggregate_narratives(signals, now=NOW))["social-consumer"]
    assert social.data_sources == DataSources(helius=1, github=1, social=2)


def test_ideas_use_static_table_for_known_narratives(make_signal):
    defi = get_definition("defi-innovation")
    narrative = build_narrative(defi, [make_signal(["swap"])], now=NOW)
    assert narrative.project_ideas[0].startswith("Build a yield aggregator")
    assert len(narrative.project_ideas) == 4


def test_unknown_definition_gets_template_ideas_from_vocabulary():
    definition = NarrativeDefinition(id="depin", name="DePIN", description="", keywords=("sensor", "hotspot"))
    narrative = build_narrative(definition, [], now=NOW)
    assert narrative.confidence == 0.1
    assert narrative.project_ideas == [
        "Build a sensor analytics dashboard",
        "Create a hotspot automation tool",
        "Develop a blockchain integration service",
    ]


def test_ties_keep_definition_order_and_result_is_sorted(make_signal):
    signals = [
        make_signal(["oracle"], 0.5),
        make_signal(["SDK"], 0.5),
        make_signal(["swap"], 0.9),
        make_signal(["swap"], 0.9),
    ]
    result = detect_narratives(signals, now=NOW)
    confidences = [n.confidence for n in result.narratives]
    assert confidences == sorted(confidences, reverse=True)
    assert result.narratives[0].id == "defi-innovation"
    # infrastructure and dev-tools tie at 0.1 with the placeholders.
    tied = [n.id for n in result.narratives if n.confidence == pytest.approx(0.1)]
    assert tied == ["gaming-nft", "infrastructure", "ai-crypto", "social-consumer", "dev-tools"]


def test_to_dict_uses_wire_field_names(make_signal):
    result = detect_narratives([make_signal(["yield"], 0.3)], now=NOW)
    doc = result.to_dict()
    assert set(doc) == {"timestamp", "narratives"}
    first = doc["narratives"][0]
    assert set(first) == {
        "id",
        "name",
        "description",
        "confidence",
        "trendingKeywords",
        "topProjects",
        "projectIdeas",
        "dataSources",
        "lastUpdated",
    }
    assert first["dataSources"] == {"helius": 0, "github": 0, "social": 0}
