from __future__ import annotations

from derive.core.definitions import NARRATIVE_DEFINITIONS, NarrativeDefinition, get_definition
from derive.core.keywords import match_keywords, vocabulary_contains


def test_empty_and_none_text_yield_nothing():
    assert match_keywords(None) == []
    assert match_keywords("") == []


def test_case_insensitive_and_original_casing_kept():
    assert match_keywords("new nft drop") == ["NFT"]
    assert match_keywords("YIELD optimizer") == ["yield"]


def test_substring_without_word_boundaries():
    # "game" and "gaming" both hide in "gameplay"/"gaming"; "AI" hides in "chain".
    found = match_keywords("gameplay on chain")
    assert "game" in found
    assert "AI" in found


def test_keywords_from_several_narratives_are_all_kept():
    found = match_keywords("lending bot with an SDK")
    assert found == ["lending", "bot", "SDK"]


def test_duplicate_keyword_across_definitions_returned_once():
    defs = (
        NarrativeDefinition(id="a", name="A", description="", keywords=("swap", "vault")),
        NarrativeDefinition(id="b", name="B", description="", keywords=("vault", "node")),
    )
    assert match_keywords("vault swap node", defs) == ["swap", "vault", "node"]


def test_vocabulary_contains_is_case_insensitive():
    defi = get_definition("defi-innovation")
    assert defi is not None
    assert vocabulary_contains(defi, "amm")
    assert vocabulary_contains(defi, "Yield")
    assert not vocabulary_contains(defi, "NFT")


def test_definition_table_is_fixed():
    assert [d.id for d in NARRATIVE_DEFINITIONS] == [
        "defi-innovation",
        "gaming-nft",
        "infrastructure",
        "ai-crypto",
        "social-consumer",
        "dev-tools",
    ]
    assert get_definition("unknown") is None
