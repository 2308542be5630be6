from __future__ import annotations

"""Keyword matcher shared by extractors and the aggregator.

Matching is plain case-insensitive substring containment over every
definition's vocabulary. There is no word-boundary check: "game" matches
"gameplay", "AI" matches "chain". Downstream keyword counts depend on this.
"""

from typing import Iterable, Optional

from derive.core.definitions import NARRATIVE_DEFINITIONS, NarrativeDefinition


def match_keywords(
    text: Optional[str],
    definitions: Iterable[NarrativeDefinition] = NARRATIVE_DEFINITIONS,
) -> list[str]:
    """Return distinct vocabulary keywords found in text, in first-seen order.

    A keyword shared by several definitions is returned once; no definition
    takes precedence.
    """
    if not text:
        return []

    lowered = text.lower()
    found: dict[str, None] = {}
    for definition in definitions:
        for keyword in definition.keywords:
            if keyword.lower() in lowered:
                found.setdefault(keyword, None)
    return list(found)


def vocabulary_contains(definition: NarrativeDefinition, keyword: str) -> bool:
    return keyword.lower() in definition.lowered_keywords()
