from __future__ import annotations

"""Signal: normalized, source-agnostic unit of evidence.

A Signal lives for one pipeline run only. It is created by an extractor,
consumed by the aggregator, and then discarded.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SignalSource(str, Enum):
    HELIUS = "helius"  # on-chain
    GITHUB = "github"  # repository
    SOCIAL = "social"


@dataclass(frozen=True, slots=True)
class Signal:
    source: SignalSource
    timestamp: str
    keywords: tuple[str, ...]
    weight: float
    # Display only; never read by scoring.
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError("Signal requires at least one keyword")
        if not (0.0 < self.weight <= 1.0):
            raise ValueError(f"Signal weight out of range (0, 1]: {self.weight}")
