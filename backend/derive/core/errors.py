from __future__ import annotations

"""Controlled errors for the derive layer (signal scoring).

Intent:
- Scoring itself never raises on data; missing fields degrade to defaults.
- The only failure path is an inconsistent static table, caught at import time.
"""


class DeriveError(RuntimeError):
    """Base error for the derive layer."""


class DefinitionError(DeriveError):
    """Raised when the static narrative definition table is inconsistent."""
