from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient


ROOT = Path(__file__).resolve().parents[2]

# Ensure `backend/` is importable so `app`, `derive`, `ingestion` resolve as top-level packages.
BACKEND_DIR = ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.api.deps import get_report_store  # noqa: E402
from app.main import app  # noqa: E402
from app.services.report_store import ReportStore  # noqa: E402
from derive.core.signals import Signal, SignalSource  # noqa: E402


FIXED_NOW = "2026-01-01T00:00:00+00:00"


@pytest.fixture()
def make_signal() -> Callable[..., Signal]:
    def _make(
        keywords: list[str],
        weight: float = 0.5,
        source: SignalSource = SignalSource.HELIUS,
        **metadata: Any,
    ) -> Signal:
        return Signal(
            source=source,
            timestamp=FIXED_NOW,
            keywords=tuple(keywords),
            weight=weight,
            metadata=dict(metadata),
        )

    return _make


@pytest.fixture()
def report_store(tmp_path: Path) -> ReportStore:
    return ReportStore([tmp_path / "data", tmp_path / "public" / "data"])


@pytest.fixture()
def client(report_store: ReportStore) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_report_store] = lambda: report_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_report_store, None)
