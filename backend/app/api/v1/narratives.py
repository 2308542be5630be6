"""Narrative report endpoints (read-only)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import enforce_read_only_access, get_report_store
from app.schemas.narrative import NarrativeDefinitionResponse, NarrativeResponse, ReportResponse
from app.services.report_store import ReportStore
from derive.core.definitions import NARRATIVE_DEFINITIONS


router = APIRouter(dependencies=[Depends(enforce_read_only_access)])


def _latest_report(store: ReportStore) -> dict[str, Any]:
    doc = store.load_latest()
    if doc is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No detection report available yet.",
        )
    return doc


@router.get(
    "/narratives",
    response_model=ReportResponse,
    response_model_by_alias=True,
)
async def get_report(
    limit: Optional[int] = Query(None, ge=1, le=50),
    store: ReportStore = Depends(get_report_store),
) -> ReportResponse:
    """Latest detection report; narratives already sorted by confidence."""
    report = ReportResponse.model_validate(_latest_report(store))
    if limit is not None:
        report = report.model_copy(update={"narratives": report.narratives[:limit]})
    return report


@router.get(
    "/narratives/{narrative_id}",
    response_model=NarrativeResponse,
    response_model_by_alias=True,
)
async def get_narrative(
    narrative_id: str,
    store: ReportStore = Depends(get_report_store),
) -> NarrativeResponse:
    report = ReportResponse.model_validate(_latest_report(store))
    for narrative in report.narratives:
        if narrative.id == narrative_id:
            return narrative
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Narrative not found.")


@router.get("/definitions", response_model=list[NarrativeDefinitionResponse])
async def list_definitions() -> list[NarrativeDefinitionResponse]:
    return [
        NarrativeDefinitionResponse(id=d.id, name=d.name, description=d.description, keywords=list(d.keywords))
        for d in NARRATIVE_DEFINITIONS
    ]
