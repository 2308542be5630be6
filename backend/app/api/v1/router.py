"""API v1 root router."""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1.narratives import router as narratives_router


router = APIRouter()
router.include_router(narratives_router, tags=["narratives"])
