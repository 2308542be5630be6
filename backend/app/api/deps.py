"""API dependencies (read-only).

- Centralize read-only enforcement.
- Provide the report store for request scope.
"""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.core.config import get_settings
from app.services.report_store import ReportStore


def get_report_store() -> ReportStore:
    return ReportStore(get_settings().output_dirs)


def enforce_read_only_access(request: Request) -> None:
    """Reject non-read methods."""
    if request.method not in ("GET", "HEAD", "OPTIONS"):
        raise HTTPException(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, detail="Read-only API.")
