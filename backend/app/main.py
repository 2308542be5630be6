"""FastAPI application (read-only narrative report).

Operational goals:
- Deterministic, low-noise responses
- Request-id propagation and structured access logs
- Safe failure modes (no fabricated data: 503 until the first report exists)
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import router as v1_router


logger = logging.getLogger("solradar.api")
logger.setLevel(logging.INFO)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Solana Narrative Radar API",
        version="1.0.0",
        openapi_url="/openapi.json",
        docs_url=None,
        redoc_url=None,
        description="Read-only access to the latest narrative detection report.",
    )

    # Dashboard is a static site; reads only.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    @app.middleware("http")
    async def request_id_and_access_log(request: Request, call_next: Callable):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.time()
        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001
            logger.exception("Unhandled error", extra={"request_id": request_id})
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal error."},
                headers={"x-request-id": request_id},
            )

        duration_ms = int((time.time() - start) * 1000)
        response.headers["x-request-id"] = request_id

        logger.info(
            json.dumps(
                {
                    "event": "access",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": duration_ms,
                }
            )
        )
        return response

    return app


app = create_app()
