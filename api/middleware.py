"""
Global middleware.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def hub_response_headers(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        # Hub views can carry per-resource account tokens.
        if request.url.path.startswith("/hub"):
            response.headers["Cache-Control"] = "no-store"
        logger.debug("%s %s -> %s in %.3fs", request.method, request.url.path, response.status_code, elapsed)
        return response
