"""
Omni Connect Hub: application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.client import HubApiClient
from api.dependencies import OperatorSessions
from api.middleware import register_middleware
from api.routes import router as hub_router
from config.settings import config
from connectors.registry import ProviderRegistry

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s | %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(client_factory: Optional[Callable[[], HubApiClient]] = None) -> FastAPI:
    """
    Parameters
    ----------
    client_factory : builds the remote API client for each new operator
                     session; defaults to ``HubApiClient``
    """
    app = FastAPI(
        title="Omni Connect Hub",
        version="1.0.0",
        description="Link Facebook Pages and Business Profile locations to an Omni account.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(hub_router, prefix="/hub")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        logger.info("Discovering providers…")
        ProviderRegistry().discover()

        app.state.client_factory = client_factory or HubApiClient
        app.state.sessions = OperatorSessions()
        logger.info("Remote API: %s (timeout=%s)", config.api_url, config.http_timeout)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await app.state.sessions.close_all()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
