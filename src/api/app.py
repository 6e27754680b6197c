"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, the public audio bucket and the health endpoint. The module-level
``app`` instance allows ``uvicorn src.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.api import websocket
from src.api.middleware.error_handler import register_error_handlers
from src.api.routes import folder, profile, recording, search
from src.core.config import get_settings
from src.core.models import HealthResponse
from src.services.storage.database import close_db, init_db
from src.services.storage.object_store import PUBLIC_PREFIX


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: configure logging and create tables. Shutdown: dispose the engine."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_db()
    yield
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""

    app = FastAPI(
        title="EchoVault",
        description="Voice recorder with AI transcription, analysis, "
        "search and a tag graph.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- CORS --
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(recording.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(folder.router, prefix="/api/v1")
    app.include_router(profile.router, prefix="/api/v1")

    # -- WebSocket --
    app.include_router(websocket.router)

    # -- Public-read audio bucket --
    bucket_dir = Path(settings.storage_dir) / settings.storage_bucket
    bucket_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        f"{PUBLIC_PREFIX}/{settings.storage_bucket}",
        StaticFiles(directory=bucket_dir),
        name="storage",
    )

    return app


app = create_app()
