"""
FastAPI application factory for the serverless functions.

Deployed separately from the main API (``uvicorn src.functions.app:app
--port 8001``); the pipeline reaches it over HTTP through
``FunctionsClient``.
"""

from datetime import UTC, datetime

from fastapi import FastAPI

from src.core.models import HealthResponse
from src.functions import routes


def create_app() -> FastAPI:
    """Build the functions application (no shared state, no database)."""

    app = FastAPI(
        title="EchoVault Functions",
        description="Stateless transcription and analysis functions.",
        version="0.1.0",
    )

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    app.include_router(routes.router, prefix="/functions/v1")

    return app


app = create_app()
