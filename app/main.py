from __future__ import annotations
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from app.api import SERVICE_NAME, SERVICE_VERSION, router
from app.errors import install_error_handlers
from logging_config import configure_logging
from services.readings import ReadingService, build_default_service


def create_app(service: Optional[ReadingService] = None) -> FastAPI:
    """Build the application; ``service`` replaces the configured store when given."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        reading_service = service or build_default_service()
        app.state.reading_service = reading_service
        app.state.started_at = time.monotonic()
        try:
            yield
        finally:
            reading_service.shutdown()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Ingestion and retrieval of motor-sensor telemetry with threshold alerts.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.include_router(router)
    install_error_handlers(app)
    return app

app = create_app()
