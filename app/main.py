"""
FastAPI application entry point.

Sets up the app, lifespan (DB connect/disconnect, service wiring), CORS,
logging, and includes API routers. OCR runs as detached asyncio tasks owned
by the BackgroundTaskRunner, so uploads return as soon as the record exists.

Why async: All I/O (DB with Motor) is non-blocking so one process can handle
many concurrent requests. Tesseract runs in a thread pool (asyncio.to_thread)
so it doesn't block the event loop.
"""

import logging
import shutil
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import documents
from app.api.schemas import HealthResponse
from app.config import get_settings
from app.database import close_mongo_connection, connect_to_mongo
from app.services.container import Services, build_services

# Configure logging - single place for log format and level
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: runs on startup and shutdown.
    Connects to MongoDB and builds the services unless they were injected
    (tests do that); on shutdown lets in-flight OCR tasks wind down first.
    """
    settings = get_settings()
    client = None
    if getattr(app.state, "services", None) is None:
        client = await connect_to_mongo(settings)
        app.state.services = build_services(settings)
    if shutil.which(settings.tesseract_cmd or "tesseract") is None:
        logger.warning("tesseract binary not found; every document will end up failed.")
    yield
    await app.state.services.runner.shutdown(settings.shutdown_grace_seconds)
    if client is not None:
        close_mongo_connection(client)


def create_application(services: Optional[Services] = None) -> FastAPI:
    """Factory for the FastAPI app. Pass services to skip the MongoDB connection."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Upload images, extract their text with OCR, and search it.",
        version="1.0.0",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    # CORS - the browser client may be served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", summary="Service banner")
    async def root() -> dict:
        return {"message": f"{settings.app_name} is running", "status": "OK"}

    @app.get("/health", response_model=HealthResponse, summary="Liveness check")
    async def health() -> HealthResponse:
        return HealthResponse(
            status="OK",
            environment=settings.environment,
            tesseract_available=shutil.which(settings.tesseract_cmd or "tesseract") is not None,
        )

    app.include_router(documents.router, prefix=f"{settings.api_prefix}/documents", tags=["documents"])

    return app


app = create_application()
