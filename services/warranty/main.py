"""
Warranty Registry Service - Main Application
=============================================

FastAPI application for issuing, claiming, transferring and verifying
digital warranties.

Version: 0.1.0
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from services.warranty.routes import (
    sellers_router,
    verify_router,
    wallet_router,
    warranties_router,
)
from shared.config import StoreBackend, settings
from shared.database import MongoDBClient
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models import HealthResponse


setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name=settings.service_name,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info(
        "warranty_registry_starting",
        environment=settings.environment.value,
        store_backend=settings.store.backend.value,
        port=settings.port,
    )

    if settings.store.backend == StoreBackend.MONGODB:
        MongoDBClient.get_client()
        await MongoDBClient.create_indexes()
        logger.info("mongodb_connected")

    yield

    if settings.store.backend == StoreBackend.MONGODB:
        await MongoDBClient.close()
    logger.info("warranty_registry_stopped")


app = FastAPI(
    title="Warranty Registry",
    description="Digital warranty issue, claim, transfer and verification",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "warranties", "description": "Seller warranty issuing and listings"},
        {"name": "wallet", "description": "Buyer claims, manual entries and transfers"},
        {"name": "verify", "description": "Public warranty verification"},
        {"name": "sellers", "description": "Seller onboarding and profiles"},
        {"name": "health", "description": "Service health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list or ["*"],
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id to every log line emitted while handling a request."""
    clear_context()
    bind_context(request_id=uuid.uuid4().hex[:12], path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_context()


app.include_router(warranties_router, prefix="/api/v1")
app.include_router(wallet_router, prefix="/api/v1")
app.include_router(verify_router, prefix="/api/v1")
app.include_router(sellers_router, prefix="/api/v1")


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    """Service health check endpoint."""
    components = {"document_store": {"status": "healthy", "backend": "memory"}}
    if settings.store.backend == StoreBackend.MONGODB:
        components = {"document_store": await MongoDBClient.health_check()}

    health = HealthResponse(
        service=settings.service_name,
        version="0.1.0",
        components=components,
    )
    if not health.is_healthy:
        health.status = "degraded"
    return health


@app.get("/", tags=["health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Warranty Registry",
        "description": "Digital warranty issue, claim, transfer and verification",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.warranty.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )
