"""
FastAPI application entry point for the KPI proxy API.

Configures CORS, builds the report service (warehouse client, result cache,
resolvers) at startup, registers the API routers and starts the ASGI server
when run directly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kpi_backend import __version__
from kpi_backend.api import api_router
from kpi_backend.core.config import get_settings
from kpi_backend.core.warehouse import close_warehouse, init_warehouse
from kpi_backend.models.schemas import HealthResponse
from kpi_backend.services.kpi_service import build_kpi_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for application startup and shutdown.

    On startup:
        - Create the BigQuery client
        - Build the report service with a fresh result cache

    On shutdown:
        - Close the BigQuery client
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    logger.info("KPI proxy API starting")
    app.state.kpi_service = None
    try:
        warehouse = init_warehouse(settings)
        app.state.kpi_service = build_kpi_service(settings, warehouse)
        logger.info(f"Serving dataset {settings.bigquery_dataset}")
    except Exception as e:
        logger.error(f"Failed to initialize report service: {e}")
        # Continue startup; report endpoints answer 503 until restarted

    yield

    logger.info("KPI proxy API shutting down")
    try:
        close_warehouse()
    except Exception as e:
        logger.error(f"Error closing BigQuery client: {e}")


app = FastAPI(
    title="KPI Proxy API",
    version=__version__,
    description=(
        "Proxies analytics dashboard reports to BigQuery. "
        "Resolves the dated export table, runs fixed report queries "
        "and caches results in memory."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for monitoring and load balancer probes."""
    return HealthResponse()


@app.get("/")
async def root():
    """API name and version."""
    return {
        "name": "KPI Proxy API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "kpi_backend.main:app",
        host=settings.host,
        port=settings.port,
    )
