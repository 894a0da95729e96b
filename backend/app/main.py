"""
FlowScan Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.v1 import router as api_v1_router
from app.services.analysis.registry import get_table_registry

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Data source: {settings.data_source} (mock fallback: {settings.enable_mock_fallback})")

    # Extra scoring variants from configuration
    registry = get_table_registry()
    if settings.scoring_tables_path:
        registry.load_file(settings.scoring_tables_path)
    logger.info(f"Scoring variants: {', '.join(t.name for t in registry.list_tables())}")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    FlowScan Volume-Flow Screening API

    ## Architecture
    - **Data Ingestion**: Fetches OHLCV history from Yahoo Finance
    - **Indicator Engine**: OBV, A/D line, VPT, RSI, SMA, Fibonacci (pure Python/NumPy)
    - **Structure Classifier**: Consolidation, Wyckoff phase, volume profile
    - **Scoring Engine**: Data-driven weight tables per screening variant
    - **Recommendation Engine**: Decision table of trade setups

    ## Core Principles
    - Deterministic: same bars in, same analysis out
    - Scores are clamped to 0-100
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "data_source": settings.data_source,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FlowScan Backend API",
        "docs": "/docs",
        "health": "/health",
    }
