"""
TradeSignals Pro Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradesignals.core.config import settings
from tradesignals.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Signal strategy: {settings.signal_strategy}, "
        f"LLM provider: {settings.llm_primary_provider}, forex source: {settings.forex_source}"
    )

    yield

    # Shutdown: release shared HTTP sessions
    logger.info("Shutting down...")
    from tradesignals.services.market_data import get_market_data_service
    from tradesignals.services.llm import get_llm_client

    await get_market_data_service().close()
    await get_llm_client().close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    TradeSignals Pro API

    ## Architecture
    - **Market Data**: CoinGecko, Yahoo Finance, ExchangeRate-API
    - **Indicator Engine**: SMA, EMA, RSI, MACD, Bollinger Bands, Stochastic (pure NumPy)
    - **Signal Aggregator**: LLM reasoning with deterministic rule-based fallback
    - **Risk Levels**: Fixed-percentage take-profit / stop-loss

    ## Core Principles
    - Every signal is fully populated, even when the LLM is down
    - Signals are computed per request and never stored
    - Not financial advice
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
cors_origins = [settings.frontend_url]
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
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
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "TradeSignals Pro Backend API",
        "docs": "/docs",
        "health": "/health",
    }
