"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from tradesignals.api.v1.endpoints import insights, market, signals

router = APIRouter()

# Include all endpoint routers
router.include_router(signals.router, prefix="/signals", tags=["Signals"])
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(insights.router, prefix="/insights", tags=["Insights"])
