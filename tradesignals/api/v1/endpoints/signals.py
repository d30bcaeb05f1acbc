"""
Signals API Endpoints

Trading signals for a posted price series, or for live crypto / forex data.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from tradesignals.core.config import settings
from tradesignals.schemas.market import MarketKind
from tradesignals.schemas.signals import BatchSignalResponse, Signal, StrategyName
from tradesignals.services.base import ExternalAPIError, ValidationError
from tradesignals.services.market_data import get_market_data_service
from tradesignals.services.signals import SignalRequest, build_series, get_signal_service

router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Request body for single-series analysis."""

    symbol: str = Field(..., description="Instrument identifier (e.g., BTC, EURUSD)")
    prices: list[float] = Field(..., description="Closing prices, oldest first")
    timestamps: Optional[list[datetime]] = None
    market: MarketKind = Field(default=MarketKind.GENERIC)
    strategy: Optional[StrategyName] = Field(
        default=None, description="Override the configured strategy"
    )
    current_price: Optional[float] = Field(
        default=None, description="Price for risk levels, defaults to the last close"
    )


@router.post("/analyze", response_model=Signal)
async def analyze_series(request: AnalyzeRequest):
    """
    Generate a signal for a posted price series.

    Pipeline:
    1. Validate the series
    2. Calculate indicators
    3. Decide (LLM reasoning with rule-based fallback, or rules only)
    4. Attach take-profit / stop-loss
    """
    try:
        series = build_series(request.symbol, request.prices, request.timestamps)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.details["errors"])

    try:
        return await get_signal_service().execute(
            SignalRequest(
                series=series,
                market=request.market,
                strategy=request.strategy,
                current_price=request.current_price,
            )
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")


@router.get("/crypto", response_model=BatchSignalResponse)
async def crypto_signals(
    limit: int = Query(default=settings.coingecko_per_page, ge=1, le=250),
):
    """
    Signals for the top coins by market cap.

    Uses the CoinGecko 7-day hourly sparkline as the price series.
    Coins with fewer than the minimum number of prices are listed in ``skipped``.
    """
    try:
        series_list = await get_market_data_service().get_crypto_series(limit)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch crypto data: {e.message}")

    outcome = await get_signal_service().generate_batch(series_list, market=MarketKind.CRYPTO)

    return BatchSignalResponse(
        signals=outcome.signals,
        skipped=outcome.skipped,
        source="coingecko",
        generated_at=datetime.now(timezone.utc),
    )


@router.get("/forex", response_model=BatchSignalResponse)
async def forex_signals(
    pairs: Optional[str] = Query(
        default=None, description="Comma-separated pairs, default the 25 majors"
    ),
):
    """Signals for major forex pairs from daily history."""
    pair_list = [p.strip() for p in pairs.split(",") if p.strip()] if pairs else None

    service = get_market_data_service()
    try:
        series_list = await service.get_forex_series(pair_list)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch forex data: {e.message}")

    outcome = await get_signal_service().generate_batch(series_list, market=MarketKind.FOREX)

    return BatchSignalResponse(
        signals=outcome.signals,
        skipped=outcome.skipped,
        source=service.forex_source,
        generated_at=datetime.now(timezone.utc),
    )


@router.get("/health")
async def signals_health():
    """Check health of the signal pipeline."""
    healthy = await get_signal_service().health_check()
    return {"healthy": healthy}
