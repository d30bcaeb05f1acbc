"""
Market Data API Endpoints

Single-quote lookups for crypto prices and forex rates.
"""

from fastapi import APIRouter, HTTPException

from tradesignals.schemas.market import Quote
from tradesignals.services.base import ExternalAPIError, ValidationError
from tradesignals.services.market_data import get_market_data_service
from tradesignals.services.market_data.forex_adapter import MAJOR_PAIRS

router = APIRouter()


@router.get("/crypto/{coin_id}/price", response_model=Quote)
async def get_crypto_price(coin_id: str):
    """USD price of a coin by CoinGecko id (e.g., bitcoin)."""
    try:
        return await get_market_data_service().get_crypto_price(coin_id)
    except ValidationError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/forex/{pair}/rate", response_model=Quote)
async def get_forex_rate(pair: str):
    """Current rate for a pair like EURUSD (units of quote per unit of base)."""
    try:
        return await get_market_data_service().get_forex_rate(pair)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/forex/pairs")
async def list_forex_pairs():
    """Pairs covered by the forex signals endpoint."""
    return {"pairs": MAJOR_PAIRS}
