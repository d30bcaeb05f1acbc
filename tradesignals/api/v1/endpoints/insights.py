"""
Insights API Endpoints
"""

from fastapi import APIRouter, HTTPException, Query

from tradesignals.schemas.signals import InsightsResponse
from tradesignals.services.base import ExternalAPIError
from tradesignals.services.llm import InsightsRequest, get_insights_service

router = APIRouter()


@router.get("", response_model=InsightsResponse)
async def market_insights(top_coins: int = Query(default=10, ge=1, le=50)):
    """
    Market insights summary over top crypto and major forex rates.

    ``source`` is "llm" when a model wrote the text, "template" otherwise.
    """
    try:
        return await get_insights_service().execute(InsightsRequest(top_coins=top_coins))
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate insights: {e.message}")
