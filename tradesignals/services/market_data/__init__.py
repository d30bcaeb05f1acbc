"""
Market Data Service

CONTRACT:
    Input:  MarketDataRequest (market kind, limit or pairs)
    Output: list[PriceSeries]

Provider payloads (CoinGecko, Yahoo Finance, ExchangeRate-API) are
validated and mapped to PriceSeries at this boundary.
"""

from tradesignals.services.market_data.interface import (
    MarketDataRequest,
    MarketDataServiceInterface,
)
from tradesignals.services.market_data.service import MarketDataService, get_market_data_service

__all__ = [
    "MarketDataRequest",
    "MarketDataServiceInterface",
    "MarketDataService",
    "get_market_data_service",
]
