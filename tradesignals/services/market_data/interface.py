"""
Market Data Service Interface

Defines the contract for the market data layer.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from tradesignals.services.base import BaseService
from tradesignals.schemas.market import MarketKind, PriceSeries, Quote


@dataclass
class MarketDataRequest:
    """Which instruments to fetch."""

    market: MarketKind
    limit: Optional[int] = None  # crypto: number of coins
    pairs: Optional[list[str]] = None  # forex: pairs, default the 25 majors


class MarketDataServiceInterface(BaseService[MarketDataRequest, list[PriceSeries]]):
    """
    Market Data Service Contract.

    INPUT: MarketDataRequest

    OUTPUT: list[PriceSeries]
        - validated, chronological series; provider payloads never leak out

    SOURCES:
        crypto: CoinGecko /coins/markets 7-day sparkline
        forex:  Yahoo Finance daily history, synthetic from ExchangeRate-API
                current rates when Yahoo has nothing

    There is no fallback for missing input data: if no source answers,
    ExternalAPIError propagates.
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def execute(self, input_data: MarketDataRequest) -> list[PriceSeries]:
        pass

    @abstractmethod
    async def get_crypto_price(self, coin_id: str) -> Quote:
        pass

    @abstractmethod
    async def get_forex_rate(self, pair: str) -> Quote:
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP sessions."""
        pass
