"""
Market Data Service Implementation

Fetches crypto and forex price series and single quotes.
Primary forex source: Yahoo Finance
Fallback: series synthesized from ExchangeRate-API current rates
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from tradesignals.core.config import settings
from tradesignals.schemas.market import (
    CoinMarketRecord,
    ExchangeRates,
    MarketKind,
    PriceSeries,
    Quote,
)
from tradesignals.services.base import ExternalAPIError, ValidationError
from tradesignals.services.market_data.coingecko_adapter import CoinGeckoAdapter, record_to_series
from tradesignals.services.market_data.forex_adapter import (
    MAJOR_PAIRS,
    ExchangeRateAdapter,
    fetch_yahoo_history,
    normalize_pair,
    synthesize_histories,
)
from tradesignals.services.market_data.interface import (
    MarketDataRequest,
    MarketDataServiceInterface,
)

logger = logging.getLogger(__name__)


class MarketDataService(MarketDataServiceInterface):
    """Market Data Service."""

    def __init__(
        self,
        coingecko: Optional[CoinGeckoAdapter] = None,
        exchange_rates: Optional[ExchangeRateAdapter] = None,
        forex_source: Optional[str] = None,
    ):
        self.coingecko = coingecko or CoinGeckoAdapter()
        self.exchange_rates = exchange_rates or ExchangeRateAdapter()
        self.forex_source = forex_source or settings.forex_source

    @property
    def name(self) -> str:
        return "MarketDataService"

    async def validate_input(self, input_data: MarketDataRequest) -> MarketDataRequest:
        if input_data.market not in (MarketKind.CRYPTO, MarketKind.FOREX):
            raise ValidationError(self.name, f"No data source for market {input_data.market.value}")
        return input_data

    async def execute(self, input_data: MarketDataRequest) -> list[PriceSeries]:
        input_data = await self.validate_input(input_data)
        if input_data.market == MarketKind.CRYPTO:
            return await self.get_crypto_series(input_data.limit)
        return await self.get_forex_series(input_data.pairs)

    # -------------------------------------------------------------------------
    # Crypto
    # -------------------------------------------------------------------------

    async def get_top_coins(self, limit: int, sparkline: bool = True) -> list[CoinMarketRecord]:
        return await self.coingecko.fetch_markets(per_page=limit, sparkline=sparkline)

    async def get_crypto_series(self, limit: Optional[int] = None) -> list[PriceSeries]:
        records = await self.get_top_coins(limit or settings.coingecko_per_page)
        series = [s for s in (record_to_series(r) for r in records) if s is not None]
        logger.info(f"Mapped {len(series)} of {len(records)} CoinGecko rows to price series")
        return series

    async def get_crypto_price(self, coin_id: str) -> Quote:
        price = await self.coingecko.fetch_price(coin_id)
        return Quote(
            symbol=coin_id.strip().lower(),
            price=price,
            timestamp=datetime.now(timezone.utc),
            source="coingecko",
        )

    # -------------------------------------------------------------------------
    # Forex
    # -------------------------------------------------------------------------

    async def get_usd_rates(self) -> ExchangeRates:
        return await self.exchange_rates.fetch_rates()

    async def get_forex_series(self, pairs: Optional[list[str]] = None) -> list[PriceSeries]:
        """
        Daily history for each pair, in request order.

        Pairs Yahoo cannot serve are synthesized from current rates.

        Raises:
            ExternalAPIError: no source produced any series
        """
        pairs = [normalize_pair(p) for p in (pairs or MAJOR_PAIRS)]
        found: dict[str, PriceSeries] = {}

        if self.forex_source == "yahoo":
            histories = await asyncio.gather(*(fetch_yahoo_history(p) for p in pairs))
            found = {p: h for p, h in zip(pairs, histories) if h is not None}
            logger.info(f"Yahoo Finance returned history for {len(found)}/{len(pairs)} pairs")

        missing = [p for p in pairs if p not in found]
        if missing:
            try:
                rates = await self.get_usd_rates()
                found.update(synthesize_histories(rates, missing))
                logger.warning(f"Using synthetic history for {len(missing)} pairs: {', '.join(missing)}")
            except ExternalAPIError as e:
                if not found:
                    raise
                logger.warning(f"Could not synthesize missing pairs: {e.message}")

        if not found:
            raise ExternalAPIError(self.name, "No forex history available")

        return [found[p] for p in pairs if p in found]

    async def get_forex_rate(self, pair: str) -> Quote:
        pair = normalize_pair(pair)
        rates = await self.get_usd_rates()
        rate = rates.cross_rate(pair)
        if rate is None:
            raise ValidationError(self.name, f"Rate not found for {pair}", {"pair": pair})
        return Quote(
            symbol=pair,
            price=rate,
            timestamp=datetime.now(timezone.utc),
            source="exchangerate-api",
        )

    async def health_check(self) -> bool:
        try:
            await self.get_usd_rates()
            return True
        except ExternalAPIError:
            return False

    async def close(self) -> None:
        await self.coingecko.close()
        await self.exchange_rates.close()


# Singleton instance
_market_data_service: Optional[MarketDataService] = None


def get_market_data_service() -> MarketDataService:
    """Get or create market data service instance."""
    global _market_data_service
    if _market_data_service is None:
        _market_data_service = MarketDataService()
    return _market_data_service
