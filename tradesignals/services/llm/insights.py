"""
Market Insights Service

LLM-written market summary over the top crypto coins and major FX rates.
Falls back to a template summary if the LLM is unavailable.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from tradesignals.schemas.market import CoinMarketRecord, ExchangeRates
from tradesignals.schemas.signals import InsightsResponse
from tradesignals.services.base import BaseService, ExternalAPIError
from tradesignals.services.llm.client import LLMClient, get_llm_client
from tradesignals.services.llm.prompts import INSIGHTS_SYSTEM_PROMPT, format_insights_prompt
from tradesignals.services.market_data import MarketDataService, get_market_data_service

logger = logging.getLogger(__name__)

MAJOR_CURRENCIES = ["EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "NZD", "CNY", "INR", "SGD"]


@dataclass
class InsightsRequest:
    top_coins: int = 10
    currencies: Optional[list[str]] = None


def _coin_dict(record: CoinMarketRecord) -> dict:
    return {
        "name": record.name,
        "symbol": record.symbol,
        "current_price": record.current_price,
        "price_change_percentage_24h": record.price_change_percentage_24h,
    }


def template_insights(coins: list[CoinMarketRecord], forex_rates: dict[str, float]) -> str:
    """Plain summary built from the numbers alone."""
    paragraphs = []

    changes = [
        (c, c.price_change_percentage_24h)
        for c in coins
        if c.price_change_percentage_24h is not None
    ]
    if changes:
        gainers = sum(1 for _, ch in changes if ch > 0)
        average = sum(ch for _, ch in changes) / len(changes)
        best = max(changes, key=lambda item: item[1])
        worst = min(changes, key=lambda item: item[1])
        mood = "bullish" if average > 1 else "bearish" if average < -1 else "mixed"
        paragraphs.append(
            f"Crypto sentiment is {mood}: {gainers} of {len(changes)} top coins are up over 24h, "
            f"with an average move of {average:+.2f}%. "
            f"{best[0].name} leads at {best[1]:+.2f}% while {worst[0].name} lags at {worst[1]:+.2f}%."
        )
    else:
        paragraphs.append("Crypto market data is currently unavailable.")

    if forex_rates:
        listed = ", ".join(f"USD/{code} {rate:.4f}" for code, rate in forex_rates.items())
        paragraphs.append(f"Major dollar rates: {listed}.")
    else:
        paragraphs.append("Forex rates are currently unavailable.")

    paragraphs.append(
        "Automated summary without model commentary. Size positions conservatively "
        "and always use stop-losses. This is not financial advice."
    )
    return "\n\n".join(paragraphs)


class InsightsService(BaseService[InsightsRequest, InsightsResponse]):
    """
    Insights Service.

    Market data failures on both sources propagate. LLM failures fall
    back to the template summary.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        market_data: Optional[MarketDataService] = None,
    ):
        self._llm_client = llm_client
        self._market_data = market_data

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def market_data(self) -> MarketDataService:
        if self._market_data is None:
            self._market_data = get_market_data_service()
        return self._market_data

    @property
    def name(self) -> str:
        return "InsightsService"

    async def _gather_data(
        self, request: InsightsRequest
    ) -> tuple[list[CoinMarketRecord], dict[str, float]]:
        coins_result, rates_result = await asyncio.gather(
            self.market_data.get_top_coins(request.top_coins, sparkline=False),
            self.market_data.get_usd_rates(),
            return_exceptions=True,
        )

        for result in (coins_result, rates_result):
            if isinstance(result, BaseException) and not isinstance(result, ExternalAPIError):
                raise result

        if isinstance(coins_result, ExternalAPIError) and isinstance(rates_result, ExternalAPIError):
            raise ExternalAPIError(self.name, "No market data available for insights")

        coins: list[CoinMarketRecord] = []
        if isinstance(coins_result, ExternalAPIError):
            logger.warning(f"Insights without crypto data: {coins_result.message}")
        else:
            coins = [c for c in coins_result if c.current_price is not None]

        forex_rates: dict[str, float] = {}
        if isinstance(rates_result, ExternalAPIError):
            logger.warning(f"Insights without forex data: {rates_result.message}")
        else:
            forex_rates = self._select_rates(rates_result, request.currencies or MAJOR_CURRENCIES)

        return coins, forex_rates

    @staticmethod
    def _select_rates(rates: ExchangeRates, currencies: list[str]) -> dict[str, float]:
        usd_rates = rates.usd_rates
        return {code: usd_rates[code] for code in currencies if code in usd_rates}

    async def execute(self, input_data: InsightsRequest) -> InsightsResponse:
        input_data = await self.validate_input(input_data)
        coins, forex_rates = await self._gather_data(input_data)

        try:
            response = await self.llm_client.generate(
                system_prompt=INSIGHTS_SYSTEM_PROMPT,
                user_prompt=format_insights_prompt([_coin_dict(c) for c in coins], forex_rates),
            )
            if not response.content.strip():
                raise ValueError("LLM returned empty insights")
            return InsightsResponse(
                insights=response.content.strip(),
                source="llm",
                generated_at=datetime.now(timezone.utc),
                provider=response.provider.value,
            )
        except Exception as e:
            logger.warning(f"LLM insights failed: {e}, falling back to template")
            return InsightsResponse(
                insights=template_insights(coins, forex_rates),
                source="template",
                generated_at=datetime.now(timezone.utc),
            )

    async def health_check(self) -> bool:
        return self.llm_client.is_configured


# Singleton instance
_insights_service: Optional[InsightsService] = None


def get_insights_service() -> InsightsService:
    """Get or create insights service instance."""
    global _insights_service
    if _insights_service is None:
        _insights_service = InsightsService()
    return _insights_service
