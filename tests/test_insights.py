"""Tests for the market insights service."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from tradesignals.schemas.market import CoinMarketRecord, ExchangeRates
from tradesignals.services.base import ExternalAPIError
from tradesignals.services.llm import InsightsRequest, InsightsService, LLMProvider
from tradesignals.services.llm.insights import template_insights


def coins() -> list[CoinMarketRecord]:
    return [
        CoinMarketRecord(id="bitcoin", symbol="btc", name="Bitcoin", current_price=65000, price_change_percentage_24h=3.0),
        CoinMarketRecord(id="ethereum", symbol="eth", name="Ethereum", current_price=3200, price_change_percentage_24h=-1.0),
        CoinMarketRecord(id="ghost", symbol="gst", name="Ghost"),
    ]


@pytest.fixture
def market_data():
    service = AsyncMock()
    service.get_top_coins.return_value = coins()
    service.get_usd_rates.return_value = ExchangeRates(conversion_rates={"EUR": 0.92, "JPY": 151.2, "XAU": 0.0004})
    return service


class TestTemplateInsights:
    def test_mentions_movers_and_rates(self):
        text = template_insights(coins()[:2], {"EUR": 0.92})
        assert "1 of 2 top coins are up" in text
        assert "Bitcoin leads at +3.00%" in text
        assert "USD/EUR 0.9200" in text
        assert "not financial advice" in text

    def test_without_data(self):
        text = template_insights([], {})
        assert "Crypto market data is currently unavailable." in text
        assert "Forex rates are currently unavailable." in text


class TestInsightsService:
    def test_llm_summary(self, make_llm, make_response, market_data):
        llm = make_llm(response=make_response(content="  Markets look calm.  ", provider=LLMProvider.OPENAI))
        service = InsightsService(llm_client=llm, market_data=market_data)
        result = asyncio.run(service.execute(InsightsRequest(top_coins=3)))

        assert result.source == "llm"
        assert result.provider == "openai"
        assert result.insights == "Markets look calm."

        prompt = llm.calls[0]["user_prompt"]
        assert "Bitcoin (BTC): $65000" in prompt
        assert "Ghost" not in prompt
        assert "EUR: 0.92" in prompt
        assert "XAU" not in prompt
        market_data.get_top_coins.assert_awaited_once_with(3, sparkline=False)

    def test_llm_failure_uses_template(self, failing_llm, market_data):
        service = InsightsService(llm_client=failing_llm, market_data=market_data)
        result = asyncio.run(service.execute(InsightsRequest()))

        assert result.source == "template"
        assert result.provider is None
        assert "Bitcoin" in result.insights

    def test_empty_llm_text_uses_template(self, make_llm, make_response, market_data):
        service = InsightsService(llm_client=make_llm(response=make_response(content="   ")), market_data=market_data)
        assert asyncio.run(service.execute(InsightsRequest())).source == "template"

    def test_partial_market_data(self, failing_llm, market_data):
        market_data.get_usd_rates.side_effect = ExternalAPIError("ExchangeRateAPI", "down")
        service = InsightsService(llm_client=failing_llm, market_data=market_data)
        result = asyncio.run(service.execute(InsightsRequest()))

        assert "Forex rates are currently unavailable." in result.insights
        assert "Bitcoin" in result.insights

    def test_no_market_data(self, failing_llm, market_data):
        market_data.get_top_coins.side_effect = ExternalAPIError("CoinGecko", "down")
        market_data.get_usd_rates.side_effect = ExternalAPIError("ExchangeRateAPI", "down")
        service = InsightsService(llm_client=failing_llm, market_data=market_data)

        with pytest.raises(ExternalAPIError):
            asyncio.run(service.execute(InsightsRequest()))

    def test_unexpected_error_propagates(self, failing_llm, market_data):
        market_data.get_top_coins.side_effect = KeyError("id")
        service = InsightsService(llm_client=failing_llm, market_data=market_data)

        with pytest.raises(KeyError):
            asyncio.run(service.execute(InsightsRequest()))
