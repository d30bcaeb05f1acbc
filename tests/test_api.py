"""Tests for the HTTP API."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from tradesignals.main import app
from tradesignals.schemas.market import ExchangeRates, PriceSeries
from tradesignals.schemas.signals import InsightsResponse
from tradesignals.services.base import ExternalAPIError, ValidationError
from tradesignals.services.market_data import MarketDataService

from conftest import BOTTOM_PRICES, TOP_PRICES

SIGNALS = "tradesignals.api.v1.endpoints.signals"
MARKET = "tradesignals.api.v1.endpoints.market"
INSIGHTS = "tradesignals.api.v1.endpoints.insights"


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def rules_service(make_signal_service, rules):
    return make_signal_service(rules)


class TestRoot:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["message"] == "TradeSignals Pro Backend API"

    def test_forex_pairs(self, client):
        pairs = client.get("/api/v1/market/forex/pairs").json()["pairs"]
        assert len(pairs) == 25
        assert "EURUSD" in pairs


class TestAnalyze:
    def test_signal_uses_camel_case(self, client, rules_service):
        with patch(f"{SIGNALS}.get_signal_service", return_value=rules_service):
            response = client.post(
                "/api/v1/signals/analyze",
                json={"symbol": "top", "prices": TOP_PRICES, "market": "crypto", "strategy": "rules"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["symbol"] == "TOP"
        assert body["type"] == "SELL"
        assert body["indicator"] == "Rule-Based Composite"
        assert body["currentPrice"] == 102.5
        assert body["takeProfit"] == pytest.approx(97.375)
        assert body["stopLoss"] == pytest.approx(104.55)

    def test_current_price_override(self, client, rules_service):
        with patch(f"{SIGNALS}.get_signal_service", return_value=rules_service):
            response = client.post(
                "/api/v1/signals/analyze",
                json={"symbol": "BOTTOM", "prices": BOTTOM_PRICES, "current_price": 100.0},
            )

        body = response.json()
        assert body["type"] == "BUY"
        assert body["takeProfit"] == pytest.approx(105.0)
        assert body["stopLoss"] == pytest.approx(98.0)

    @pytest.mark.parametrize(
        "payload",
        [
            {"symbol": "bad symbol!", "prices": [1.0, 2.0]},
            {"symbol": "BTC", "prices": []},
            {"symbol": "BTC", "prices": [1.0, -2.0]},
            {
                "symbol": "BTC",
                "prices": [1.0, 2.0],
                "timestamps": ["2024-01-02T00:00:00Z", "2024-01-01T00:00:00Z"],
            },
        ],
    )
    def test_invalid_series_is_rejected(self, client, rules_service, payload):
        with patch(f"{SIGNALS}.get_signal_service", return_value=rules_service):
            response = client.post("/api/v1/signals/analyze", json=payload)
        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    def test_unknown_market_is_unprocessable(self, client):
        response = client.post(
            "/api/v1/signals/analyze", json={"symbol": "BTC", "prices": [1.0], "market": "stocks"}
        )
        assert response.status_code == 422

    def test_service_validation_error(self, client):
        service = AsyncMock()
        service.execute.side_effect = ValidationError("RiskService", "Current price must be positive")
        with patch(f"{SIGNALS}.get_signal_service", return_value=service):
            response = client.post("/api/v1/signals/analyze", json={"symbol": "BTC", "prices": [1.0]})

        assert response.status_code == 400
        assert response.json()["detail"] == "Current price must be positive"

    def test_unexpected_error(self, client):
        service = AsyncMock()
        service.execute.side_effect = RuntimeError("boom")
        with patch(f"{SIGNALS}.get_signal_service", return_value=service):
            response = client.post("/api/v1/signals/analyze", json={"symbol": "BTC", "prices": [1.0]})
        assert response.status_code == 500


class TestBatchEndpoints:
    def test_crypto_signals(self, client, rules_service):
        market = AsyncMock()
        market.get_crypto_series.return_value = [
            PriceSeries(symbol="TOP", prices=TOP_PRICES),
            PriceSeries(symbol="NEW", prices=TOP_PRICES[:10]),
        ]
        with patch(f"{SIGNALS}.get_market_data_service", return_value=market), patch(
            f"{SIGNALS}.get_signal_service", return_value=rules_service
        ):
            response = client.get("/api/v1/signals/crypto", params={"limit": 2})

        assert response.status_code == 200
        body = response.json()
        assert [s["symbol"] for s in body["signals"]] == ["TOP"]
        assert body["skipped"] == ["NEW"]
        assert body["source"] == "coingecko"
        assert "generatedAt" in body
        market.get_crypto_series.assert_awaited_once_with(2)

    def test_crypto_upstream_failure(self, client):
        market = AsyncMock()
        market.get_crypto_series.side_effect = ExternalAPIError("CoinGecko", "status 429")
        with patch(f"{SIGNALS}.get_market_data_service", return_value=market):
            response = client.get("/api/v1/signals/crypto")
        assert response.status_code == 502

    def test_forex_signals(self, client, rules_service):
        rates = AsyncMock()
        rates.fetch_rates.return_value = ExchangeRates(conversion_rates={"EUR": 0.9, "JPY": 150.0})
        market = MarketDataService(coingecko=AsyncMock(), exchange_rates=rates, forex_source="synthetic")

        with patch(f"{SIGNALS}.get_market_data_service", return_value=market), patch(
            f"{SIGNALS}.get_signal_service", return_value=rules_service
        ):
            response = client.get("/api/v1/signals/forex", params={"pairs": "EURUSD, usdjpy"})

        assert response.status_code == 200
        body = response.json()
        assert [s["symbol"] for s in body["signals"]] == ["EURUSD", "USDJPY"]
        assert body["source"] == "synthetic"

    def test_forex_bad_pair(self, client):
        market = AsyncMock()
        market.get_forex_series.side_effect = ValidationError("ForexAdapter", "Invalid currency pair: 'EURO'")
        with patch(f"{SIGNALS}.get_market_data_service", return_value=market):
            response = client.get("/api/v1/signals/forex", params={"pairs": "EURO"})
        assert response.status_code == 400

    def test_forex_upstream_failure(self, client):
        market = AsyncMock()
        market.get_forex_series.side_effect = ExternalAPIError("MarketDataService", "No forex history available")
        with patch(f"{SIGNALS}.get_market_data_service", return_value=market):
            response = client.get("/api/v1/signals/forex")
        assert response.status_code == 502
        assert "No forex history available" in response.json()["detail"]

    def test_signals_health(self, client, rules_service):
        with patch(f"{SIGNALS}.get_signal_service", return_value=rules_service):
            assert client.get("/api/v1/signals/health").json() == {"healthy": True}


class TestMarketEndpoints:
    def test_unknown_coin(self, client):
        market = AsyncMock()
        market.get_crypto_price.side_effect = ValidationError("CoinGecko", "Price not found for nocoin")
        with patch(f"{MARKET}.get_market_data_service", return_value=market):
            response = client.get("/api/v1/market/crypto/nocoin/price")
        assert response.status_code == 404

    def test_forex_rate(self, client):
        rates = AsyncMock()
        rates.fetch_rates.return_value = ExchangeRates(conversion_rates={"EUR": 0.8})
        market = MarketDataService(coingecko=AsyncMock(), exchange_rates=rates)

        with patch(f"{MARKET}.get_market_data_service", return_value=market):
            response = client.get("/api/v1/market/forex/EURUSD/rate")

        assert response.status_code == 200
        body = response.json()
        assert body["symbol"] == "EURUSD"
        assert body["price"] == pytest.approx(1.25)

    def test_forex_rate_upstream_failure(self, client):
        market = AsyncMock()
        market.get_forex_rate.side_effect = ExternalAPIError("ExchangeRateAPI", "down")
        with patch(f"{MARKET}.get_market_data_service", return_value=market):
            assert client.get("/api/v1/market/forex/EURUSD/rate").status_code == 502


class TestInsightsEndpoint:
    def test_insights(self, client):
        service = AsyncMock()
        service.execute.return_value = InsightsResponse(
            insights="Calm markets.", source="template", generated_at="2024-01-01T00:00:00Z"
        )
        with patch(f"{INSIGHTS}.get_insights_service", return_value=service):
            response = client.get("/api/v1/insights", params={"top_coins": 5})

        assert response.status_code == 200
        assert response.json()["source"] == "template"
        assert service.execute.await_args.args[0].top_coins == 5

    def test_insights_without_market_data(self, client):
        service = AsyncMock()
        service.execute.side_effect = ExternalAPIError("InsightsService", "No market data available for insights")
        with patch(f"{INSIGHTS}.get_insights_service", return_value=service):
            assert client.get("/api/v1/insights").status_code == 502
