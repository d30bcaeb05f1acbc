"""Shared test fixtures for the signal engine tests."""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from tradesignals.schemas.market import PriceSeries
from tradesignals.services.base import ExternalAPIError
from tradesignals.services.indicators import IndicatorService
from tradesignals.services.llm.client import LLMProvider, LLMResponse
from tradesignals.services.risk import RiskLevelService
from tradesignals.services.signals import RuleBasedStrategy, ScoringConfig, SignalService


def zigzag(length: int = 40) -> list[float]:
    """Flat 100/101 oscillation used as a neutral lead-in."""
    return [100.0 if i % 2 == 0 else 101.0 for i in range(length)]


# Rally to 110 then a sharp pullback: bearish crossovers, price near the
# lower band, stochastic oversold on %K only. Scores -5.
TOP_PRICES = zigzag() + [float(p) for p in range(101, 111)] + [108.5, 107.0, 105.5, 104.0, 102.5]

# Mirror image: slide to 91 then a rebound. Scores +5.
BOTTOM_PRICES = zigzag() + [float(p) for p in range(100, 90, -1)] + [92.5, 94.0, 95.5, 97.0, 98.5]

SMA_SCENARIO = [100.0, 102.0, 101.0, 105.0, 107.0, 106.0, 110.0, 108.0, 112.0, 115.0]

DECREASING_PRICES = [float(p) for p in range(120, 100, -1)]

RISING_PRICES = [float(p) for p in range(1, 61)]


class FakeLLMClient:
    """Stand-in for LLMClient that returns a canned response or raises."""

    def __init__(
        self,
        response: Optional[LLMResponse] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def generate(self, **kwargs) -> LLMResponse:
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        pass


def llm_response(
    content: str = "",
    structured: Optional[dict] = None,
    provider: LLMProvider = LLMProvider.A0,
) -> LLMResponse:
    return LLMResponse(content=content, model="test-model", provider=provider, structured=structured)


@pytest.fixture
def top_series() -> PriceSeries:
    return PriceSeries(symbol="TOP", prices=TOP_PRICES)


@pytest.fixture
def bottom_series() -> PriceSeries:
    return PriceSeries(symbol="BOTTOM", prices=BOTTOM_PRICES)


@pytest.fixture
def sma_scenario_series() -> PriceSeries:
    return PriceSeries(symbol="SMA", prices=SMA_SCENARIO)


@pytest.fixture
def decreasing_series() -> PriceSeries:
    return PriceSeries(symbol="DOWN", prices=DECREASING_PRICES)


@pytest.fixture
def rising_series() -> PriceSeries:
    return PriceSeries(symbol="UP", prices=RISING_PRICES)


@pytest.fixture
def indicator_service() -> IndicatorService:
    return IndicatorService(fast_period=5, slow_period=10)


@pytest.fixture
def rules() -> RuleBasedStrategy:
    return RuleBasedStrategy(ScoringConfig())


@pytest.fixture
def failing_llm() -> FakeLLMClient:
    return FakeLLMClient(error=ExternalAPIError("A0Client", "LLM call failed: 503"))


@pytest.fixture
def make_llm():
    """Factory for FakeLLMClient instances."""
    return FakeLLMClient


@pytest.fixture
def make_response():
    """Factory for LLMResponse instances."""
    return llm_response


@pytest.fixture
def make_signal_service(indicator_service):
    """Factory for a SignalService wired with explicit collaborators."""

    def _make(strategy, max_concurrency: int = 5, min_price_points: int = 50) -> SignalService:
        return SignalService(
            indicator_service=indicator_service,
            risk_service=RiskLevelService(take_profit_percent=5.0, stop_loss_percent=2.0),
            strategy=strategy,
            max_concurrency=max_concurrency,
            min_price_points=min_price_points,
        )

    return _make


@pytest.fixture
def series_factory():
    """Build a PriceSeries from a symbol and a price list."""

    def _make(symbol: str, prices: list[float]) -> PriceSeries:
        return PriceSeries(symbol=symbol, prices=prices)

    return _make
