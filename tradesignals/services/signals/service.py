"""
Signal Service Implementation

Runs COMPUTE_INDICATORS -> DECIDE -> ATTACH_RISK_LEVELS per instrument,
and fans batches out with a concurrency cap.
"""

import asyncio
import logging
import math
from datetime import datetime
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tradesignals.core.config import settings
from tradesignals.schemas.market import MarketKind, PriceSeries
from tradesignals.schemas.signals import Signal, StrategyName
from tradesignals.services.base import InsufficientDataError, ValidationError
from tradesignals.services.indicators import IndicatorService, get_indicator_service
from tradesignals.services.risk import RiskLevelService, get_risk_service
from tradesignals.services.signals.interface import (
    BatchOutcome,
    DecisionStrategy,
    SignalRequest,
    SignalServiceInterface,
)
from tradesignals.services.signals.reasoning import ReasoningStrategy
from tradesignals.services.signals.rules import RuleBasedStrategy

logger = logging.getLogger(__name__)


def build_series(
    symbol: str,
    prices: list[float],
    timestamps: Optional[list[datetime]] = None,
) -> PriceSeries:
    """
    Validate client-supplied prices into a PriceSeries.

    Raises:
        ValidationError: with the pydantic error list under details["errors"]
    """
    try:
        return PriceSeries(symbol=symbol, prices=prices, timestamps=timestamps)
    except PydanticValidationError as e:
        raise ValidationError(
            "SignalService",
            f"Invalid price series for {symbol!r}",
            {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        )


class SignalService(SignalServiceInterface):
    """
    Signal Service.

    The strategy comes from ``settings.signal_strategy`` unless one is
    injected. A request may still ask for a named strategy explicitly.
    """

    def __init__(
        self,
        indicator_service: Optional[IndicatorService] = None,
        risk_service: Optional[RiskLevelService] = None,
        strategy: Optional[DecisionStrategy] = None,
        max_concurrency: Optional[int] = None,
        min_price_points: Optional[int] = None,
    ):
        self.indicator_service = indicator_service or get_indicator_service()
        self.risk_service = risk_service or get_risk_service()
        self.max_concurrency = max_concurrency or settings.max_concurrency
        self.min_price_points = min_price_points or settings.min_price_points
        self._strategy = strategy
        self._named: dict[StrategyName, DecisionStrategy] = {}

    @property
    def name(self) -> str:
        return "SignalService"

    def _named_strategy(self, strategy_name: StrategyName) -> DecisionStrategy:
        if strategy_name not in self._named:
            if strategy_name == StrategyName.RULES:
                self._named[strategy_name] = RuleBasedStrategy()
            else:
                self._named[strategy_name] = ReasoningStrategy()
        return self._named[strategy_name]

    def get_strategy(self, strategy_name: Optional[StrategyName] = None) -> DecisionStrategy:
        if strategy_name is not None:
            return self._named_strategy(strategy_name)
        if self._strategy is None:
            self._strategy = self._named_strategy(StrategyName(settings.signal_strategy))
        return self._strategy

    async def validate_input(self, input_data: SignalRequest) -> SignalRequest:
        price = input_data.current_price
        if price is not None and (not math.isfinite(price) or price <= 0):
            raise ValidationError(
                self.name,
                f"Current price must be positive, got {price}",
                {"current_price": price},
            )
        return input_data

    async def execute(self, input_data: SignalRequest) -> Signal:
        input_data = await self.validate_input(input_data)
        return await self.generate_signal(
            input_data.series,
            market=input_data.market,
            strategy=input_data.strategy,
            current_price=input_data.current_price,
        )

    async def generate_signal(
        self,
        series: PriceSeries,
        market: MarketKind = MarketKind.GENERIC,
        strategy: Optional[StrategyName] = None,
        current_price: Optional[float] = None,
    ) -> Signal:
        """Generate one signal. Never returns a partially populated Signal."""
        readings = self.indicator_service.compute(series)
        decision = await self.get_strategy(strategy).decide(series, readings, market)

        price = current_price if current_price is not None else series.level_price
        levels = self.risk_service.levels_for(decision.type, price)

        return Signal(
            symbol=series.symbol,
            type=decision.type,
            indicator=decision.indicator,
            confidence=decision.confidence,
            take_profit=levels.take_profit,
            stop_loss=levels.stop_loss,
            current_price=price,
        )

    async def generate_batch(
        self,
        series_list: list[PriceSeries],
        market: MarketKind = MarketKind.GENERIC,
    ) -> BatchOutcome:
        """
        Generate signals for many instruments.

        Series shorter than ``min_price_points`` are skipped. One
        instrument's failure never affects another. Output order follows
        input order.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(series: PriceSeries) -> Optional[Signal]:
            try:
                if len(series) < self.min_price_points:
                    raise InsufficientDataError(
                        self.name,
                        f"{series.symbol} has {len(series)} prices, need {self.min_price_points}",
                    )
                async with semaphore:
                    return await self.generate_signal(series, market=market)
            except InsufficientDataError as e:
                logger.warning(f"Skipping {series.symbol}: {e.message}")
            except Exception as e:
                logger.error(f"Signal generation failed for {series.symbol}: {e}")
            return None

        results = await asyncio.gather(*(run_one(s) for s in series_list))

        outcome = BatchOutcome()
        for series, signal in zip(series_list, results):
            if signal is None:
                outcome.skipped.append(series.symbol)
            else:
                outcome.signals.append(signal)

        logger.info(
            f"Generated {len(outcome.signals)} {market.value} signals, "
            f"skipped {len(outcome.skipped)}"
        )
        return outcome

    async def health_check(self) -> bool:
        return await self.indicator_service.health_check()


# Singleton instance
_signal_service: Optional[SignalService] = None


def get_signal_service() -> SignalService:
    """Get or create signal service instance."""
    global _signal_service
    if _signal_service is None:
        _signal_service = SignalService()
    return _signal_service
