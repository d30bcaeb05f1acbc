"""
Signal Aggregator Interface

Defines the decision strategy contract and the signal service contract.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from tradesignals.services.base import BaseService
from tradesignals.schemas.market import MarketKind, PriceSeries
from tradesignals.schemas.signals import Signal, SignalType, StrategyName
from tradesignals.services.indicators.interface import IndicatorReadings


@dataclass(frozen=True)
class Decision:
    """Strategy output before risk levels are attached."""

    type: SignalType
    confidence: float
    indicator: str
    score: Optional[float] = None  # None for LLM decisions


@dataclass
class SignalRequest:
    """Input for signal generation."""

    series: PriceSeries
    market: MarketKind = MarketKind.GENERIC
    strategy: Optional[StrategyName] = None
    current_price: Optional[float] = None


@dataclass
class BatchOutcome:
    """Signals for a batch, in input order, plus the symbols that were skipped."""

    signals: list[Signal] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class DecisionStrategy(ABC):
    """Turns indicator readings into a BUY / SELL / HOLD decision."""

    @abstractmethod
    async def decide(
        self,
        series: PriceSeries,
        readings: IndicatorReadings,
        market: MarketKind = MarketKind.GENERIC,
    ) -> Decision:
        pass


class SignalServiceInterface(BaseService[SignalRequest, Signal]):
    """
    Signal Service Contract.

    INPUT: SignalRequest
        - series: validated PriceSeries
        - market: crypto / forex / generic (selects prompt and confidence policy)
        - strategy: optional override of the configured strategy

    OUTPUT: Signal
        - type, confidence, take_profit, stop_loss, current_price

    PIPELINE (per instrument):
        COMPUTE_INDICATORS -> DECIDE (reasoning, or rules) -> ATTACH_RISK_LEVELS

    The terminal state is always a fully populated Signal.
    """

    @property
    def name(self) -> str:
        return "SignalService"

    @abstractmethod
    async def execute(self, input_data: SignalRequest) -> Signal:
        pass

    @abstractmethod
    async def generate_batch(
        self,
        series_list: list[PriceSeries],
        market: MarketKind = MarketKind.GENERIC,
    ) -> BatchOutcome:
        """Generate signals for many instruments with bounded concurrency."""
        pass
