"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from tradesignals.services.base import BaseService
from tradesignals.schemas.market import PriceSeries


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Zone(str, Enum):
    OVERSOLD = "oversold"
    OVERBOUGHT = "overbought"
    NEUTRAL = "neutral"


class BandPosition(str, Enum):
    BELOW_LOWER = "below lower"
    ABOVE_UPPER = "above upper"
    WITHIN = "within bands"


def _compare(fast: Optional[float], slow: Optional[float]) -> Optional[Trend]:
    if fast is None or slow is None:
        return None
    if fast > slow:
        return Trend.BULLISH
    if fast < slow:
        return Trend.BEARISH
    return Trend.NEUTRAL


@dataclass(frozen=True)
class IndicatorReadings:
    """
    Latest indicator values for one series.

    A None field means the indicator had too little data and carries no
    opinion. It is never read as zero.
    """

    symbol: str
    current_price: float
    rsi: Optional[float] = None
    sma_fast: Optional[float] = None
    sma_slow: Optional[float] = None
    ema_fast: Optional[float] = None
    ema_slow: Optional[float] = None
    macd_line: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_histogram: Optional[float] = None
    bb_upper: Optional[float] = None
    bb_middle: Optional[float] = None
    bb_lower: Optional[float] = None
    stoch_k: Optional[float] = None
    stoch_d: Optional[float] = None

    @property
    def rsi_zone(self) -> Optional[Zone]:
        if self.rsi is None:
            return None
        if self.rsi < 30:
            return Zone.OVERSOLD
        if self.rsi > 70:
            return Zone.OVERBOUGHT
        return Zone.NEUTRAL

    @property
    def sma_trend(self) -> Optional[Trend]:
        return _compare(self.sma_fast, self.sma_slow)

    @property
    def ema_trend(self) -> Optional[Trend]:
        return _compare(self.ema_fast, self.ema_slow)

    @property
    def macd_trend(self) -> Optional[Trend]:
        return _compare(self.macd_histogram, 0.0)

    @property
    def bollinger_position(self) -> Optional[BandPosition]:
        if self.bb_upper is None or self.bb_lower is None:
            return None
        if self.current_price < self.bb_lower:
            return BandPosition.BELOW_LOWER
        if self.current_price > self.bb_upper:
            return BandPosition.ABOVE_UPPER
        return BandPosition.WITHIN

    @property
    def stochastic_zone(self) -> Optional[Zone]:
        """Oversold or overbought only when %K and %D agree."""
        if self.stoch_k is None or self.stoch_d is None:
            return None
        if self.stoch_k < 20 and self.stoch_d < 20:
            return Zone.OVERSOLD
        if self.stoch_k > 80 and self.stoch_d > 80:
            return Zone.OVERBOUGHT
        return Zone.NEUTRAL

    def to_dict(self) -> dict:
        return asdict(self)


class IndicatorServiceInterface(BaseService[PriceSeries, IndicatorReadings]):
    """
    Indicator Engine Service Contract.

    INPUT: PriceSeries
        - symbol and chronological closing prices

    OUTPUT: IndicatorReadings
        - latest value of every indicator, None where data was insufficient
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: PriceSeries) -> IndicatorReadings:
        """Calculate indicators for one series."""
        pass

    @abstractmethod
    def compute(self, series: PriceSeries) -> IndicatorReadings:
        """Synchronous calculation, usable outside the event loop."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
