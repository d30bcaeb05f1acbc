"""
Indicator Engine Service Implementation

Reduces a PriceSeries to the latest reading of each indicator.
NO LLM INVOLVEMENT - Pure NumPy calculations.
"""

import logging
from typing import Optional

from tradesignals.core.config import settings
from tradesignals.schemas.market import PriceSeries
from tradesignals.services.indicators.interface import (
    IndicatorReadings,
    IndicatorServiceInterface,
)
from tradesignals.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    stochastic,
    bollinger_bands,
    last_value,
)

logger = logging.getLogger(__name__)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Fast/slow periods drive the SMA and EMA crossovers. The remaining
    windows use the textbook defaults.
    """

    def __init__(
        self,
        fast_period: Optional[int] = None,
        slow_period: Optional[int] = None,
        rsi_period: int = 14,
        bollinger_period: int = 20,
        bollinger_std: float = 2.0,
        stoch_k_period: int = 14,
        stoch_d_period: int = 3,
    ):
        self.fast_period = fast_period or settings.fast_period
        self.slow_period = slow_period or settings.slow_period
        self.rsi_period = rsi_period
        self.bollinger_period = bollinger_period
        self.bollinger_std = bollinger_std
        self.stoch_k_period = stoch_k_period
        self.stoch_d_period = stoch_d_period

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: PriceSeries) -> IndicatorReadings:
        input_data = await self.validate_input(input_data)
        return self.compute(input_data)

    def compute(self, series: PriceSeries) -> IndicatorReadings:
        closes = series.as_array()

        macd_result = macd(closes)
        bands = bollinger_bands(closes, self.bollinger_period, self.bollinger_std)
        stoch = stochastic(closes, self.stoch_k_period, self.stoch_d_period)

        readings = IndicatorReadings(
            symbol=series.symbol,
            current_price=series.current_price,
            rsi=last_value(rsi(closes, self.rsi_period)),
            sma_fast=last_value(sma(closes, self.fast_period)),
            sma_slow=last_value(sma(closes, self.slow_period)),
            ema_fast=last_value(ema(closes, self.fast_period)),
            ema_slow=last_value(ema(closes, self.slow_period)),
            macd_line=last_value(macd_result.macd),
            macd_signal=last_value(macd_result.signal),
            macd_histogram=last_value(macd_result.histogram),
            bb_upper=last_value(bands.upper),
            bb_middle=last_value(bands.middle),
            bb_lower=last_value(bands.lower),
            stoch_k=last_value(stoch.k),
            stoch_d=last_value(stoch.d),
        )

        logger.debug(
            f"Indicators for {series.symbol} ({len(series)} points): "
            f"RSI={readings.rsi}, MACD hist={readings.macd_histogram}"
        )
        return readings

    async def health_check(self) -> bool:
        return True


# Singleton instance
_indicator_service: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _indicator_service
    if _indicator_service is None:
        _indicator_service = IndicatorService()
    return _indicator_service
