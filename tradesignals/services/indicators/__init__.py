"""
Indicator Engine Service

CONTRACT:
    Input:  PriceSeries
    Output: IndicatorReadings

RESPONSIBILITIES:
    - Calculate SMA, EMA, RSI, MACD, Bollinger Bands, Stochastic
    - Reduce each indicator to its latest value
    - Report None where a window exceeds the data

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from tradesignals.services.indicators.interface import (
    IndicatorReadings,
    IndicatorServiceInterface,
)
from tradesignals.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorReadings",
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
