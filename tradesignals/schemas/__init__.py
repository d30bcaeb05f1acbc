"""
Data contracts shared across services.
"""

from tradesignals.schemas.market import (
    CoinMarketRecord,
    ExchangeRates,
    MarketKind,
    PriceSeries,
    Quote,
)
from tradesignals.schemas.signals import (
    BatchSignalResponse,
    InsightsResponse,
    ReasoningVerdict,
    Signal,
    SignalType,
    StrategyName,
)

__all__ = [
    "CoinMarketRecord",
    "ExchangeRates",
    "MarketKind",
    "PriceSeries",
    "Quote",
    "BatchSignalResponse",
    "InsightsResponse",
    "ReasoningVerdict",
    "Signal",
    "SignalType",
    "StrategyName",
]
