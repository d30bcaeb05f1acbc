"""
CONTRACT 1: Market Data

Input: raw provider payloads (CoinGecko, ExchangeRate-API, Yahoo Finance)
Output: PriceSeries

Provider payloads are validated into narrow models here and mapped to
PriceSeries immediately. Nothing downstream sees raw provider JSON.
"""

import math
import re
from datetime import datetime
from enum import Enum
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9._/-]{0,23}$")


# =============================================================================
# ENUMS
# =============================================================================


class MarketKind(str, Enum):
    CRYPTO = "crypto"
    FOREX = "forex"
    GENERIC = "generic"


# =============================================================================
# CORE INPUT: PriceSeries
# =============================================================================


class PriceSeries(BaseModel):
    """
    Chronological price series for one instrument.

    Index 0 is the oldest observation. Optional context (name, 24h change)
    is only used for prompt building.
    """

    symbol: str = Field(..., description="Instrument identifier (e.g., BTC, EURUSD)")
    prices: list[float] = Field(..., min_length=1)
    timestamps: Optional[list[datetime]] = None
    name: Optional[str] = None
    change_24h: Optional[float] = Field(
        default=None, description="24h price change in percent"
    )
    quote_price: Optional[float] = Field(
        default=None, gt=0, description="Live quote reported alongside the series, used for risk levels"
    )

    @field_validator("symbol")
    @classmethod
    def symbol_must_be_wellformed(cls, v: str) -> str:
        symbol = v.strip().upper()
        if not SYMBOL_PATTERN.match(symbol):
            raise ValueError(f"Malformed instrument symbol: {v!r}")
        return symbol

    @field_validator("prices")
    @classmethod
    def prices_must_be_positive(cls, v: list[float]) -> list[float]:
        for i, price in enumerate(v):
            if not math.isfinite(price) or price <= 0:
                raise ValueError(f"Price at index {i} must be a positive number, got {price}")
        return v

    @model_validator(mode="after")
    def timestamps_must_be_chronological(self) -> "PriceSeries":
        if self.timestamps is None:
            return self
        if len(self.timestamps) != len(self.prices):
            raise ValueError(
                f"timestamps ({len(self.timestamps)}) and prices ({len(self.prices)}) differ in length"
            )
        for earlier, later in zip(self.timestamps, self.timestamps[1:]):
            if later <= earlier:
                raise ValueError(
                    f"Price series is not chronological: {later.isoformat()} follows {earlier.isoformat()}"
                )
        return self

    @property
    def current_price(self) -> float:
        return self.prices[-1]

    @property
    def level_price(self) -> float:
        """Price that take-profit and stop-loss are anchored to."""
        return self.quote_price if self.quote_price is not None else self.prices[-1]

    def as_array(self) -> np.ndarray:
        return np.asarray(self.prices, dtype=float)

    def __len__(self) -> int:
        return len(self.prices)


class Quote(BaseModel):
    """Single price lookup (crypto price in USD or forex rate)."""

    symbol: str
    price: float = Field(..., gt=0)
    timestamp: datetime
    source: str


# =============================================================================
# PROVIDER PAYLOADS
# =============================================================================


class Sparkline(BaseModel):
    """CoinGecko 7-day sparkline (hourly prices)."""

    price: list[Optional[float]] = Field(default_factory=list)


class CoinMarketRecord(BaseModel):
    """One row of CoinGecko /coins/markets."""

    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    name: str
    current_price: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    sparkline_in_7d: Optional[Sparkline] = None

    @property
    def sparkline_prices(self) -> list[float]:
        if self.sparkline_in_7d is None:
            return []
        return [p for p in self.sparkline_in_7d.price if p is not None and p > 0]

    @property
    def live_price(self) -> Optional[float]:
        price = self.current_price
        if price is None or not math.isfinite(price) or price <= 0:
            return None
        return price


class ExchangeRates(BaseModel):
    """USD-based exchange rates (ExchangeRate-API v6 or the public v4 endpoint)."""

    model_config = ConfigDict(extra="ignore")

    base_code: str = "USD"
    conversion_rates: dict[str, float] = Field(default_factory=dict)
    rates: dict[str, float] = Field(default_factory=dict)

    @property
    def usd_rates(self) -> dict[str, float]:
        return self.conversion_rates or self.rates

    def cross_rate(self, pair: str) -> Optional[float]:
        """Price of one unit of base in quote currency for a pair like EURUSD."""
        base, quote = pair[:3].upper(), pair[3:].upper()
        rates = self.usd_rates
        base_rate = 1.0 if base == "USD" else rates.get(base)
        quote_rate = 1.0 if quote == "USD" else rates.get(quote)
        if not base_rate or not quote_rate:
            return None
        return quote_rate / base_rate
