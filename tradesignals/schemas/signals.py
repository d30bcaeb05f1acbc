"""
CONTRACT 2: Trading Signals

Input: PriceSeries
Output: Signal

The Signal is the only thing the UI renders. It is built once per request
and never mutated.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class StrategyName(str, Enum):
    REASONING = "reasoning"
    RULES = "rules"


# =============================================================================
# OUTPUT: Signal
# =============================================================================


class Signal(BaseModel):
    """
    Trading signal for one instrument.

    Serialized with camelCase keys (takeProfit, stopLoss, currentPrice)
    to match the frontend contract.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    type: SignalType
    indicator: str = Field(..., description="Method that produced the call")
    confidence: float = Field(..., ge=0, le=100)
    take_profit: float = Field(..., alias="takeProfit", gt=0)
    stop_loss: float = Field(..., alias="stopLoss", gt=0)
    current_price: float = Field(..., alias="currentPrice", gt=0)

    @model_validator(mode="after")
    def levels_must_match_direction(self) -> "Signal":
        price = self.current_price
        if self.type == SignalType.HOLD:
            if not (self.take_profit == self.stop_loss == price):
                raise ValueError("HOLD signal must have take profit and stop loss at current price")
        elif self.type == SignalType.BUY:
            if not (self.take_profit > price > self.stop_loss):
                raise ValueError("BUY signal requires take profit above and stop loss below price")
        elif not (self.take_profit < price < self.stop_loss):
            raise ValueError("SELL signal requires take profit below and stop loss above price")
        return self


class BatchSignalResponse(BaseModel):
    """Signals for a batch of instruments."""

    model_config = ConfigDict(populate_by_name=True)

    signals: list[Signal]
    skipped: list[str] = Field(default_factory=list)
    source: str
    generated_at: datetime = Field(..., alias="generatedAt")


# =============================================================================
# REASONING SERVICE OUTPUT
# =============================================================================


class ReasoningVerdict(BaseModel):
    """Structured answer expected from the reasoning LLM."""

    signal: SignalType
    confidence: float = Field(..., ge=0, le=100)


REASONING_RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "signal": {"type": "string", "enum": ["BUY", "SELL", "HOLD"]},
        "confidence": {"type": "number", "minimum": 0, "maximum": 100},
    },
    "required": ["signal", "confidence"],
}


# =============================================================================
# INSIGHTS
# =============================================================================


class InsightsResponse(BaseModel):
    """Market insights summary."""

    insights: str
    source: str = Field(..., description="llm or template")
    generated_at: datetime
    provider: Optional[str] = None
