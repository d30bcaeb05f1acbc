"""
Risk Level Service Implementation

Fixed-percentage take-profit and stop-loss levels.
PURE PYTHON - No LLM involvement.
"""

import math
from typing import Optional

from tradesignals.core.config import settings
from tradesignals.schemas.signals import SignalType
from tradesignals.services.base import ValidationError
from tradesignals.services.risk.interface import (
    RiskLevelInput,
    RiskLevels,
    RiskServiceInterface,
)


def calculate_levels(
    signal_type: SignalType,
    current_price: float,
    take_profit_percent: Optional[float] = None,
    stop_loss_percent: Optional[float] = None,
) -> RiskLevels:
    """
    Take-profit and stop-loss for a signal at the given price.

    Raises:
        ValidationError: current_price is not a positive number
    """
    if not math.isfinite(current_price) or current_price <= 0:
        raise ValidationError(
            "RiskService",
            f"Current price must be positive, got {current_price}",
            {"current_price": current_price},
        )

    tp_pct = (take_profit_percent if take_profit_percent is not None else settings.take_profit_percent) / 100
    sl_pct = (stop_loss_percent if stop_loss_percent is not None else settings.stop_loss_percent) / 100

    if signal_type == SignalType.BUY:
        return RiskLevels(
            take_profit=current_price * (1 + tp_pct),
            stop_loss=current_price * (1 - sl_pct),
        )
    if signal_type == SignalType.SELL:
        return RiskLevels(
            take_profit=current_price * (1 - tp_pct),
            stop_loss=current_price * (1 + sl_pct),
        )
    return RiskLevels(take_profit=current_price, stop_loss=current_price)


class RiskLevelService(RiskServiceInterface):
    """Risk Level Service."""

    def __init__(
        self,
        take_profit_percent: Optional[float] = None,
        stop_loss_percent: Optional[float] = None,
    ):
        self.take_profit_percent = (
            take_profit_percent if take_profit_percent is not None else settings.take_profit_percent
        )
        self.stop_loss_percent = (
            stop_loss_percent if stop_loss_percent is not None else settings.stop_loss_percent
        )
        if not (0 < self.stop_loss_percent < 100) or not (0 < self.take_profit_percent < 100):
            raise ValidationError(
                self.name,
                "Take-profit and stop-loss percentages must be between 0 and 100",
                {"take_profit_percent": self.take_profit_percent, "stop_loss_percent": self.stop_loss_percent},
            )

    @property
    def name(self) -> str:
        return "RiskLevelService"

    async def execute(self, input_data: RiskLevelInput) -> RiskLevels:
        input_data = await self.validate_input(input_data)
        return self.levels_for(input_data.signal_type, input_data.current_price)

    def levels_for(self, signal_type: SignalType, current_price: float) -> RiskLevels:
        return calculate_levels(
            signal_type,
            current_price,
            self.take_profit_percent,
            self.stop_loss_percent,
        )

    async def health_check(self) -> bool:
        return True


# Singleton instance
_risk_service: Optional[RiskLevelService] = None


def get_risk_service() -> RiskLevelService:
    """Get or create risk service instance."""
    global _risk_service
    if _risk_service is None:
        _risk_service = RiskLevelService()
    return _risk_service
