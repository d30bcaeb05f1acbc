"""
Risk Level Service Interface

Defines the contract for the take-profit / stop-loss layer.
"""

from abc import abstractmethod
from dataclasses import dataclass

from tradesignals.services.base import BaseService
from tradesignals.schemas.signals import SignalType


@dataclass
class RiskLevelInput:
    """Input for risk level calculation."""

    signal_type: SignalType
    current_price: float


@dataclass(frozen=True)
class RiskLevels:
    take_profit: float
    stop_loss: float


class RiskServiceInterface(BaseService[RiskLevelInput, RiskLevels]):
    """
    Risk Level Service Contract.

    INPUT: RiskLevelInput
        - signal_type: BUY / SELL / HOLD
        - current_price: Latest price of the instrument

    OUTPUT: RiskLevels
        - take_profit, stop_loss at fixed percentages from price

    RULES:
        BUY:  TP above price, SL below
        SELL: TP below price, SL above
        HOLD: both equal to price
    """

    @property
    def name(self) -> str:
        return "RiskService"

    @abstractmethod
    async def execute(self, input_data: RiskLevelInput) -> RiskLevels:
        """Calculate levels for a signal."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Risk service is always healthy (pure computation)."""
        pass
