"""
Risk Level Calculator

CONTRACT:
    Input:  SignalType + current price
    Output: RiskLevels (take_profit, stop_loss)

PURE PYTHON - No LLM involvement.
Percentages come from settings (take_profit_percent, stop_loss_percent).
"""

from tradesignals.services.risk.interface import RiskLevelInput, RiskLevels, RiskServiceInterface
from tradesignals.services.risk.service import RiskLevelService, calculate_levels, get_risk_service

__all__ = [
    "RiskLevelInput",
    "RiskLevels",
    "RiskServiceInterface",
    "RiskLevelService",
    "calculate_levels",
    "get_risk_service",
]
