"""
Signal Aggregator

CONTRACT:
    Input:  PriceSeries (+ market kind)
    Output: Signal

RESPONSIBILITIES:
    - Combine indicator readings into BUY / SELL / HOLD with confidence
    - Optionally ask the reasoning LLM, always with a rule-based fallback
    - Attach take-profit / stop-loss levels
    - Run batches concurrently under a semaphore

Strategies:
    RuleBasedStrategy  - deterministic weighted scoring
    ReasoningStrategy  - LLM verdict, rules on any failure
"""

from tradesignals.services.signals.interface import (
    BatchOutcome,
    Decision,
    DecisionStrategy,
    SignalRequest,
    SignalServiceInterface,
)
from tradesignals.services.signals.rules import RuleBasedStrategy, ScoringConfig
from tradesignals.services.signals.reasoning import (
    ConfidenceRange,
    ReasoningProfile,
    ReasoningStrategy,
)
from tradesignals.services.signals.service import SignalService, build_series, get_signal_service

__all__ = [
    "BatchOutcome",
    "Decision",
    "DecisionStrategy",
    "SignalRequest",
    "SignalServiceInterface",
    "RuleBasedStrategy",
    "ScoringConfig",
    "ConfidenceRange",
    "ReasoningProfile",
    "ReasoningStrategy",
    "SignalService",
    "build_series",
    "get_signal_service",
]
