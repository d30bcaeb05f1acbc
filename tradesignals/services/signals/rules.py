"""
Rule-Based Decision Strategy

Deterministic weighted scoring of indicator readings.
NO LLM INVOLVEMENT.

Score contributions (default weights):
    RSI < 30: +2, RSI > 70: -2, else +1 below 50 / -1 above 50
    SMA fast/slow crossover: +/-1.5
    EMA fast/slow crossover: +/-1
    MACD histogram sign: +/-1.5
    Price below lower / above upper Bollinger Band: +2 / -2
    Stochastic %K and %D both oversold / overbought: +1.5 / -1.5

Readings that are None contribute nothing.
"""

from dataclasses import dataclass, replace
from typing import Optional

from tradesignals.core.config import Settings, settings
from tradesignals.schemas.market import MarketKind, PriceSeries
from tradesignals.schemas.signals import SignalType
from tradesignals.services.indicators.interface import (
    BandPosition,
    IndicatorReadings,
    Trend,
    Zone,
)
from tradesignals.services.signals.interface import Decision, DecisionStrategy

RULE_BASED_LABEL = "Rule-Based Composite"
FALLBACK_LABEL = "Fallback Composite"


@dataclass(frozen=True)
class ScoringConfig:
    """Weights and thresholds for the rule-based score."""

    buy_threshold: float = 4.0
    sell_threshold: float = -4.0
    rsi_extreme_weight: float = 2.0
    rsi_bias_weight: float = 1.0
    sma_cross_weight: float = 1.5
    ema_cross_weight: float = 1.0
    macd_weight: float = 1.5
    bollinger_weight: float = 2.0
    stochastic_weight: float = 1.5

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "ScoringConfig":
        config = config or settings
        return cls(
            buy_threshold=config.buy_threshold,
            sell_threshold=config.sell_threshold,
            rsi_extreme_weight=config.rsi_extreme_weight,
            rsi_bias_weight=config.rsi_bias_weight,
            sma_cross_weight=config.sma_cross_weight,
            ema_cross_weight=config.ema_cross_weight,
            macd_weight=config.macd_weight,
            bollinger_weight=config.bollinger_weight,
            stochastic_weight=config.stochastic_weight,
        )


def _trend_points(trend: Optional[Trend], weight: float) -> float:
    if trend == Trend.BULLISH:
        return weight
    if trend == Trend.BEARISH:
        return -weight
    return 0.0


def score_readings(readings: IndicatorReadings, config: ScoringConfig) -> float:
    """Signed score, positive is bullish."""
    score = 0.0

    # RSI
    if readings.rsi is not None:
        if readings.rsi_zone == Zone.OVERSOLD:
            score += config.rsi_extreme_weight
        elif readings.rsi_zone == Zone.OVERBOUGHT:
            score -= config.rsi_extreme_weight
        elif readings.rsi < 50:
            score += config.rsi_bias_weight
        elif readings.rsi > 50:
            score -= config.rsi_bias_weight

    # Crossovers
    score += _trend_points(readings.sma_trend, config.sma_cross_weight)
    score += _trend_points(readings.ema_trend, config.ema_cross_weight)
    score += _trend_points(readings.macd_trend, config.macd_weight)

    # Bollinger Bands
    position = readings.bollinger_position
    if position == BandPosition.BELOW_LOWER:
        score += config.bollinger_weight
    elif position == BandPosition.ABOVE_UPPER:
        score -= config.bollinger_weight

    # Stochastic
    zone = readings.stochastic_zone
    if zone == Zone.OVERSOLD:
        score += config.stochastic_weight
    elif zone == Zone.OVERBOUGHT:
        score -= config.stochastic_weight

    return score


def decision_from_score(score: float, config: ScoringConfig, label: str) -> Decision:
    if score >= config.buy_threshold:
        return Decision(SignalType.BUY, min(95.0, 70 + abs(score) * 5), label, score)
    if score <= config.sell_threshold:
        return Decision(SignalType.SELL, min(95.0, 70 + abs(score) * 5), label, score)
    return Decision(SignalType.HOLD, max(50.0, 60 + score * 5), label, score)


class RuleBasedStrategy(DecisionStrategy):
    """Deterministic weighted indicator scoring."""

    def __init__(self, config: Optional[ScoringConfig] = None, label: str = RULE_BASED_LABEL):
        self.config = config or ScoringConfig.from_settings()
        self.label = label

    def evaluate(self, readings: IndicatorReadings) -> Decision:
        return decision_from_score(score_readings(readings, self.config), self.config, self.label)

    def as_fallback(self, readings: IndicatorReadings) -> Decision:
        return replace(self.evaluate(readings), indicator=FALLBACK_LABEL)

    async def decide(
        self,
        series: PriceSeries,
        readings: IndicatorReadings,
        market: MarketKind = MarketKind.GENERIC,
    ) -> Decision:
        return self.evaluate(readings)
