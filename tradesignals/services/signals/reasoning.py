"""
LLM-Assisted Decision Strategy

Asks the reasoning LLM for a verdict on the indicator readings.

CRITICAL: LLM does NO math. All numbers come from the Indicator Engine.
Any failure (timeout, provider error, unparseable answer) falls back to
the rule-based decision for the same readings.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from tradesignals.core.config import Settings, settings
from tradesignals.schemas.market import MarketKind, PriceSeries
from tradesignals.schemas.signals import REASONING_RESPONSE_SCHEMA
from tradesignals.services.indicators.interface import IndicatorReadings
from tradesignals.services.llm.client import LLMClient, get_llm_client
from tradesignals.services.llm.parsing import parse_verdict
from tradesignals.services.llm.prompts import (
    CRYPTO_SYSTEM_PROMPT,
    FOREX_SYSTEM_PROMPT,
    format_crypto_prompt,
    format_forex_prompt,
)
from tradesignals.services.signals.interface import Decision, DecisionStrategy
from tradesignals.services.signals.rules import RuleBasedStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfidenceRange:
    minimum: float = 0.0
    maximum: float = 100.0

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


@dataclass(frozen=True)
class ReasoningProfile:
    """Per-market prompt and confidence policy."""

    market: MarketKind
    system_prompt: str
    temperature: float
    confidence_range: ConfidenceRange
    default_confidence: float
    label: str


def build_profiles(config: Optional[Settings] = None) -> dict[MarketKind, ReasoningProfile]:
    config = config or settings
    forex_range = ConfidenceRange(config.forex_confidence_min, config.forex_confidence_max)
    return {
        MarketKind.CRYPTO: ReasoningProfile(
            market=MarketKind.CRYPTO,
            system_prompt=CRYPTO_SYSTEM_PROMPT,
            temperature=0.3,
            confidence_range=ConfidenceRange(config.crypto_confidence_min, config.crypto_confidence_max),
            default_confidence=85.0,
            label="AI LLM Analysis",
        ),
        MarketKind.FOREX: ReasoningProfile(
            market=MarketKind.FOREX,
            system_prompt=FOREX_SYSTEM_PROMPT,
            temperature=0.1,
            confidence_range=forex_range,
            default_confidence=50.0,
            label="AI-Driven Multi-Indicator Analysis",
        ),
        MarketKind.GENERIC: ReasoningProfile(
            market=MarketKind.GENERIC,
            system_prompt=FOREX_SYSTEM_PROMPT,
            temperature=0.1,
            confidence_range=forex_range,
            default_confidence=50.0,
            label="AI-Driven Multi-Indicator Analysis",
        ),
    }


class ReasoningStrategy(DecisionStrategy):
    """
    LLM verdict with a mandatory rule-based fallback.

    The fallback decision is labelled "Fallback Composite" and otherwise
    identical to what RuleBasedStrategy returns.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        fallback: Optional[RuleBasedStrategy] = None,
        profiles: Optional[dict[MarketKind, ReasoningProfile]] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self._llm_client = llm_client
        self.fallback = fallback or RuleBasedStrategy()
        self.profiles = profiles or build_profiles()
        self.timeout_seconds = timeout_seconds or settings.llm_timeout_seconds

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    async def decide(
        self,
        series: PriceSeries,
        readings: IndicatorReadings,
        market: MarketKind = MarketKind.GENERIC,
    ) -> Decision:
        profile = self.profiles.get(market, self.profiles[MarketKind.GENERIC])

        try:
            return await asyncio.wait_for(
                self._llm_decision(series, readings, profile),
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            logger.warning(
                f"LLM reasoning failed for {series.symbol}: {type(e).__name__}: {e}, "
                f"falling back to rules"
            )
            return self.fallback.as_fallback(readings)

    def _build_prompt(
        self, series: PriceSeries, readings: IndicatorReadings, profile: ReasoningProfile
    ) -> str:
        if profile.market == MarketKind.CRYPTO:
            return format_crypto_prompt(series, readings)
        return format_forex_prompt(
            series,
            readings,
            fast=settings.fast_period,
            slow=settings.slow_period,
            market="forex" if profile.market == MarketKind.FOREX else "market",
        )

    async def _llm_decision(
        self, series: PriceSeries, readings: IndicatorReadings, profile: ReasoningProfile
    ) -> Decision:
        response = await self.llm_client.generate(
            system_prompt=profile.system_prompt,
            user_prompt=self._build_prompt(series, readings, profile),
            temperature=profile.temperature,
            response_schema=REASONING_RESPONSE_SCHEMA,
        )

        verdict = parse_verdict(response, profile.default_confidence)
        confidence = profile.confidence_range.clamp(verdict.confidence)

        logger.info(
            f"LLM verdict for {series.symbol}: {verdict.signal.value} "
            f"({verdict.confidence} -> {confidence}) via {response.provider.value}"
        )
        return Decision(verdict.signal, confidence, profile.label)
