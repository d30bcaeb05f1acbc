"""
LLM Orchestration Service

CONTRACT:
    Reasoning (used by ReasoningStrategy):
        Input:  system prompt + indicator brief + response schema
        Output: ReasoningVerdict {signal, confidence}

    Insights:
        Input:  InsightsRequest (top coins, currencies)
        Output: InsightsResponse

PROVIDERS:
    - a0.dev LLM endpoint (no key, structured output via JSON schema)
    - OpenAI, Anthropic Claude, Google Gemini (keyed)

CRITICAL RULES:
    - LLM does NO math - all numbers come from Indicator Engine
    - LLM interprets and reasons, never calculates

FALLBACK BEHAVIOR:
    - Signals fall back to rule-based scoring
    - Insights fall back to a template summary
    - System remains functional without any LLM
"""

from tradesignals.services.llm.client import (
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    get_llm_client,
)
from tradesignals.services.llm.parsing import parse_verdict
from tradesignals.services.llm.insights import (
    InsightsRequest,
    InsightsService,
    get_insights_service,
)

__all__ = [
    # Client
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "get_llm_client",
    "parse_verdict",
    # Services
    "InsightsRequest",
    "InsightsService",
    "get_insights_service",
]
