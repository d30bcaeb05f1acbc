"""
LLM Response Parsing

Turns an LLMResponse into a ReasoningVerdict. Tried in order:
structured output, a JSON object in the text, then the
``SIGNAL: X, CONFIDENCE: N%`` line format.
"""

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from tradesignals.schemas.signals import ReasoningVerdict
from tradesignals.services.base import ReasoningParseError
from tradesignals.services.llm.client import LLMResponse

logger = logging.getLogger(__name__)

SIGNAL_PATTERN = re.compile(r"SIGNAL:\s*(BUY|SELL|HOLD)", re.IGNORECASE)
CONFIDENCE_PATTERN = re.compile(r"CONFIDENCE:\s*(\d+(?:\.\d+)?)\s*%?", re.IGNORECASE)


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    content = content.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        if lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        content = "\n".join(lines[1:])
    return content.strip()


def _validate(data: dict, source: str) -> ReasoningVerdict:
    try:
        return ReasoningVerdict.model_validate(data)
    except PydanticValidationError as e:
        raise ReasoningParseError(
            "ReasoningParser",
            f"{source} output violates the response schema",
            {"data": data, "errors": e.errors(include_url=False)},
        )


def _find_json_object(content: str) -> Optional[dict]:
    """First JSON object in the text that carries a ``signal`` key."""
    cleaned = strip_code_fences(content)
    decoder = json.JSONDecoder()
    start = cleaned.find("{")
    while start != -1:
        try:
            data, _ = decoder.raw_decode(cleaned, start)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict) and "signal" in data:
            return data
        start = cleaned.find("{", start + 1)
    return None


def _parse_text(content: str, default_confidence: float) -> Optional[ReasoningVerdict]:
    signal_match = SIGNAL_PATTERN.search(content)
    if not signal_match:
        return None

    confidence = default_confidence
    confidence_match = CONFIDENCE_PATTERN.search(content)
    if confidence_match:
        confidence = min(100.0, float(confidence_match.group(1)))

    return ReasoningVerdict(signal=signal_match.group(1).upper(), confidence=confidence)


def parse_verdict(response: LLMResponse, default_confidence: float) -> ReasoningVerdict:
    """
    Extract the trading verdict from an LLM response.

    Args:
        response: Raw LLM response
        default_confidence: Used when free text names a signal but no confidence

    Raises:
        ReasoningParseError: Structured output violates the schema, or
            neither a valid JSON verdict nor a signal line was found
    """
    if response.structured is not None:
        logger.debug(f"Parsing structured output from {response.provider.value}")
        return _validate(response.structured, "Structured")

    content = response.content or ""

    json_error: Optional[ReasoningParseError] = None
    data = _find_json_object(content)
    if data is not None:
        logger.debug(f"Parsing JSON object in {response.provider.value} completion")
        try:
            return _validate(data, "JSON")
        except ReasoningParseError as e:
            logger.debug(f"{e.message}, trying the SIGNAL/CONFIDENCE line")
            json_error = e

    verdict = _parse_text(content, default_confidence)
    if verdict is not None:
        logger.debug(f"Parsed SIGNAL/CONFIDENCE line from {response.provider.value} completion")
        return verdict

    if json_error is not None:
        raise json_error

    raise ReasoningParseError(
        "ReasoningParser",
        "No signal found in LLM response",
        {"content": content[:500]},
    )
