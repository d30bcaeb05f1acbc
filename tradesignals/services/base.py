"""
Service Base Classes

Every pipeline stage (market data, indicators, decision, risk levels,
insights) is a BaseService with a typed input and output.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Pipeline stage contract.

    Subclasses name themselves for log lines and error messages, run one
    unit of work in ``execute`` and report readiness in ``health_check``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Run the stage.

        Raises:
            ServiceError: the stage could not produce its output
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def validate_input(self, input_data: InputT) -> InputT:
        """
        Called first by every execute. Inputs arrive as pydantic models or
        dataclasses; override to reject values the types allow.
        """
        return input_data


class ServiceError(Exception):
    """Base for errors raised by a pipeline stage."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Malformed symbol, pair or price; maps to HTTP 400 (404 for unknown coins)."""


class InsufficientDataError(ServiceError):
    """Series shorter than the batch minimum; the instrument is skipped."""


class ExternalAPIError(ServiceError):
    """Provider call failed (CoinGecko, Yahoo, ExchangeRate-API, LLM)."""


class ReasoningParseError(ExternalAPIError):
    """LLM answered, but no verdict could be parsed from it."""
