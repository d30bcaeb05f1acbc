"""
LLM Client Abstraction

Provides a unified interface for the a0.dev LLM endpoint, OpenAI,
Anthropic Claude and Google Gemini.
Handles provider switching and fallback.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import asyncio
import logging

import aiohttp

from tradesignals.services.base import ExternalAPIError

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    A0 = "a0"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: LLMProvider = LLMProvider.A0
    a0_llm_url: Optional[str] = "https://api.a0.dev/ai/llm"
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-haiku-20240307"
    gemini_model: str = "gemini-2.5-flash"
    max_tokens: int = 512
    temperature: float = 0.7
    timeout_seconds: float = 20.0


@dataclass
class LLMResponse:
    """
    Response from LLM.

    ``structured`` holds schema-conforming data when the provider returns
    it separately from the text (a0.dev ``schema_data``).
    """

    content: str
    model: str
    provider: LLMProvider
    usage: dict = field(default_factory=dict)
    structured: Optional[dict] = None


class BaseLLMClient(ABC):
    """One provider. Subclasses fill in ``generate``."""

    provider: LLMProvider

    def __init__(self, config: LLMConfig):
        self.config = config

    def _sampling(self, temperature: Optional[float], max_tokens: Optional[int]) -> tuple[float, int]:
        return (
            temperature if temperature is not None else self.config.temperature,
            max_tokens if max_tokens is not None else self.config.max_tokens,
        )

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass

    async def close(self) -> None:
        pass


class A0Client(BaseLLMClient):
    """a0.dev hosted LLM endpoint. No API key, JSON-schema structured output."""

    provider = LLMProvider.A0

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_seconds),
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        session = await self._ensure_session()
        temp, _ = self._sampling(temperature, max_tokens)

        payload = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temp,
        }
        if response_schema:
            payload["schema"] = response_schema

        async with session.post(self.config.a0_llm_url, json=payload) as resp:
            if resp.status != 200:
                text = await resp.text()
                raise ExternalAPIError(
                    "A0Client",
                    f"LLM call failed: {resp.status}",
                    {"status": resp.status, "body": text[:500]},
                )
            data = await resp.json(content_type=None)

        structured = data.get("schema_data")
        return LLMResponse(
            content=data.get("completion") or data.get("message") or "",
            model="a0",
            provider=self.provider,
            usage=data.get("usage") or {},
            structured=structured if isinstance(structured, dict) else None,
        )


class AnthropicClient(BaseLLMClient):
    """Claude via the Messages API. The schema is only described in the prompt."""

    provider = LLMProvider.ANTHROPIC

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._client = None

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise RuntimeError("anthropic package not installed. Run: pip install anthropic")
            self._client = anthropic.AsyncAnthropic(api_key=self.config.anthropic_api_key)
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        temp, tokens = self._sampling(temperature, max_tokens)
        response = await self._get_client().messages.create(
            model=self.config.anthropic_model,
            max_tokens=tokens,
            temperature=temp,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return LLMResponse(
            content=response.content[0].text,
            model=self.config.anthropic_model,
            provider=self.provider,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )


class OpenAIClient(BaseLLMClient):
    """OpenAI chat completions. Requests JSON mode when a schema is given."""

    provider = LLMProvider.OPENAI

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise RuntimeError("openai package not installed. Run: pip install openai")
            self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        temp, tokens = self._sampling(temperature, max_tokens)
        request = {
            "model": self.config.openai_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temp,
            "max_tokens": tokens,
        }
        if response_schema:
            request["response_format"] = {"type": "json_object"}

        response = await self._get_client().chat.completions.create(**request)
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.config.openai_model,
            provider=self.provider,
            usage={
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            },
        )


class GeminiClient(BaseLLMClient):
    """Google Gemini. The SDK call is blocking and runs in the default executor."""

    provider = LLMProvider.GEMINI

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._model = None

    def _get_model(self):
        if self._model is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise RuntimeError(
                    "google-generativeai package not installed. Run: pip install google-generativeai"
                )
            genai.configure(api_key=self.config.gemini_api_key)
            self._model = genai.GenerativeModel(self.config.gemini_model)
        return self._model

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        model = self._get_model()
        temp, tokens = self._sampling(temperature, max_tokens)

        generation_config = {"temperature": temp, "max_output_tokens": tokens}
        if response_schema:
            generation_config["response_mime_type"] = "application/json"

        # No separate system role; prepend it
        prompt = f"{system_prompt}\n\n---\n\n{user_prompt}"

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: model.generate_content(prompt, generation_config=generation_config),
        )

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=response.text,
            model=self.config.gemini_model,
            provider=self.provider,
            usage={
                "prompt_tokens": usage.prompt_token_count if usage else 0,
                "completion_tokens": usage.candidates_token_count if usage else 0,
            },
        )


PROVIDER_CLIENTS: dict[LLMProvider, type[BaseLLMClient]] = {
    LLMProvider.A0: A0Client,
    LLMProvider.OPENAI: OpenAIClient,
    LLMProvider.ANTHROPIC: AnthropicClient,
    LLMProvider.GEMINI: GeminiClient,
}


class LLMClient:
    """
    Unified LLM client with provider switching and fallback.

    The configured provider is tried first. On failure the first other
    provider that has credentials (a0 needs only its URL) is tried once.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._primary: Optional[BaseLLMClient] = None
        self._fallback: Optional[BaseLLMClient] = None
        self._setup_clients()

    def _available(self, provider: LLMProvider) -> bool:
        credentials = {
            LLMProvider.A0: self.config.a0_llm_url,
            LLMProvider.OPENAI: self.config.openai_api_key,
            LLMProvider.ANTHROPIC: self.config.anthropic_api_key,
            LLMProvider.GEMINI: self.config.gemini_api_key,
        }
        return bool(credentials[provider])

    def _setup_clients(self):
        if self._available(self.config.provider):
            self._primary = PROVIDER_CLIENTS[self.config.provider](self.config)

        for provider in LLMProvider:
            if provider != self.config.provider and self._available(provider):
                self._fallback = PROVIDER_CLIENTS[provider](self.config)
                break

        if not self.is_configured:
            logger.warning("No LLM providers configured. Signals will use rule-based scoring.")

    @property
    def is_configured(self) -> bool:
        return self._primary is not None or self._fallback is not None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_schema: Optional[dict] = None,
    ) -> LLMResponse:
        """
        Generate LLM response with automatic fallback.

        Raises:
            ExternalAPIError: no provider configured
        """
        if not self.is_configured:
            raise ExternalAPIError("LLMClient", "No LLM providers configured")

        kwargs = {
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_schema": response_schema,
        }

        if self._primary:
            try:
                return await self._primary.generate(**kwargs)
            except Exception as e:
                if self._fallback is None:
                    logger.error(f"{self._primary.provider.value} LLM failed: {e}")
                    raise
                logger.warning(
                    f"{self._primary.provider.value} LLM failed: {e}, "
                    f"trying {self._fallback.provider.value}"
                )

        return await self._fallback.generate(**kwargs)

    def get_active_provider(self) -> Optional[LLMProvider]:
        active = self._primary or self._fallback
        return active.provider if active else None

    async def close(self) -> None:
        for client in (self._primary, self._fallback):
            if client is not None:
                await client.close()


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from tradesignals.core.config import settings

        config = LLMConfig(
            provider=LLMProvider(settings.llm_primary_provider),
            a0_llm_url=settings.a0_llm_url,
            anthropic_api_key=settings.anthropic_api_key,
            openai_api_key=settings.openai_api_key,
            gemini_api_key=settings.gemini_api_key,
            openai_model=settings.llm_reasoning_model,
            max_tokens=settings.llm_max_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
        )
        _llm_client = LLMClient(config)
    return _llm_client
