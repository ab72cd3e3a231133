"""
LLM Gateway

Provider-agnostic completion for the capture pipeline. Every call is one
instruction prompt plus one piece of user text; the gateway adds retries,
a per-attempt timeout and an optional fallback provider.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Protocol

import structlog

from jotflow.errors import InferenceError

logger = structlog.get_logger(__name__)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0
    finish_reason: str = "stop"
    error: str | None = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class CompletionParams:
    """Per-call sampling parameters. ``model=None`` uses the provider default."""
    model: str | None = None
    temperature: float = 0.2
    max_tokens: int = 512


class LLMProvider(Protocol):
    """Protocol for LLM providers. Failures come back in ``error``."""

    name: str

    async def generate(
        self,
        prompt: str,
        user_text: str,
        params: CompletionParams,
    ) -> LLMResponse:
        ...


class InferenceClient(Protocol):
    """The single capability the pipeline needs from a model."""

    async def complete(
        self,
        prompt: str,
        user_text: str,
        params: CompletionParams,
    ) -> str:
        """Return raw model text or raise InferenceError."""
        ...


class LLMGateway:
    """
    Gateway for LLM interactions.

    Provides:
    - Provider abstraction
    - Automatic fallback on errors
    - Retry with exponential backoff and a per-attempt timeout
    """

    def __init__(
        self,
        primary_provider: LLMProvider,
        fallback_provider: LLMProvider | None = None,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        """
        Initialize the gateway.

        Args:
            primary_provider: Main LLM provider
            fallback_provider: Backup provider if primary fails
            max_retries: Maximum retry attempts per provider
            retry_delay: Initial delay between retries (exponential backoff)
            timeout: Per-attempt timeout in seconds
        """
        self.primary = primary_provider
        self.fallback = fallback_provider
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

    async def complete(
        self,
        prompt: str,
        user_text: str,
        params: CompletionParams,
    ) -> str:
        """
        Send an instruction prompt plus user text and return the raw reply.

        Raises:
            InferenceError: if every provider and retry failed
        """
        response = await self._try_provider(self.primary, prompt, user_text, params)

        if response.error and self.fallback:
            logger.warning(
                "llm_primary_failed",
                provider=self.primary.name,
                error=response.error,
            )
            # A model override names a primary-provider model
            response = await self._try_provider(
                self.fallback, prompt, user_text, replace(params, model=None)
            )

        if response.error:
            logger.error("llm_all_providers_failed", error=response.error)
            raise InferenceError(response.error, provider=response.provider)

        logger.info(
            "llm_response",
            provider=response.provider,
            model=response.model,
            tokens=response.total_tokens,
            latency_ms=round(response.latency_ms, 1),
        )
        return response.content

    async def _try_provider(
        self,
        provider: LLMProvider,
        prompt: str,
        user_text: str,
        params: CompletionParams,
    ) -> LLMResponse:
        """Try a provider with retries."""
        last_error = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await asyncio.wait_for(
                    provider.generate(prompt, user_text, params),
                    timeout=self.timeout,
                )
                if not response.error:
                    return response
                last_error = response.error
                logger.warning(
                    "llm_error",
                    provider=provider.name,
                    attempt=attempt + 1,
                    error=last_error,
                )

            except asyncio.TimeoutError:
                last_error = f"Request timed out after {self.timeout}s"
                logger.warning(
                    "llm_timeout",
                    provider=provider.name,
                    attempt=attempt + 1,
                )
            except Exception as e:
                last_error = str(e)
                logger.warning(
                    "llm_error",
                    provider=provider.name,
                    attempt=attempt + 1,
                    error=last_error,
                )

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * (2 ** attempt))

        return LLMResponse(
            content="",
            model=params.model or "",
            provider=provider.name,
            error=last_error,
        )
