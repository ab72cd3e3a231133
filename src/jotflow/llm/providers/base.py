"""
Base LLM Provider

Shared timing and error capture; subclasses only speak their SDK.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

import structlog

from jotflow.llm.gateway import CompletionParams, LLMResponse

logger = structlog.get_logger(__name__)


class BaseLLMProvider(ABC):
    """Base class for LLM providers."""

    name: str = "base"

    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model
        self._client = None

    async def generate(
        self,
        prompt: str,
        user_text: str,
        params: CompletionParams,
    ) -> LLMResponse:
        """
        Run one completion. SDK exceptions are reported through
        ``LLMResponse.error`` instead of being raised.
        """
        model = params.model or self.model
        start = time.perf_counter()
        try:
            response = await self._request(prompt, user_text, model, params)
        except Exception as e:
            logger.error("provider_error", provider=self.name, model=model, error=str(e))
            response = LLMResponse(content="", model=model, provider=self.name, error=str(e))
        response.latency_ms = (time.perf_counter() - start) * 1000
        return response

    @abstractmethod
    async def _request(
        self,
        prompt: str,
        user_text: str,
        model: str,
        params: CompletionParams,
    ) -> LLMResponse:
        """Call the SDK with ``prompt`` as system instruction and ``user_text`` as the user turn."""
