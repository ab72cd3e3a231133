"""
OpenAI LLM Provider

Chat-completions provider for OpenAI and OpenAI-compatible endpoints such
as Groq.
"""

from __future__ import annotations

from jotflow.llm.gateway import CompletionParams, LLMResponse
from jotflow.llm.providers.base import BaseLLMProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
    ):
        """
        Args:
            api_key: API key for the endpoint
            model: Default model
            base_url: Alternative OpenAI-compatible endpoint
        """
        super().__init__(api_key=api_key, model=model)
        self.base_url = base_url

    def _get_client(self):
        """Lazy-load OpenAI client."""
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
            )
        return self._client

    async def _request(
        self,
        prompt: str,
        user_text: str,
        model: str,
        params: CompletionParams,
    ) -> LLMResponse:
        response = await self._get_client().chat.completions.create(
            model=model,
            max_tokens=params.max_tokens,
            temperature=params.temperature,
            messages=[
                {"role": "system", "content": prompt},
                {"role": "user", "content": user_text},
            ],
        )
        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.name,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason or "stop",
        )


class GroqProvider(OpenAIProvider):
    """Groq provider over its OpenAI-compatible API."""

    name = "groq"

    def __init__(self, api_key: str, model: str = "llama-3.1-8b-instant"):
        super().__init__(api_key=api_key, model=model, base_url=GROQ_BASE_URL)
