"""
Claude (Anthropic) LLM Provider
"""

from __future__ import annotations

from jotflow.llm.gateway import CompletionParams, LLMResponse
from jotflow.llm.providers.base import BaseLLMProvider


class ClaudeProvider(BaseLLMProvider):
    """Anthropic Claude provider."""

    name = "claude"

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-20250514"):
        super().__init__(api_key=api_key, model=model)

    def _get_client(self):
        """Lazy-load Anthropic client."""
        if self._client is None:
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def _request(
        self,
        prompt: str,
        user_text: str,
        model: str,
        params: CompletionParams,
    ) -> LLMResponse:
        # The instruction goes in Claude's dedicated system field
        response = await self._get_client().messages.create(
            model=model,
            max_tokens=params.max_tokens,
            temperature=params.temperature,
            system=prompt,
            messages=[{"role": "user", "content": user_text}],
        )
        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        return LLMResponse(
            content=text,
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            finish_reason=response.stop_reason or "stop",
        )
