"""
LLM Providers
"""

from jotflow.llm.providers.base import BaseLLMProvider
from jotflow.llm.providers.claude import ClaudeProvider
from jotflow.llm.providers.openai import GroqProvider, OpenAIProvider

# Names accepted in ``llm.primary_provider`` / ``llm.fallback_provider``
PROVIDERS: dict[str, type[BaseLLMProvider]] = {
    "claude": ClaudeProvider,
    "anthropic": ClaudeProvider,
    "openai": OpenAIProvider,
    "gpt": OpenAIProvider,
    "groq": GroqProvider,
}


def get_provider(
    provider_name: str,
    api_key: str,
    model: str | None = None,
) -> BaseLLMProvider:
    """
    Build a provider by configured name.

    Raises:
        ValueError: for a name not in PROVIDERS
    """
    try:
        provider_class = PROVIDERS[provider_name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown provider: {provider_name}. Available: {sorted(PROVIDERS)}"
        ) from None
    if model:
        return provider_class(api_key=api_key, model=model)
    return provider_class(api_key=api_key)


__all__ = [
    "BaseLLMProvider",
    "ClaudeProvider",
    "GroqProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "get_provider",
]
