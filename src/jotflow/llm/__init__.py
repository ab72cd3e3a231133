"""
LLM Gateway Module

Provider-agnostic completion for language models.
"""

from jotflow.llm.gateway import (
    CompletionParams,
    InferenceClient,
    LLMGateway,
    LLMProvider,
    LLMResponse,
)
from jotflow.llm.providers import (
    ClaudeProvider,
    GroqProvider,
    OpenAIProvider,
    get_provider,
)

__all__ = [
    "CompletionParams",
    "InferenceClient",
    "LLMGateway",
    "LLMProvider",
    "LLMResponse",
    "get_provider",
    "ClaudeProvider",
    "GroqProvider",
    "OpenAIProvider",
]
