"""
Classifier

Decides whether an utterance is a task, a note, or both.
"""

from __future__ import annotations

from jotflow.llm.gateway import CompletionParams, InferenceClient
from jotflow.pipeline import prompts
from jotflow.pipeline.sanitize import parse_json
from jotflow.pipeline.schemas import ClassificationResult, validate


class Classifier:
    """Single-call LLM classifier. Errors propagate to the caller."""

    def __init__(self, client: InferenceClient, params: CompletionParams):
        self.client = client
        self.params = params

    async def classify(self, text: str) -> ClassificationResult:
        """
        Classify text.

        Raises:
            InferenceError: the model call failed
            InferenceParseError: the reply is not JSON
            SchemaViolation: the reply has the wrong shape or range
        """
        raw = await self.client.complete(prompts.CLASSIFY, text, self.params)
        return validate(ClassificationResult, parse_json(raw))
