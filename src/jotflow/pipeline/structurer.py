"""
Structurer

Turns raw input into a titled task or note payload.
"""

from __future__ import annotations

from typing import Literal, Union, overload

from jotflow.llm.gateway import CompletionParams, InferenceClient
from jotflow.pipeline import prompts
from jotflow.pipeline.sanitize import parse_json
from jotflow.pipeline.schemas import StructuredNote, StructuredTask, validate


class Structurer:
    """
    Target-specific structuring call.

    There is no sensible default title, so any failure here propagates and
    aborts the record for that branch.
    """

    def __init__(self, client: InferenceClient, params: CompletionParams):
        self.client = client
        self.params = params

    @overload
    async def structure(self, text: str, target: Literal["task"]) -> StructuredTask: ...

    @overload
    async def structure(self, text: str, target: Literal["note"]) -> StructuredNote: ...

    async def structure(
        self, text: str, target: str
    ) -> Union[StructuredTask, StructuredNote]:
        if target == "task":
            raw = await self.client.complete(prompts.STRUCTURE_TASK, text, self.params)
            return validate(StructuredTask, parse_json(raw))
        if target == "note":
            raw = await self.client.complete(prompts.STRUCTURE_NOTE, text, self.params)
            return validate(StructuredNote, parse_json(raw))
        raise ValueError(f"Unknown structuring target: {target}")
