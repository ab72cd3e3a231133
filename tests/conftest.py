"""
Shared fixtures: a scripted inference client and an in-memory record sink.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import pytest

from jotflow.errors import InferenceError
from jotflow.llm.gateway import CompletionParams
from jotflow.pipeline import (
    CapturePipeline,
    Classifier,
    EnricherParams,
    Enrichers,
    Structurer,
)
from jotflow.pipeline import prompts
from jotflow.utils.logging import setup_logging


def prompt_key(prompt: str) -> str:
    """Name the call a prompt belongs to."""
    fixed = {
        prompts.CLASSIFY: "classify",
        prompts.STRUCTURE_TASK: "task",
        prompts.STRUCTURE_NOTE: "note",
        prompts.TASK_CATEGORIES: "task_categories",
        prompts.NOTE_CATEGORIES: "note_categories",
        prompts.STEPS: "steps",
        prompts.DIFFICULTY: "difficulty",
    }
    if prompt in fixed:
        return fixed[prompt]
    if prompt.startswith("Find the deadline"):
        return "due_time"
    raise AssertionError(f"unexpected prompt: {prompt[:40]!r}")


class FakeInferenceClient:
    """
    Replies per call kind.

    A reply may be a string (returned verbatim), a dict/list (returned as
    JSON) or an exception instance (raised). Missing kinds raise
    InferenceError.
    """

    def __init__(self, replies: dict[str, Any] | None = None, delays: dict[str, float] | None = None):
        self.replies = dict(replies or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, str, CompletionParams]] = []

    async def complete(self, prompt: str, user_text: str, params: CompletionParams) -> str:
        key = prompt_key(prompt)
        self.calls.append((key, user_text, params))
        if key in self.delays:
            await asyncio.sleep(self.delays[key])
        if key not in self.replies:
            raise InferenceError(f"no scripted reply for {key}")
        reply = self.replies[key]
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, str):
            return reply
        return json.dumps(reply)

    def keys_called(self) -> list[str]:
        return [key for key, _, _ in self.calls]


@dataclass
class StoredRecord:
    fields: dict[str, Any]
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def title(self) -> str:
        return self.fields["title"]


class FakeSink:
    """Collects created records instead of writing to a database."""

    def __init__(self):
        self.tasks: list[StoredRecord] = []
        self.notes: list[StoredRecord] = []

    def create_task(self, **fields: Any) -> StoredRecord:
        record = StoredRecord(fields)
        self.tasks.append(record)
        return record

    def create_note(self, **fields: Any) -> StoredRecord:
        record = StoredRecord(fields)
        self.notes.append(record)
        return record


PARAMS = CompletionParams(model="test-model", temperature=0.0, max_tokens=64)


def make_pipeline(client, store, min_confidence: float | None = None) -> CapturePipeline:
    return CapturePipeline(
        classifier=Classifier(client, PARAMS),
        structurer=Structurer(client, PARAMS),
        enrichers=Enrichers(
            client,
            EnricherParams(PARAMS, PARAMS, PARAMS, PARAMS),
        ),
        store=store,
        min_confidence=min_confidence,
    )


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    setup_logging(level="WARNING", format="console")


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()
