"""
Jotflow Application

Wires configuration, LLM gateway, record store and pipeline together and
exposes the operations a caller (CLI, web handler) needs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from jotflow.config import CallConfig, JotflowConfig
from jotflow.errors import JotflowError
from jotflow.llm.gateway import CompletionParams, InferenceClient, LLMGateway
from jotflow.llm.providers import get_provider
from jotflow.pipeline import (
    CapturePipeline,
    Classifier,
    EnricherParams,
    Enrichers,
    Structurer,
)
from jotflow.store import Note, Priority, RecordStore, Task, TaskStatus
from jotflow.utils.logging import get_logger

logger = get_logger(__name__)


class SubmitResponse(BaseModel):
    """What the caller of ``submit`` receives."""

    success: bool
    tasks_created: int = 0
    notes_created: int = 0
    message: Optional[str] = None
    error: Optional[str] = None


def _params(call: CallConfig, model: str) -> CompletionParams:
    return CompletionParams(
        model=model,
        temperature=call.temperature,
        max_tokens=call.max_tokens,
    )


def build_gateway(config: JotflowConfig) -> LLMGateway:
    """Create the LLM gateway from configuration."""
    llm = config.llm
    primary = get_provider(
        llm.primary_provider,
        api_key=llm.api_key_for(llm.primary_provider),
        model=llm.model_for(llm.primary_provider),
    )
    fallback = None
    if llm.fallback_provider:
        fallback = get_provider(
            llm.fallback_provider,
            api_key=llm.api_key_for(llm.fallback_provider),
            model=llm.model_for(llm.fallback_provider),
        )
    return LLMGateway(
        primary_provider=primary,
        fallback_provider=fallback,
        max_retries=llm.max_retries,
        retry_delay=llm.retry_delay,
        timeout=llm.timeout,
    )


def build_pipeline(
    config: JotflowConfig,
    client: InferenceClient,
    store: RecordStore,
) -> CapturePipeline:
    """Create the capture pipeline around injected capabilities."""
    pipeline_config = config.pipeline
    model = config.llm.model_for(config.llm.primary_provider)

    return CapturePipeline(
        classifier=Classifier(client, _params(pipeline_config.classify, model)),
        structurer=Structurer(client, _params(pipeline_config.structure, model)),
        enrichers=Enrichers(
            client,
            EnricherParams(
                categories=_params(pipeline_config.categories, model),
                due_time=_params(pipeline_config.due_time, model),
                steps=_params(pipeline_config.steps, model),
                difficulty=_params(pipeline_config.difficulty, model),
            ),
            tz=pipeline_config.tzinfo,
            default_due_hour=pipeline_config.default_due_hour,
        ),
        store=store,
        min_confidence=pipeline_config.min_confidence,
    )


class Jotflow:
    """
    Application facade.

    ``submit`` is the single entry point into the pipeline; the remaining
    methods manage the records it produced.
    """

    def __init__(
        self,
        config: JotflowConfig,
        client: InferenceClient | None = None,
        store: RecordStore | None = None,
    ):
        self.config = config
        self.store = store or RecordStore(
            db_path=str(config.database.path),
            echo=config.database.echo,
        )
        self.client = client or build_gateway(config)
        self.pipeline = build_pipeline(config, self.client, self.store)

    async def submit(
        self, text: str, reference: Optional[datetime] = None
    ) -> SubmitResponse:
        """Run the pipeline and report counts or a readable error."""
        try:
            result = await self.pipeline.run(text, reference=reference)
        except JotflowError as e:
            logger.error("submit_failed", error=str(e), error_type=type(e).__name__)
            return SubmitResponse(success=False, error=str(e))

        message = (
            f"Successfully processed: {result.tasks_created} tasks, "
            f"{result.notes_created} notes created"
        )
        return SubmitResponse(
            success=True,
            tasks_created=result.tasks_created,
            notes_created=result.notes_created,
            message=message,
            error=result.error,
        )

    # =========================================================================
    # Record management
    # =========================================================================

    def list_tasks(self, status: Optional[str] = None) -> Sequence[Task]:
        return self.store.list_tasks(TaskStatus(status) if status else None)

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.store.get_task(task_id)

    def update_task(self, task_id: str, **changes: Any) -> Optional[Task]:
        """
        Update a task from loosely typed input.

        ``status`` and ``priority`` take their display values ("In Progress",
        "High"); ``due_time`` takes an ISO timestamp or None to clear it.

        Raises:
            ValueError: for unknown status/priority or out-of-range difficulty
        """
        if changes.get("status") is not None:
            changes["status"] = TaskStatus(changes["status"])
        if changes.get("priority") is not None:
            changes["priority"] = Priority(changes["priority"])
        if isinstance(changes.get("due_time"), str):
            changes["due_time"] = datetime.fromisoformat(changes["due_time"])
        return self.store.update_task(task_id, **changes)

    def delete_task(self, task_id: str) -> bool:
        return self.store.delete_task(task_id)

    def create_note(
        self, title: str, content: str = "", categories: Optional[list[str]] = None
    ) -> Note:
        return self.store.create_note(title=title, content=content, categories=categories)

    def list_notes(self) -> Sequence[Note]:
        return self.store.list_notes()

    def get_note(self, note_id: str) -> Optional[Note]:
        return self.store.get_note(note_id)

    def update_note(self, note_id: str, **changes: Any) -> Optional[Note]:
        return self.store.update_note(note_id, **changes)

    def delete_note(self, note_id: str) -> bool:
        return self.store.delete_note(note_id)
