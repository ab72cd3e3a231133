"""
Capture Pipeline Orchestrator

Sequences classification, structuring, enrichment and persistence for one
utterance:

    classifying -> task_branch | note_branch | both_branches
                -> enriching -> persisting -> complete

Independent calls inside a stage run concurrently and are joined before the
next stage. Results are assembled by field, never by completion order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Protocol
from uuid import uuid4

from jotflow.errors import EmptyInputError, JotflowError, LowConfidenceError
from jotflow.pipeline.classifier import Classifier
from jotflow.pipeline.enrichers import Enrichers
from jotflow.pipeline.schemas import (
    ClassificationResult,
    EnrichmentBundle,
    RecordKind,
    StructuredNote,
    StructuredTask,
)
from jotflow.pipeline.structurer import Structurer
from jotflow.store.models import Priority
from jotflow.utils.logging import get_logger

logger = get_logger(__name__)


class RunState(str, Enum):
    """Stages of a pipeline run, as reported in logs."""
    CLASSIFYING = "classifying"
    TASK_BRANCH = "task_branch"
    NOTE_BRANCH = "note_branch"
    BOTH_BRANCHES = "both_branches"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    COMPLETE = "complete"
    FAILED = "failed"


class RecordSink(Protocol):
    """Persistence capability consumed by the pipeline."""

    def create_task(self, **fields: Any) -> Any:
        ...

    def create_note(self, **fields: Any) -> Any:
        ...


@dataclass
class RunResult:
    """Outcome of one pipeline run."""
    tasks_created: int
    notes_created: int
    classification: ClassificationResult
    task_id: Optional[str] = None
    note_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.tasks_created + self.notes_created > 0

    @property
    def partial(self) -> bool:
        return self.success and self.error is not None


class CapturePipeline:
    """
    Text-to-record pipeline.

    Holds only injected collaborators, so one instance can serve any number
    of concurrent runs.
    """

    def __init__(
        self,
        classifier: Classifier,
        structurer: Structurer,
        enrichers: Enrichers,
        store: RecordSink,
        min_confidence: float | None = None,
    ):
        """
        Args:
            classifier: Task/note/both classifier
            structurer: Task and note structuring calls
            enrichers: Categories, due time, steps and difficulty
            store: Where finished records go
            min_confidence: Reject classifications below this before any
                structuring. None disables the gate.
        """
        self.classifier = classifier
        self.structurer = structurer
        self.enrichers = enrichers
        self.store = store
        self.min_confidence = min_confidence

    async def run(
        self, text: str, reference: Optional[datetime] = None
    ) -> RunResult:
        """
        Process one utterance into zero, one or two records.

        Args:
            text: Raw user input
            reference: Instant relative deadlines resolve against (default: now)

        Returns:
            RunResult with counts of persisted records

        Raises:
            JotflowError: the first fatal failure when nothing was persisted
        """
        if not text or not text.strip():
            raise EmptyInputError()
        reference = reference or datetime.now(timezone.utc)
        log = logger.bind(run_id=str(uuid4())[:8])

        log.info("run_state", state=RunState.CLASSIFYING.value, chars=len(text))
        try:
            classification = await self.classifier.classify(text)
        except JotflowError as e:
            log.error("run_failed", state=RunState.CLASSIFYING.value, error=str(e))
            raise

        log.info(
            "text_classified",
            kind=classification.kind.value,
            confidence=classification.confidence,
        )
        if (
            self.min_confidence is not None
            and classification.confidence < self.min_confidence
        ):
            log.warning("run_failed", state=RunState.CLASSIFYING.value, reason="low_confidence")
            raise LowConfidenceError(classification.confidence, self.min_confidence)

        result = RunResult(0, 0, classification)

        if classification.kind == RecordKind.TASK:
            log.info("run_state", state=RunState.TASK_BRANCH.value)
            result.task_id = await self._task_branch(text, reference, log)
            result.tasks_created = 1

        elif classification.kind == RecordKind.NOTE:
            log.info("run_state", state=RunState.NOTE_BRANCH.value)
            result.note_id = await self._note_branch(text, log)
            result.notes_created = 1

        else:
            log.info("run_state", state=RunState.BOTH_BRANCHES.value)
            task_outcome, note_outcome = await asyncio.gather(
                self._task_branch(text, reference, log),
                self._note_branch(text, log),
                return_exceptions=True,
            )
            # Only pipeline failures are branch-local; anything else is a bug.
            for outcome in (task_outcome, note_outcome):
                if isinstance(outcome, BaseException) and not isinstance(outcome, JotflowError):
                    raise outcome

            if isinstance(task_outcome, JotflowError) and isinstance(note_outcome, JotflowError):
                raise task_outcome
            if isinstance(task_outcome, JotflowError):
                result.error = f"Task not created: {task_outcome}"
            else:
                result.task_id = task_outcome
                result.tasks_created = 1
            if isinstance(note_outcome, JotflowError):
                result.error = f"Note not created: {note_outcome}"
            else:
                result.note_id = note_outcome
                result.notes_created = 1

        log.info(
            "run_state",
            state=RunState.COMPLETE.value,
            tasks_created=result.tasks_created,
            notes_created=result.notes_created,
            partial=result.partial,
        )
        return result

    async def _task_branch(self, text: str, reference: datetime, log) -> str:
        try:
            structured: StructuredTask = await self.structurer.structure(text, "task")
        except JotflowError as e:
            log.error("run_failed", state=RunState.TASK_BRANCH.value, error=str(e))
            raise

        log.debug("run_state", state=RunState.ENRICHING.value, branch="task")
        body = structured.text
        categories, due_time, steps, difficulty = await asyncio.gather(
            self.enrichers.extract_categories(body, "task"),
            self.enrichers.extract_due_time(text, reference),
            self.enrichers.decompose_steps(body),
            self.enrichers.score_difficulty(body),
        )
        bundle = EnrichmentBundle(
            categories=categories,
            due_time=due_time,
            steps=steps,
            difficulty=difficulty,
        )

        log.debug("run_state", state=RunState.PERSISTING.value, branch="task")
        task = self.store.create_task(**assemble_task(structured, bundle))
        log.info("task_created", task_id=task.id, title=task.title)
        return task.id

    async def _note_branch(self, text: str, log) -> str:
        try:
            structured: StructuredNote = await self.structurer.structure(text, "note")
        except JotflowError as e:
            log.error("run_failed", state=RunState.NOTE_BRANCH.value, error=str(e))
            raise

        log.debug("run_state", state=RunState.ENRICHING.value, branch="note")
        categories = await self.enrichers.extract_categories(structured.text, "note")

        log.debug("run_state", state=RunState.PERSISTING.value, branch="note")
        note = self.store.create_note(**assemble_note(structured, categories))
        log.info("note_created", note_id=note.id, title=note.title)
        return note.id


def assemble_task(structured: StructuredTask, bundle: EnrichmentBundle) -> dict[str, Any]:
    """Map a structured task plus its enrichments onto store fields."""
    return {
        "title": structured.title,
        "description": structured.content or "",
        "priority": structured.priority or Priority.MEDIUM,
        "difficulty": structured.difficulty or bundle.difficulty,
        "due_time": bundle.due_time,
        "categories": bundle.categories,
        "steps": bundle.steps,
    }


def assemble_note(structured: StructuredNote, categories: list[str]) -> dict[str, Any]:
    """Map a structured note onto store fields."""
    return {
        "title": structured.title,
        "content": structured.content or "",
        "categories": categories,
    }
