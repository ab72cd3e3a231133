"""
Text-to-record pipeline.

Classifies an utterance, structures it as a task and/or note, enriches the
result and hands it to a record store.
"""

from jotflow.pipeline.classifier import Classifier
from jotflow.pipeline.enrichers import EnricherParams, Enrichers, resolve_due_time
from jotflow.pipeline.orchestrator import (
    CapturePipeline,
    RecordSink,
    RunResult,
    RunState,
)
from jotflow.pipeline.sanitize import parse_json, sanitize
from jotflow.pipeline.schemas import (
    ClassificationResult,
    DueTimeHint,
    EnrichmentBundle,
    RecordKind,
    StructuredNote,
    StructuredTask,
)
from jotflow.pipeline.structurer import Structurer

__all__ = [
    # Orchestration
    "CapturePipeline",
    "RecordSink",
    "RunResult",
    "RunState",
    # Stages
    "Classifier",
    "Structurer",
    "Enrichers",
    "EnricherParams",
    "resolve_due_time",
    # Output handling
    "sanitize",
    "parse_json",
    # Schemas
    "ClassificationResult",
    "DueTimeHint",
    "EnrichmentBundle",
    "RecordKind",
    "StructuredNote",
    "StructuredTask",
]
