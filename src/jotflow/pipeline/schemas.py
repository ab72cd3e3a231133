"""
Pipeline Schemas

Pydantic shapes for every inference result. Model output is untrusted, so
nothing reaches the orchestrator without passing through ``validate``.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Literal, Optional, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from jotflow.errors import SchemaViolation
from jotflow.store.models import Priority

M = TypeVar("M", bound=BaseModel)


class RecordKind(str, Enum):
    """What a piece of input text should become."""
    TASK = "task"
    NOTE = "note"
    BOTH = "both"


class ClassificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # the prompt asks for "type"
    kind: RecordKind = Field(validation_alias=AliasChoices("kind", "type"))
    # strict: no bools or numeric strings
    confidence: float = Field(..., ge=0.0, le=1.0, strict=True, allow_inf_nan=False)


class StructuredTask(BaseModel):
    title: str = Field(..., min_length=1)
    content: Optional[str] = None
    priority: Optional[Priority] = None
    difficulty: Optional[StrictInt] = Field(None, ge=1, le=5)

    @field_validator("priority", mode="before")
    @classmethod
    def priority_any_case(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().capitalize()
        return v

    @property
    def text(self) -> str:
        return self.title + "\n" + (self.content or "")


class StructuredNote(BaseModel):
    title: str = Field(..., min_length=1)
    content: Optional[str] = None

    @property
    def text(self) -> str:
        return self.title + "\n" + (self.content or "")


Weekday = Literal[
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
]


class DueTimeHint(BaseModel):
    """
    Deadline as read by the model.

    The model only normalises the wording; defaults and weekday arithmetic
    are applied in code.
    """

    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    weekday: Optional[Weekday] = None

    @field_validator("weekday", mode="before")
    @classmethod
    def weekday_lower(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @property
    def is_empty(self) -> bool:
        return self.date is None and self.time is None and self.weekday is None


class EnrichmentBundle(BaseModel):
    """Secondary attributes; each field has its own default."""

    categories: list[str] = Field(default_factory=list)
    due_time: Optional[dt.datetime] = None
    steps: list[str] = Field(default_factory=list)
    difficulty: int = Field(3, ge=1, le=5)


_string_list = TypeAdapter(list[StrictStr])


def validate(model: type[M], data: Any) -> M:
    """
    Validate parsed model output against a schema.

    Raises:
        SchemaViolation: naming the first offending field
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise _violation(e, default_field=model.__name__) from e


def validate_string_list(data: Any, field: str = "items") -> list[str]:
    """Validate that ``data`` is a list containing only strings."""
    try:
        return _string_list.validate_python(data)
    except ValidationError as e:
        raise _violation(e, default_field=field) from e


def _violation(error: ValidationError, default_field: str) -> SchemaViolation:
    first = error.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return SchemaViolation(loc or default_field, first.get("msg", "invalid value"))
