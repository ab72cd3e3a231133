"""
Enrichers

Best-effort secondary attributes for a structured payload. Every enricher
issues its own inference call and degrades to a documented default on any
failure, so they can run concurrently and fail independently.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from jotflow.errors import JotflowError
from jotflow.llm.gateway import CompletionParams, InferenceClient
from jotflow.pipeline import prompts
from jotflow.pipeline.sanitize import parse_json, sanitize
from jotflow.pipeline.schemas import DueTimeHint, validate, validate_string_list
from jotflow.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DIFFICULTY = 3
MAX_CATEGORIES = 5

WEEKDAYS = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}


def next_weekday(day_name: str, reference: datetime) -> datetime:
    """Nearest occurrence of a weekday on or after the reference date."""
    target = WEEKDAYS[day_name]
    days_ahead = (target - reference.weekday()) % 7
    return reference + timedelta(days=days_ahead)


def resolve_due_time(
    hint: DueTimeHint,
    reference: datetime,
    tz: tzinfo,
    default_hour: int = 18,
) -> Optional[datetime]:
    """
    Turn a model-read deadline into an aware timestamp.

    Missing time of day becomes ``default_hour``:00; a time without a date
    lands on the reference date.
    """
    if hint.is_empty:
        return None

    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=tz)
    local_ref = reference.astimezone(tz)

    if hint.date is not None:
        day = hint.date
    elif hint.weekday is not None:
        day = next_weekday(hint.weekday, local_ref).date()
    else:
        day = local_ref.date()

    at = hint.time or time(default_hour, 0)
    return datetime.combine(day, at.replace(tzinfo=None), tzinfo=tz)


def normalize_categories(labels: list[str]) -> list[str]:
    cleaned = [label.strip().lower() for label in labels]
    return [label for label in cleaned if label][:MAX_CATEGORIES]


@dataclass(frozen=True)
class EnricherParams:
    categories: CompletionParams
    due_time: CompletionParams
    steps: CompletionParams
    difficulty: CompletionParams


class Enrichers:
    """The four enrichment calls."""

    def __init__(
        self,
        client: InferenceClient,
        params: EnricherParams,
        tz: tzinfo | None = None,
        default_due_hour: int = 18,
    ):
        self.client = client
        self.params = params
        self.tz = tz or ZoneInfo("UTC")
        self.default_due_hour = default_due_hour

    async def extract_categories(self, text: str, kind: str = "task") -> list[str]:
        """2-5 lowercase labels, or [] on any failure."""
        prompt = prompts.NOTE_CATEGORIES if kind == "note" else prompts.TASK_CATEGORIES
        try:
            raw = await self.client.complete(prompt, text, self.params.categories)
            labels = validate_string_list(parse_json(raw), field="categories")
        except JotflowError as e:
            logger.warning("enrichment_defaulted", enricher="categories", error=str(e))
            return []
        return normalize_categories(labels)

    async def extract_due_time(
        self, text: str, reference: datetime
    ) -> Optional[datetime]:
        """Deadline relative to ``reference``, or None. A naive reference is in ``tz``."""
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=self.tz)
        local_ref = reference.astimezone(self.tz)
        try:
            raw = await self.client.complete(
                prompts.due_time_prompt(local_ref),
                text,
                self.params.due_time,
            )
            hint = validate(DueTimeHint, parse_json(raw))
        except JotflowError as e:
            logger.warning("enrichment_defaulted", enricher="due_time", error=str(e))
            return None
        return resolve_due_time(hint, local_ref, self.tz, self.default_due_hour)

    async def decompose_steps(self, text: str) -> list[str]:
        """Ordered sub-steps, or [] on any failure."""
        try:
            raw = await self.client.complete(prompts.STEPS, text, self.params.steps)
            steps = validate_string_list(parse_json(raw), field="steps")
        except JotflowError as e:
            logger.warning("enrichment_defaulted", enricher="steps", error=str(e))
            return []
        return [step.strip() for step in steps if step.strip()]

    async def score_difficulty(self, text: str) -> int:
        """Integer 1-5; DEFAULT_DIFFICULTY when the reply is anything else."""
        try:
            raw = await self.client.complete(prompts.DIFFICULTY, text, self.params.difficulty)
        except JotflowError as e:
            logger.warning("enrichment_defaulted", enricher="difficulty", error=str(e))
            return DEFAULT_DIFFICULTY

        token = sanitize(raw or "").strip()
        if not re.fullmatch(r"[1-5]", token):
            logger.warning("enrichment_defaulted", enricher="difficulty", reply=token[:20])
            return DEFAULT_DIFFICULTY
        return int(token)
