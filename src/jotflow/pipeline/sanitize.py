"""
Output Sanitizer

Generative output sometimes carries stray control bytes or markdown fences
around the JSON it was asked for. These helpers recover the payload or
fail with InferenceParseError.
"""

from __future__ import annotations

import json
import re
from typing import Any

from jotflow.errors import InferenceParseError
from jotflow.utils.logging import get_logger

logger = get_logger(__name__)

_CONTROL_CHARS = re.compile("[\u0000-\u0019\u007f-\u009f]")
_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def _replace_control(match: re.Match[str]) -> str:
    char = match.group(0)
    if char in ("\n", "\t"):
        return char
    return " "


def sanitize(text: str) -> str:
    """Replace control characters with a space, keeping newlines and tabs."""
    return _CONTROL_CHARS.sub(_replace_control, text)


def _embedded_payloads(text: str) -> list[str]:
    """Pull JSON out of a code fence, else the object and array slices, earliest first."""
    fence = _FENCE.search(text)
    if fence:
        return [fence.group(1).strip()]

    slices = []
    for opener, closer in (("{", "}"), ("[", "]")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            slices.append((start, text[start:end + 1]))
    return [payload for _, payload in sorted(slices)]


def parse_json(raw: str | None) -> Any:
    """
    Decode model output as JSON.

    Tries the raw text, then the sanitized text, then a payload embedded
    in the sanitized text.

    Raises:
        InferenceParseError: if no candidate decodes
    """
    raw = raw or ""
    candidates = [raw]
    cleaned = sanitize(raw)
    if cleaned != raw:
        candidates.append(cleaned)
    for embedded in _embedded_payloads(cleaned):
        if embedded not in candidates:
            candidates.append(embedded)

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    logger.warning("unparseable_model_output", preview=raw[:200])
    raise InferenceParseError(
        "Model response parsing error. Try rephrasing your request.",
        raw=raw,
    )
