"""
Jotflow Errors

Failure taxonomy for the text-to-record pipeline. Whether a given error is
fatal depends on the call site: classification and structuring propagate
it, enrichers downgrade it to a default value.
"""

from __future__ import annotations


class JotflowError(Exception):
    """Base class for all Jotflow errors."""


class EmptyInputError(JotflowError):
    """The submitted text was empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Invalid input - text is required")


class InferenceError(JotflowError):
    """The model call itself failed (network, timeout, provider error)."""

    def __init__(self, message: str, provider: str | None = None):
        self.provider = provider
        super().__init__(message)


class InferenceParseError(JotflowError):
    """The model responded but its text is not recoverable as JSON."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class SchemaViolation(JotflowError):
    """Parsed model output does not match the expected shape."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid value for '{field}': {message}")


class LowConfidenceError(JotflowError):
    """Classification confidence fell below the configured floor."""

    def __init__(self, confidence: float, threshold: float):
        self.confidence = confidence
        self.threshold = threshold
        super().__init__(
            f"Low confidence in classification: {confidence:.2f} < {threshold:.2f}"
        )
