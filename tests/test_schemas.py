"""
Tests for inference result schemas.
"""

from datetime import date, time

import pytest

from jotflow.errors import SchemaViolation
from jotflow.pipeline.schemas import (
    ClassificationResult,
    DueTimeHint,
    RecordKind,
    StructuredNote,
    StructuredTask,
    validate,
    validate_string_list,
)
from jotflow.store.models import Priority


class TestClassificationResult:
    """Tests for classification validation."""

    def test_accepts_type_key(self):
        result = validate(ClassificationResult, {"type": "both", "confidence": 0.8})
        assert result.kind == RecordKind.BOTH
        assert result.confidence == 0.8

    def test_accepts_kind_key(self):
        result = validate(ClassificationResult, {"kind": "note", "confidence": 1})
        assert result.kind == RecordKind.NOTE

    @pytest.mark.parametrize("confidence", [0.0, 1.0, 0.5])
    def test_confidence_bounds_inclusive(self, confidence):
        result = validate(ClassificationResult, {"type": "task", "confidence": confidence})
        assert result.confidence == confidence

    @pytest.mark.parametrize("confidence", [1.5, -0.1, "high", None])
    def test_confidence_out_of_range_fails(self, confidence):
        with pytest.raises(SchemaViolation) as exc:
            validate(ClassificationResult, {"type": "task", "confidence": confidence})
        assert exc.value.field == "confidence"

    @pytest.mark.parametrize("confidence", [True, False, "0.9", "1"])
    def test_confidence_must_be_a_number(self, confidence):
        with pytest.raises(SchemaViolation) as exc:
            validate(ClassificationResult, {"type": "task", "confidence": confidence})
        assert exc.value.field == "confidence"

    @pytest.mark.parametrize("kind", ["reminder", "Task", "", None])
    def test_unknown_kind_fails(self, kind):
        with pytest.raises(SchemaViolation) as exc:
            validate(ClassificationResult, {"type": kind, "confidence": 0.9})
        assert exc.value.field == "type"

    def test_non_object_fails(self):
        with pytest.raises(SchemaViolation):
            validate(ClassificationResult, ["task", 0.9])


class TestStructuredTask:
    """Tests for task structuring validation."""

    def test_full_payload(self):
        task = validate(StructuredTask, {
            "title": "Buy milk",
            "content": "2 litres",
            "priority": "LOW",
            "difficulty": 1,
        })
        assert task.priority == Priority.LOW
        assert task.difficulty == 1
        assert task.text == "Buy milk\n2 litres"

    def test_optional_fields(self):
        task = validate(StructuredTask, {"title": "Call mom"})
        assert task.content is None
        assert task.priority is None
        assert task.difficulty is None
        assert task.text == "Call mom\n"

    @pytest.mark.parametrize("priority, expected", [
        ("high", Priority.HIGH),
        ("Medium", Priority.MEDIUM),
        (" LOW ", Priority.LOW),
    ])
    def test_priority_any_case(self, priority, expected):
        task = validate(StructuredTask, {"title": "x", "priority": priority})
        assert task.priority == expected

    def test_unknown_priority_fails(self):
        with pytest.raises(SchemaViolation) as exc:
            validate(StructuredTask, {"title": "x", "priority": "URGENT"})
        assert exc.value.field == "priority"

    def test_empty_title_fails(self):
        with pytest.raises(SchemaViolation) as exc:
            validate(StructuredTask, {"title": ""})
        assert exc.value.field == "title"

    def test_missing_title_fails(self):
        with pytest.raises(SchemaViolation):
            validate(StructuredTask, {"content": "no title here"})

    @pytest.mark.parametrize("difficulty", [0, 6, 2.5])
    def test_difficulty_range(self, difficulty):
        with pytest.raises(SchemaViolation) as exc:
            validate(StructuredTask, {"title": "x", "difficulty": difficulty})
        assert exc.value.field == "difficulty"

    @pytest.mark.parametrize("difficulty", [True, "4", 4.0])
    def test_difficulty_must_be_an_integer(self, difficulty):
        with pytest.raises(SchemaViolation) as exc:
            validate(StructuredTask, {"title": "x", "difficulty": difficulty})
        assert exc.value.field == "difficulty"


class TestStructuredNote:
    def test_note(self):
        note = validate(StructuredNote, {"title": "Wifi", "content": "On the fridge"})
        assert note.title == "Wifi"

    def test_empty_title_fails(self):
        with pytest.raises(SchemaViolation):
            validate(StructuredNote, {"title": "", "content": "x"})


class TestDueTimeHint:
    def test_parses_date_and_time(self):
        hint = validate(DueTimeHint, {"date": "2024-06-21", "time": "09:30", "weekday": None})
        assert hint.date == date(2024, 6, 21)
        assert hint.time == time(9, 30)
        assert not hint.is_empty

    def test_all_null_is_empty(self):
        hint = validate(DueTimeHint, {"date": None, "time": None, "weekday": None})
        assert hint.is_empty

    def test_weekday_normalised(self):
        hint = validate(DueTimeHint, {"weekday": "Friday"})
        assert hint.weekday == "friday"

    def test_bad_weekday_fails(self):
        with pytest.raises(SchemaViolation):
            validate(DueTimeHint, {"weekday": "freitag"})


class TestStringList:
    def test_strings(self):
        assert validate_string_list(["a", "b"]) == ["a", "b"]

    @pytest.mark.parametrize("data", [["a", 1], {"a": 1}, "work", None])
    def test_non_conforming(self, data):
        with pytest.raises(SchemaViolation):
            validate_string_list(data, field="categories")
