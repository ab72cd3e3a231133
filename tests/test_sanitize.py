"""
Tests for model output sanitizing and JSON recovery.
"""

import pytest

from jotflow.errors import InferenceParseError
from jotflow.pipeline.sanitize import parse_json, sanitize


class TestSanitize:
    """Tests for control character replacement."""

    def test_replaces_control_characters_with_space(self):
        assert sanitize("a\x00b\x07c\x19d") == "a b c d"

    def test_replaces_c1_range_and_delete(self):
        assert sanitize("x\x7fy\x85z\x9f") == "x y z "

    def test_range_ends_at_0x19(self):
        assert sanitize("a\x1ab") == "a\x1ab"

    def test_preserves_newline_and_tab(self):
        text = "line one\n\tindented\nline three"
        assert sanitize(text) == text

    def test_leaves_printable_and_unicode_alone(self):
        text = 'Größe {"k": "é ✓"} \xa0end'
        assert sanitize(text) == text

    def test_carriage_return_becomes_space(self):
        assert sanitize("a\r\nb") == "a \nb"

    def test_length_is_preserved(self):
        text = "\x01\x02\n\x03\t\x9e"
        assert len(sanitize(text)) == len(text)

    @pytest.mark.parametrize("text", [
        "",
        "plain",
        "\x00\x01\x02",
        "mix\x10ed\n\tcontent\x80",
        '{"title": "a\x0bb"}',
    ])
    def test_idempotent(self, text):
        once = sanitize(text)
        assert sanitize(once) == once


class TestParseJson:
    """Tests for recovering JSON from model output."""

    def test_plain_json(self):
        assert parse_json('{"type": "task", "confidence": 0.9}') == {
            "type": "task",
            "confidence": 0.9,
        }

    def test_control_character_inside_string(self):
        result = parse_json('{"title": "Buy\x0bmilk"}')
        assert result == {"title": "Buy milk"}

    def test_markdown_fence(self):
        raw = 'Here you go:\n```json\n["work", "email"]\n```'
        assert parse_json(raw) == ["work", "email"]

    def test_surrounding_chatter(self):
        raw = 'Sure! {"title": "Call mom"} Hope that helps.'
        assert parse_json(raw) == {"title": "Call mom"}

    def test_bracketed_aside_before_object(self):
        raw = 'Categories [a]: {"type": "task", "confidence": 0.9}'
        assert parse_json(raw) == {"type": "task", "confidence": 0.9}

    def test_array_holding_objects(self):
        raw = 'Steps: [{"step": "shop"}, {"step": "cook"}] done'
        assert parse_json(raw) == [{"step": "shop"}, {"step": "cook"}]

    def test_unrecoverable_raises(self):
        with pytest.raises(InferenceParseError) as exc:
            parse_json("INVALID OUTPUT")
        assert exc.value.raw == "INVALID OUTPUT"

    def test_empty_and_none_raise(self):
        with pytest.raises(InferenceParseError):
            parse_json("")
        with pytest.raises(InferenceParseError):
            parse_json(None)
