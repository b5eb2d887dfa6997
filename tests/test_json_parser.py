"""Tests for JSON cleanup and parsing of model output."""

import pytest

from resume_fit.errors import MalformedOutputError
from resume_fit.utils.json_parser import (
    clean_json_content,
    parse_json_object,
)


class TestParseJsonObject:
    def test_direct_json(self):
        result = parse_json_object('{"name": "test"}')
        assert result == {"name": "test"}

    def test_fenced_code_block(self):
        text = '```json\n{"match_score": 50}\n```'
        assert parse_json_object(text) == {"match_score": 50}

    def test_fenced_uppercase_tag(self):
        assert parse_json_object('```JSON\n{"a": 1}\n```') == {"a": 1}

    def test_fenced_without_json_tag(self):
        text = '```\n{"key": "value"}\n```'
        assert parse_json_object(text) == {"key": "value"}

    def test_prose_around_json(self):
        text = 'Here is the result:\n```json\n{"name": "test"}\n```\nDone.'
        assert parse_json_object(text) == {"name": "test"}

    def test_embedded_json(self):
        text = 'The analysis is: {"score": 90, "pass": true} as shown above.'
        assert parse_json_object(text) == {"score": 90, "pass": True}

    def test_nested_json(self):
        text = '{"outer": {"inner": [1, 2, 3]}}'
        assert parse_json_object(text)["outer"]["inner"] == [1, 2, 3]

    def test_invalid_json_raises(self):
        with pytest.raises(MalformedOutputError, match="Could not parse JSON"):
            parse_json_object("no json here at all")

    def test_truncated_json_raises(self):
        with pytest.raises(MalformedOutputError):
            parse_json_object('{"match_score": 70, "ats_score": ')

    def test_empty_string_raises(self):
        with pytest.raises(MalformedOutputError, match="Empty response"):
            parse_json_object("   ")

    def test_top_level_array_rejected(self):
        with pytest.raises(MalformedOutputError, match="Expected a JSON object"):
            parse_json_object('["a", "b"]')


class TestCleanJsonContent:
    def test_cuts_to_outer_braces(self):
        assert clean_json_content('noise {"a": {"b": 1}} trailing') == '{"a": {"b": 1}}'

    def test_incomplete_object_left_alone(self):
        assert clean_json_content('```json\n{"match') == '{"match'
