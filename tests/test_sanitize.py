from __future__ import annotations

import json

import pytest

from cvmatch.sanitize import clean_json_response, extract_json_array, strip_fences

pytestmark = pytest.mark.unit


def test_clean_json_response_extracts_fenced_object_from_prose() -> None:
    raw = 'Sure! Here is the analysis:\n```json\n{"a": 1, "b": {"c": [2, 3]}}\n```\nLet me know.'
    assert clean_json_response(raw) == '{"a": 1, "b": {"c": [2, 3]}}'


def test_clean_json_response_handles_untagged_fence() -> None:
    raw = '```\n{"skills": ["Python"]}\n```'
    assert json.loads(clean_json_response(raw)) == {"skills": ["Python"]}


def test_clean_json_response_spans_first_to_last_brace() -> None:
    raw = 'prefix {"x": 1} middle {"y": 2} suffix'
    assert clean_json_response(raw) == '{"x": 1} middle {"y": 2}'


def test_clean_json_response_returns_trimmed_text_without_braces() -> None:
    assert clean_json_response("   I cannot help with that.  ") == "I cannot help with that."


def test_clean_json_response_tolerates_none() -> None:
    assert clean_json_response(None) == ""  # type: ignore[arg-type]


def test_extract_json_array_pulls_array_from_fenced_answer() -> None:
    raw = 'Questions:\n```json\n[{"question": "Why?"}]\n```'
    assert json.loads(extract_json_array(raw)) == [{"question": "Why?"}]


def test_strip_fences_removes_every_fence_marker() -> None:
    assert strip_fences("```json\n{}\n```") == "{}"
