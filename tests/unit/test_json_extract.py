from __future__ import annotations

import pytest

from llm_gateway import MalformedResponseError, extract_json_slice, parse_json_object_or_array, strip_code_fences


def test_fenced_object_is_parsed():
    reply = '```json\n{"question": "Why Postgres?", "expectedAnswer": "Trade-offs"}\n```'

    assert parse_json_object_or_array(reply) == {"question": "Why Postgres?", "expectedAnswer": "Trade-offs"}


def test_surrounding_prose_is_ignored():
    reply = 'Sure! Here you go: {"passed": true, "feedback": "ok"} Let me know if you need more.'

    assert parse_json_object_or_array(reply) == {"passed": True, "feedback": "ok"}


def test_array_returned_when_it_opens_first():
    reply = 'Result: [{"question": "A"}, {"question": "B"}]'

    assert parse_json_object_or_array(reply) == [{"question": "A"}, {"question": "B"}]


def test_object_preferred_when_it_opens_first():
    reply = '{"strengths": ["a", "b"], "weaknesses": []}'

    assert parse_json_object_or_array(reply) == {"strengths": ["a", "b"], "weaknesses": []}


def test_nested_braces_sliced_to_last_closer():
    reply = 'text {"outer": {"inner": 1}} trailing'

    assert extract_json_slice(reply) == '{"outer": {"inner": 1}}'


def test_no_brackets_raises():
    with pytest.raises(MalformedResponseError):
        parse_json_object_or_array("I cannot help with that.")


def test_two_top_level_objects_are_mis_sliced_and_rejected():
    with pytest.raises(MalformedResponseError):
        parse_json_object_or_array('{"a": 1} and also {"b": 2}')


def test_truncated_json_raises():
    with pytest.raises(MalformedResponseError):
        parse_json_object_or_array('{"question": "Why"')


def test_strip_code_fences():
    assert strip_code_fences("```JSON\n[1, 2]\n```") == "[1, 2]"
    assert strip_code_fences(None) == ""
