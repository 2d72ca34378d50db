"""
Parsing of JSON-object completions.
"""

import pytest

from chartscribe.domain.services.completion_json import parse_completion_json


def test_bare_json():
    assert parse_completion_json('{"plan": "Rest"}') == {"plan": "Rest"}


def test_json_in_code_fence():
    content = 'Here you go:\n```json\n{"plan": "Rest"}\n```\nThanks'

    assert parse_completion_json(content) == {"plan": "Rest"}


def test_json_in_plain_fence():
    assert parse_completion_json('```\n{"a": 1}\n```') == {"a": 1}


@pytest.mark.parametrize("content", [None, "", "   ", "not json", "```json\n{broken\n```", "[1, 2]"])
def test_unreadable_content_raises_value_error(content):
    with pytest.raises(ValueError):
        parse_completion_json(content)
