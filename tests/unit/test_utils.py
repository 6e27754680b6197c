"""Tests for shared helpers in ``src.core.utils``."""

import pytest

from src.core.utils import format_duration, strip_code_fences


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "00:00"),
        (5, "00:05"),
        (65, "01:05"),
        (65.99, "01:05"),
        (599, "09:59"),
        (3725, "62:05"),
        (-3, "00:00"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_strip_json_fence():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_bare_fence():
    assert strip_code_fences("```\n[1, 2]\n```") == "[1, 2]"


def test_plain_text_untouched():
    assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'
