from __future__ import annotations

import time

import pytest

from ropdfx.render.styles import BODY_TEXT
from ropdfx.render.text import (
    TRUNCATION_MARKER,
    dedupe,
    number_items,
    strip_list_marker,
    text_width,
    truncate_to_width,
    wrap_text,
)


def test_number_items_does_not_double_number() -> None:
    assert number_items(["1. Replace filter", "Check seals"]) == ["1. Replace filter", "2. Check seals"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1. Replace filter", "Replace filter"),
        ("2) Check seals", "Check seals"),
        ("3 - Torque bolts", "Torque bolts"),
        ("  12.Road test", "Road test"),
        ("Replace 2 filters", "Replace 2 filters"),
        ("2019 Cascadia service", "2019 Cascadia service"),
    ],
)
def test_strip_list_marker(raw: str, expected: str) -> None:
    assert strip_list_marker(raw) == expected


def test_number_items_skips_blank_entries_without_gaps() -> None:
    assert number_items(["4. First", "", None, "  ", "7) Second"]) == ["1. First", "2. Second"]


def test_number_items_restarts_for_each_list() -> None:
    assert number_items(["a"]) == ["1. a"]
    assert number_items(["b"]) == ["1. b"]
    assert number_items(None) == []


def test_number_items_can_keep_leading_numbers() -> None:
    assert number_items(["10-Step Guide"], strip_markers=False) == ["1. 10-Step Guide"]


def test_wrap_text_respects_width() -> None:
    text = "Boost pressure is below the commanded value under load " * 6

    lines = wrap_text(text, BODY_TEXT, 200)

    assert len(lines) > 1
    assert all(text_width(line, BODY_TEXT) <= 200 for line in lines)
    assert " ".join(lines).split() == text.split()


def test_wrap_text_breaks_unbreakable_tokens() -> None:
    token = "X" * 120

    lines = wrap_text(token, BODY_TEXT, 100)

    assert len(lines) > 1
    assert "".join(lines) == token
    assert all(text_width(line, BODY_TEXT) <= 100 for line in lines)


def test_wrap_text_empty_input() -> None:
    assert wrap_text("", BODY_TEXT, 100) == []
    assert wrap_text(None, BODY_TEXT, 100) == []
    with pytest.raises(ValueError):
        wrap_text("text", BODY_TEXT, 0)


def test_truncate_to_width() -> None:
    assert truncate_to_width("short", BODY_TEXT, 200) == "short"

    truncated = truncate_to_width("A very long task title " * 10, BODY_TEXT, 120)

    assert truncated.endswith(TRUNCATION_MARKER)
    assert text_width(truncated, BODY_TEXT) <= 120


def test_truncate_to_width_keeps_longest_fitting_prefix() -> None:
    value = "ABCDEFGHIJKLMNOPQRSTUVWXYZ" * 3
    truncated = truncate_to_width(value, BODY_TEXT, 80)
    prefix = truncated[: -len(TRUNCATION_MARKER)]

    assert value.startswith(prefix)
    assert text_width(truncated, BODY_TEXT) <= 80
    assert text_width(value[: len(prefix) + 1] + TRUNCATION_MARKER, BODY_TEXT) > 80


def test_truncate_to_width_handles_very_long_values() -> None:
    started = time.perf_counter()
    truncated = truncate_to_width("X" * 20000, BODY_TEXT, 200)
    elapsed = time.perf_counter() - started

    assert truncated.endswith(TRUNCATION_MARKER)
    assert text_width(truncated, BODY_TEXT) <= 200
    assert elapsed < 1.0


def test_dedupe_is_case_insensitive() -> None:
    assert dedupe(["Oil leak", " oil leak ", "Brake noise", ""]) == ["Oil leak", "Brake noise"]
