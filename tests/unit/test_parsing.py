"""Unit tests for shared parsing helpers."""

from __future__ import annotations

import pytest

from speakgenie.parsing import (
    clamp,
    normalize_locale_tag,
    normalize_optional_string,
    parse_optional_float,
    parse_permissive_boolean,
    primary_subtag,
)


def test_normalize_optional_string_trims_and_blanks_to_none() -> None:
    """Blank values normalize to `None`; others are stripped."""

    assert normalize_optional_string("  hi-IN ") == "hi-IN"
    assert normalize_optional_string("   ") is None
    assert normalize_optional_string(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), ("yes", True), ("ON", True), ("0", False), ("off", False), ("maybe", None)],
)
def test_parse_permissive_boolean(value: object, expected: bool | None) -> None:
    """Permissive boolean tokens map to booleans; unknown tokens return `None`."""

    assert parse_permissive_boolean(value) is expected


def test_parse_optional_float_accepts_numbers_and_numeric_text() -> None:
    """Numbers and numeric strings parse; blanks are absent values."""

    assert parse_optional_float(2, "speech_rate") == 2.0
    assert parse_optional_float(" 0.5 ", "speech_rate") == 0.5
    assert parse_optional_float("", "speech_rate") is None


@pytest.mark.parametrize("value", [True, "fast"])
def test_parse_optional_float_rejects_booleans_and_text(value: object) -> None:
    """Booleans and non-numeric text are rejected with the field name."""

    with pytest.raises(ValueError, match="speech_rate"):
        parse_optional_float(value, "speech_rate")


def test_clamp_bounds_values() -> None:
    """Clamp keeps values inside the inclusive range."""

    assert clamp(-5, 0.1, 10.0) == 0.1
    assert clamp(99, 0.0, 2.0) == 2.0
    assert clamp(0.5, 0.0, 1.0) == 0.5


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("en_US", "en-US"),
        ("en-us", "en-US"),
        (b"\x05hi-in", "hi-IN"),
        ("HI", "hi"),
        ("zh-Hans-CN", "zh-Hans-CN"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_locale_tag(raw: object, expected: str) -> None:
    """Platform language tokens normalize to `ll-RR` tags."""

    assert normalize_locale_tag(raw) == expected


def test_primary_subtag() -> None:
    """The primary subtag is the language part before the first hyphen."""

    assert primary_subtag("mr-IN") == "mr"
    assert primary_subtag("en") == "en"
