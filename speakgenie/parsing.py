"""Shared parsing helpers for configuration and runtime value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_optional_float(value: object, field_name: str) -> float | None:
    """Parse an optional numeric value, rejecting booleans and non-numeric text.

    Raises:
        ValueError: If a non-blank value cannot be read as a float.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"`{field_name}` must be a number.")
    if isinstance(value, int | float):
        return float(value)

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        return float(normalized)
    except ValueError as exc:
        raise ValueError(f"`{field_name}` must be a number.") from exc


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp a numeric value into the inclusive `[lower, upper]` range."""

    return max(lower, min(upper, float(value)))


def normalize_locale_tag(value: object) -> str:
    """Normalize a platform language token into a `ll-RR` style locale tag.

    Platform voice metadata is inconsistent: `en_US`, `en-us`, and
    `b"\\x05en-us"` all describe the same locale. Empty or unreadable values
    normalize to an empty string.
    """

    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    raw = "".join(character for character in str(value or "") if character.isprintable())
    raw = raw.strip().replace("_", "-")
    if not raw:
        return ""

    parts = [part for part in raw.split("-") if part]
    if not parts:
        return ""
    language = parts[0].lower()
    rest = [part.upper() if len(part) == 2 else part for part in parts[1:]]
    return "-".join([language, *rest])


def primary_subtag(locale: str) -> str:
    """Return the language portion of a locale tag (`hi` for `hi-IN`)."""

    return locale.split("-")[0]
