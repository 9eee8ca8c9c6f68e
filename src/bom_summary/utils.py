"""
Utility functions for cell coercion and natural ordering.

This module handles the low-level value handling, including:
- Cell stringification (123.0 -> "123").
- Tolerant quantity parsing ("12 pcs" -> 12, "abc" -> None).
- Natural sorting (FILE2 before FILE10).
"""

import math
import re
from datetime import date, datetime, time
from typing import Any

# Leading numeric prefix accepted by a lenient float parse ("12.5 pcs" -> 12.5)
_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def cell_to_str(value: Any) -> str:
    """
    Converts a raw cell value to the string used as a key or label.

    Integral floats drop their trailing ".0" so that a part number typed as
    a number in Excel (12345) keys the same as one typed as text ("12345").

    Args:
        value: Raw cell value (str, int, float, bool, date or None).

    Returns:
        The string form. None becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _parse_float_prefix(text: str) -> float | None:
    match = _FLOAT_PREFIX.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def _truncate_via_string(number: float) -> int | None:
    """
    Truncates a float by printing it and reading back the leading integer.

    Very large (>= 1e21) and very small (< 1e-6) magnitudes print in
    exponent form, so only the first significant digit survives the
    read-back ("1.5e-07" -> 1).
    """
    if math.isnan(number) or math.isinf(number):
        return None
    magnitude = abs(number)
    if magnitude != 0 and (magnitude >= 1e21 or magnitude < 1e-6):
        lead = int(repr(magnitude)[0])
        return -lead if number < 0 else lead
    return int(number)


def coerce_quantity(value: Any) -> int | None:
    """
    Parses a quantity cell into an integer.

    The value is read as a float first (tolerating trailing text such as
    "4 pcs"), then truncated towards zero.

    Args:
        value: Raw quantity cell value.

    Returns:
        The integer quantity (possibly 0), or None if the value does not
        start with a number.
    """
    if value is None:
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number: float | None = float(value)
        except OverflowError:
            return None
    else:
        number = _parse_float_prefix(cell_to_str(value))

    if number is None:
        return None
    return _truncate_via_string(number)


def natural_sort_key(text: str) -> list[Any]:
    """
    Generates a sort key for natural alphanumeric sorting.

    Splits strings into text and numeric chunks so that 'JB10' comes
    after 'JB2', rather than 'JB1'.

    Args:
        text: The string to key (e.g., "JB0000010").

    Returns:
        A list of alternating str/int chunks suitable for sort keys.
    """
    return [
        int(chunk) if chunk.isdecimal() else chunk.upper()
        for chunk in re.split(r"(\d+)", text)
    ]


def natural_key_with_case(text: str) -> tuple[list[Any], str]:
    """Natural key with a case-sensitive final tie-break (lowercase first)."""
    return natural_sort_key(text), text.swapcase()


def compare_natural(a: str, b: str) -> int:
    """
    Three-way natural comparison of two strings.

    Returns:
        -1, 0 or 1.
    """
    ka = natural_key_with_case(a)
    kb = natural_key_with_case(b)
    return (ka > kb) - (ka < kb)


def sort_file_ids(file_ids: set[str] | list[str]) -> tuple[str, ...]:
    """Returns the distinct identifiers in natural order."""
    return tuple(sorted(set(file_ids), key=natural_key_with_case))
