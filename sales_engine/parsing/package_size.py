"""
Package Size Parsing

Canonicalizes descriptions such as "6x330ml", "12 X 0,5 l" or "500g" into
"{count} × {value} {unit}". Source data sometimes carries only a bare count
or only a unit, so four output shapes exist:

    "6"              count only           ("6x")
    "6 × 0.33 L"     count, value, unit   ("6x330ml")
    "1 × 2"          count and value      ("2")
    "12 × L"         count and unit       ("12 x ml")

Only ml and g are converted (to L and kg); every other unit passes through
lower-cased and unscaled.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from .lookups import UNIT_CONVERSIONS


MULTIPLY_SIGN = "×"

_DELIMITERS = str.maketrans({"×": "x", "X": "x"})
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")
_NUMERIC_RUN = re.compile(r"[0-9.,]+")
_ALPHA_RUN = re.compile(r"[^\W\d_]+")
_TWO_PLACES = Decimal("0.01")


def _split_count(text: str) -> Tuple[int, str]:
    if "x" not in text:
        return 1, text
    count_part, value_part = text.split("x", 1)
    match = _LEADING_DIGITS.match(count_part)
    count = int(match.group(1)) if match else 1
    return count, value_part


def _parse_magnitude(token: str) -> Optional[Decimal]:
    try:
        value = Decimal(token.replace(",", "."))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def format_magnitude(value: Decimal) -> Optional[str]:
    """At most two decimals, trailing zeros dropped (0.330 -> "0.33"); None if too large to round."""
    try:
        rounded = value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    text = format(rounded, "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def parse_package_size(value: Any) -> Optional[str]:
    """Parse a composite package-size description into its canonical string."""
    if value is None:
        return None
    text = str(value).strip().translate(_DELIMITERS)
    if not text:
        return None

    count, value_part = _split_count(text)

    numeric = _NUMERIC_RUN.search(value_part)
    magnitude = _parse_magnitude(numeric.group(0)) if numeric else None

    alpha = _ALPHA_RUN.search(value_part)
    unit = alpha.group(0).lower() if alpha else None

    if unit in UNIT_CONVERSIONS:
        unit, divisor = UNIT_CONVERSIONS[unit]
        if magnitude is not None:
            magnitude = magnitude / divisor

    amount = format_magnitude(magnitude) if magnitude is not None else None

    if amount is None and unit is None:
        return f"{count}"
    if amount is not None and unit is not None:
        return f"{count} {MULTIPLY_SIGN} {amount} {unit}"
    if amount is not None:
        return f"{count} {MULTIPLY_SIGN} {amount}"
    return f"{count} {MULTIPLY_SIGN} {unit}"
