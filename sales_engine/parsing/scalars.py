"""
Scalar Parsers

Total functions from a raw, loosely typed value to a canonical value.
A value that cannot be interpreted yields None; nothing here raises.
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .lookups import (
    COUNTRY_ALIASES,
    DIACRITIC_ALLOW_LIST,
    DIACRITIC_PAIRS,
    LOGICAL_FALSE,
    LOGICAL_TRUE,
)


_NOT_NUMBER = re.compile(r"[^0-9.]")
_WHITESPACE = re.compile(r"\s+")
_TEXT_DISALLOWED = re.compile(
    "[^A-Za-z0-9 ." + "".join(sorted(DIACRITIC_ALLOW_LIST)) + "]"
)
_NON_DIGIT = re.compile(r"\D")
_EMAIL = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _number_text(value: Any) -> str:
    """Render a number without a spurious ".0" (1.0 -> "1")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(value.to_integral_value())
    return str(value)


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a numeric value.

    Commas are read as decimal separators, so "175,26" == 175.26. A comma
    used as a thousands separator ("1,234.56") is not repaired and fails.
    """
    if _is_blank(value):
        return None
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        number = value if isinstance(value, Decimal) else Decimal(str(value))
        return number if number.is_finite() else None

    text = str(value).strip().replace(",", ".")
    negative = text.startswith("-")
    digits = _NOT_NUMBER.sub("", text)
    if not digits or digits == ".":
        return None
    try:
        number = Decimal(("-" if negative else "") + digits)
    except InvalidOperation:
        return None
    return number


def parse_integer(value: Any) -> Optional[int]:
    """Parse a whole number; fractional values fail."""
    number = parse_number(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def parse_rate(value: Any) -> Optional[Decimal]:
    """Parse a fraction; "5%" and "5,0 %" become 0.05, bare numbers pass as-is."""
    number = parse_number(value)
    if number is None:
        return None
    if isinstance(value, str) and "%" in value:
        return number / 100
    return number


def strip_diacritics(value: Any) -> Optional[str]:
    """Replace accented letters with their ASCII equivalents."""
    if value is None:
        return None
    text = str(value)
    for accented, plain in DIACRITIC_PAIRS:
        text = text.replace(accented, plain)
    return text


def normalize_text(value: Any) -> Optional[str]:
    """
    Clean free text: keep letters, digits, spaces and periods, collapse
    whitespace and title-case.

    Not for identifiers; "ORD-001" would lose its dash.
    """
    if _is_blank(value):
        return None
    text = _number_text(value) if _is_number(value) else str(value)
    text = _WHITESPACE.sub(" ", text)
    text = _TEXT_DISALLOWED.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text.title() if text else None


def parse_logical(value: Any) -> Optional[bool]:
    """Map YES/Y/TRUE/1 to True and NO/N/FALSE/0 to False."""
    if _is_blank(value):
        return None
    text = _number_text(value) if _is_number(value) else str(value)
    token = text.strip().upper()
    if token in LOGICAL_TRUE:
        return True
    if token in LOGICAL_FALSE:
        return False
    return None


def normalize_country(value: Any) -> Optional[str]:
    """
    Resolve a country name, native name or ISO code to its English name.

    Unknown countries are kept (title-cased), not dropped.
    """
    if _is_blank(value):
        return None
    text = str(value).strip()
    canonical = COUNTRY_ALIASES.get(text.lower())
    if canonical is not None:
        return canonical
    return _WHITESPACE.sub(" ", text).title()


def parse_identifier(value: Any) -> Optional[str]:
    """Trim an identifier; numeric identifiers lose any ".0" suffix."""
    if _is_blank(value):
        return None
    if _is_number(value):
        return _number_text(value)
    return str(value).strip()


def parse_code(value: Any) -> Optional[str]:
    """Upper-cased identifier, e.g. ISO currency codes."""
    code = parse_identifier(value)
    return code.upper() if code else None


def parse_ean(value: Any) -> Optional[str]:
    """Digits of an EAN-13 barcode; anything other than 13 digits fails."""
    code = parse_identifier(value)
    if code is None:
        return None
    digits = _NON_DIGIT.sub("", code)
    return digits if len(digits) == 13 else None


def parse_email(value: Any) -> Optional[str]:
    """Lower-case ASCII e-mail address, or None if it does not look like one."""
    if _is_blank(value):
        return None
    text = strip_diacritics(str(value).strip()).lower()
    text = text.encode("ascii", "ignore").decode("ascii").replace(" ", "")
    return text if _EMAIL.match(text) else None


def parse_phone(value: Any) -> Optional[str]:
    """Keep digits and a single leading "+"."""
    if _is_blank(value):
        return None
    text = _number_text(value) if _is_number(value) else str(value).strip()
    digits = _NON_DIGIT.sub("", text)
    if not digits:
        return None
    return ("+" + digits) if text.startswith("+") else digits


def parse_currency(value: Any) -> Optional[str]:
    """Three-letter currency code, upper-cased ("pln" -> "PLN")."""
    code = parse_code(value)
    return code if code and len(code) == 3 and code.isalpha() else None
