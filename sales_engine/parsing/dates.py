"""
Date Parsing

Resolves dates that arrive in many human and machine formats. Day/month
ambiguity is settled by a fixed precedence, not by guessing: the cascade
below is tried top to bottom and the first interpretation that succeeds wins.

    1. ISO 8601 on the raw text
    2. ISO 8601 on the text with "." and "/" replaced by "-"
    3. en-US (month first), en-GB (day first), pl-PL (day first, Polish
       month names), each on the raw text and then on the normalized text

So "06.01.2023" is 1 June 2023 (en-US on the normalized text), while
"28.01.2023" falls through to en-GB because 28 is not a month.
"""

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from .lookups import POLISH_MONTHS, SERIAL_EPOCH


DateAttempt = Callable[[str], Optional[date]]

_TIME_SUFFIXES = ("", " %H:%M", " %H:%M:%S")
_TIME_SUFFIXES_12H = _TIME_SUFFIXES + (" %I:%M %p", " %I:%M:%S %p")


def _with_times(formats: Sequence[str], suffixes: Sequence[str]) -> Tuple[str, ...]:
    return tuple(fmt + suffix for fmt in formats for suffix in suffixes)


EN_US_FORMATS = _with_times(
    (
        "%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y", "%m-%d-%y",
        "%B %d, %Y", "%b %d, %Y", "%B %d %Y", "%b %d %Y",
    ),
    _TIME_SUFFIXES_12H,
)

EN_GB_FORMATS = _with_times(
    (
        "%d/%m/%Y", "%d/%m/%y", "%d-%m-%Y", "%d-%m-%y",
        "%d %B %Y", "%d %b %Y", "%d %B, %Y",
    ),
    _TIME_SUFFIXES,
)

PL_PL_FORMATS = _with_times(
    ("%d.%m.%Y", "%d.%m.%y", "%d-%m-%Y", "%d-%m-%y", "%d %m %Y", "%Y.%m.%d"),
    _TIME_SUFFIXES,
)

_SEPARATORS = re.compile(r"[./]")
_WORD = re.compile(r"[^\W\d_]+")


def _strptime(text: str, formats: Iterable[str]) -> Optional[date]:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _normalize_separators(text: str) -> str:
    return _SEPARATORS.sub("-", text)


def _parse_iso(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _parse_en_us(text: str) -> Optional[date]:
    return _strptime(text, EN_US_FORMATS)


def _parse_en_gb(text: str) -> Optional[date]:
    return _strptime(text, EN_GB_FORMATS)


def _parse_pl_pl(text: str) -> Optional[date]:
    def month_number(match: "re.Match[str]") -> str:
        month = POLISH_MONTHS.get(match.group(0).lower())
        return str(month) if month else match.group(0)

    return _strptime(_WORD.sub(month_number, text), PL_PL_FORMATS)


def _normalized(attempt: DateAttempt) -> DateAttempt:
    def run(text: str) -> Optional[date]:
        return attempt(_normalize_separators(text))
    return run


DATE_CASCADE: Tuple[Tuple[str, DateAttempt], ...] = (
    ("iso", _parse_iso),
    ("iso-normalized", _normalized(_parse_iso)),
    ("en-US", _parse_en_us),
    ("en-US-normalized", _normalized(_parse_en_us)),
    ("en-GB", _parse_en_gb),
    ("en-GB-normalized", _normalized(_parse_en_gb)),
    ("pl-PL", _parse_pl_pl),
    ("pl-PL-normalized", _normalized(_parse_pl_pl)),
)


def _from_serial(value: Any) -> Optional[date]:
    try:
        serial = float(value)
        if not math.isfinite(serial) or serial < 1:
            return None
        return SERIAL_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError):
        return None


def resolve_date(value: Any) -> Tuple[Optional[date], Optional[str]]:
    """
    Parse a date and report which interpretation produced it.

    Returns:
        (date, step name) on success, (None, None) on failure. The step name
        is "native" for date objects, "serial" for numbers, otherwise the
        name of the matching entry in DATE_CASCADE.
    """
    if value is None or isinstance(value, bool):
        return None, None
    if isinstance(value, datetime):
        return value.date(), "native"
    if isinstance(value, date):
        return value, "native"
    if isinstance(value, (int, float, Decimal)):
        parsed = _from_serial(value)
        return (parsed, "serial") if parsed else (None, None)

    text = str(value).strip()
    if not text:
        return None, None

    for name, attempt in DATE_CASCADE:
        parsed = attempt(text)
        if parsed is not None:
            return parsed, name
    return None, None


def parse_date(value: Any) -> Optional[date]:
    """Parse a raw value into a calendar date, or None if no interpretation fits."""
    return resolve_date(value)[0]


MONTH_FORMATS = ("%Y-%m", "%m-%Y", "%B %Y", "%b %Y", "%m %Y")


def parse_month(value: Any) -> Optional[date]:
    """
    Parse a raw value and truncate it to the first day of its month.

    Full dates go through the date cascade; month-only text such as
    "2023-01", "01/2023", "January 2023" or "styczeń 2023" is accepted too.
    """
    parsed = parse_date(value)
    if parsed is None and isinstance(value, str) and value.strip():
        text = _normalize_separators(value.strip())
        parsed = _strptime(text, MONTH_FORMATS)
        if parsed is None:
            parsed = _parse_pl_pl("1 " + text)
    return parsed.replace(day=1) if parsed else None
