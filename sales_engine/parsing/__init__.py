"""
Scalar Parsing Module
"""
from .dates import DATE_CASCADE, parse_date, parse_month, resolve_date
from .package_size import parse_package_size
from .scalars import (
    normalize_country,
    normalize_text,
    parse_code,
    parse_currency,
    parse_ean,
    parse_email,
    parse_identifier,
    parse_integer,
    parse_logical,
    parse_number,
    parse_phone,
    parse_rate,
    strip_diacritics,
)

__all__ = [
    "DATE_CASCADE",
    "parse_date",
    "parse_month",
    "resolve_date",
    "parse_package_size",
    "normalize_country",
    "normalize_text",
    "parse_code",
    "parse_currency",
    "parse_ean",
    "parse_email",
    "parse_identifier",
    "parse_integer",
    "parse_logical",
    "parse_number",
    "parse_phone",
    "parse_rate",
    "strip_diacritics",
]
