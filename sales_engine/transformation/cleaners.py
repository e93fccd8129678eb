"""
Row Cleaning Module

First pass over raw source rows, before any field is parsed.
Handles:
- Blank row removal
- Whitespace trimming of text values
- Field name canonicalization ("Order #" -> "Order_No")

Cleaning is idempotent: cleaning already-cleaned rows changes nothing.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import structlog

logger = structlog.get_logger(__name__)


Row = Dict[str, Any]


@dataclass
class CleaningStats:
    """Statistics from cleaning operations"""
    total_rows: int
    rows_after_cleaning: int
    blank_rows_removed: int
    fields_renamed: int


def canonical_field_name(name: Any) -> str:
    """Trim a field name, replace spaces with "_" and "#" with "No"."""
    return str(name).strip().replace(" ", "_").replace("#", "No")


class RowCleaner:
    """
    Cleaner for loosely typed source rows (field name -> raw value).

    Example:
        cleaner = RowCleaner()
        rows, stats = cleaner.clean(raw_rows)
    """

    @staticmethod
    def is_blank_value(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, float) and math.isnan(value):
            return True
        return isinstance(value, str) and not value.strip()

    def _is_blank_row(self, row: Mapping[str, Any]) -> bool:
        """True when every field is null or empty"""
        return all(self.is_blank_value(value) for value in row.values())

    def _trim_strings(self, row: Mapping[str, Any]) -> Row:
        """Trim whitespace from text values"""
        return {
            name: value.strip() if isinstance(value, str) else value
            for name, value in row.items()
        }

    def _rename_fields(self, row: Mapping[str, Any]) -> Tuple[Row, int]:
        """Canonicalize field names, returning the row and rename count"""
        renamed = 0
        result: Row = {}
        for name, value in row.items():
            canonical = canonical_field_name(name)
            if canonical != name:
                renamed += 1
            result[canonical] = value
        return result, renamed

    def clean(self, rows: Iterable[Mapping[str, Any]]) -> Tuple[List[Row], CleaningStats]:
        """
        Clean a sequence of rows, preserving input order.

        Args:
            rows: Raw rows from one source

        Returns:
            Cleaned rows and cleaning statistics
        """
        cleaned: List[Row] = []
        total = 0
        renamed_fields = 0

        for row in rows:
            total += 1
            if self._is_blank_row(row):
                continue
            row, renamed = self._rename_fields(self._trim_strings(row))
            renamed_fields += renamed
            cleaned.append(row)

        stats = CleaningStats(
            total_rows=total,
            rows_after_cleaning=len(cleaned),
            blank_rows_removed=total - len(cleaned),
            fields_renamed=renamed_fields,
        )

        if stats.blank_rows_removed:
            logger.debug("Blank rows removed", count=stats.blank_rows_removed)

        return cleaned, stats


def clean_rows(rows: Iterable[Mapping[str, Any]]) -> List[Row]:
    """
    Convenience function to clean rows.

    Args:
        rows: Raw rows

    Returns:
        Cleaned rows
    """
    cleaned, _ = RowCleaner().clean(rows)
    return cleaned
