"""
Per-Source Transformer

Maps raw rows of one source table (source-specific column names, mixed raw
values) to canonical typed records, applying a scalar parser per field.

Rows with a failed field are excluded and counted: a required field that is
absent or unparseable, or any non-nullable field whose value is present but
unparseable. A row with no column at all for a natural-key field means the
source has the wrong shape, and aborts the run.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import structlog

from sales_engine.exceptions import MissingKeyColumnError
from sales_engine.models import CanonicalRecord
from .cleaners import CleaningStats, RowCleaner, canonical_field_name

logger = structlog.get_logger(__name__)


FieldParser = Callable[[Any], Any]


@dataclass(frozen=True)
class FieldSpec:
    """
    How one canonical field is read from a source row.

    A required field must be present and parse. Other fields may be blank;
    a non-blank value that fails to parse still invalidates the row unless
    the field is nullable.
    """
    name: str
    columns: Tuple[str, ...]
    parser: FieldParser
    required: bool = False
    nullable: bool = False

    @property
    def lookup_names(self) -> Tuple[str, ...]:
        """Candidate column names as they appear after row cleaning, lower-cased"""
        return tuple(canonical_field_name(column).lower() for column in self.columns)


@dataclass(frozen=True)
class DerivedField:
    """Canonical field computed from already parsed fields"""
    name: str
    compute: Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class SourceSchema:
    """Column mapping and parsers of one source table"""
    name: str
    record_type: type
    fields: Tuple[FieldSpec, ...]
    derived: Tuple[DerivedField, ...] = ()

    @property
    def key_fields(self) -> Tuple[FieldSpec, ...]:
        keys = self.record_type.natural_key
        return tuple(spec for spec in self.fields if spec.name in keys)


@dataclass
class TransformResult:
    """Result of transforming one source batch"""
    source: str
    entity: str
    input_rows: int
    output_rows: int
    invalid_rows: int
    blank_rows: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    records: Tuple[CanonicalRecord, ...] = ()
    field_failures: Dict[str, int] = field(default_factory=dict)
    cleaning: Optional[CleaningStats] = None


class SourceTransformer:
    """
    Transformer for one source schema.

    Example:
        transformer = SourceTransformer(SALES_SCHEMA)
        result = transformer.transform(raw_rows, source="sales_q1")
        result.records  # tuple of Sale
    """

    def __init__(self, schema: SourceSchema, cleaner: Optional[RowCleaner] = None):
        self.schema = schema
        self.cleaner = cleaner or RowCleaner()

    @staticmethod
    def _column_index(row: Mapping[str, Any]) -> Dict[str, str]:
        """Lower-cased column name -> actual column name"""
        return {name.lower(): name for name in row}

    @staticmethod
    def _find_column(spec: FieldSpec, index: Mapping[str, str]) -> Optional[str]:
        for candidate in spec.lookup_names:
            if candidate in index:
                return index[candidate]
        return None

    def _check_key_columns(self, index: Mapping[str, str], source: str, row_number: int) -> None:
        for spec in self.schema.key_fields:
            if self._find_column(spec, index) is None:
                raise MissingKeyColumnError(source, spec.name, spec.columns, row_number)

    def parse_row(
        self,
        row: Mapping[str, Any],
        source: Optional[str] = None,
        row_number: int = 1,
    ) -> Tuple[Dict[str, Any], List[str]]:
        """
        Parse one cleaned row into canonical field values.

        Returns:
            Parsed values and the names of fields that failed
        """
        source = source or self.schema.name
        index = self._column_index(row)
        self._check_key_columns(index, source, row_number)

        values: Dict[str, Any] = {}
        failures: List[str] = []

        for spec in self.schema.fields:
            column = self._find_column(spec, index)
            raw = row[column] if column is not None else None
            value = spec.parser(raw) if column is not None else None
            values[spec.name] = value
            if value is not None:
                continue
            if spec.required or not (spec.nullable or self.cleaner.is_blank_value(raw)):
                failures.append(spec.name)

        for derived in self.schema.derived:
            values[derived.name] = derived.compute(values)

        return values, failures

    def transform(
        self,
        rows: Iterable[Mapping[str, Any]],
        source: Optional[str] = None,
    ) -> TransformResult:
        """
        Clean and parse a batch of raw rows, preserving input order.

        Args:
            rows: Raw rows of this source
            source: Name reported for this batch (defaults to the schema name)

        Returns:
            TransformResult with the valid records and failure counts

        Raises:
            MissingKeyColumnError: a row has no column for a natural-key field
        """
        source = source or self.schema.name
        started_at = datetime.now(timezone.utc)

        cleaned, cleaning_stats = self.cleaner.clean(rows)
        records: List[CanonicalRecord] = []
        failures: Counter = Counter()
        invalid = 0

        for row_number, row in enumerate(cleaned, start=1):
            values, failed_fields = self.parse_row(row, source, row_number)
            if failed_fields:
                invalid += 1
                failures.update(failed_fields)
                continue
            records.append(self.schema.record_type(**values))

        completed_at = datetime.now(timezone.utc)

        result = TransformResult(
            source=source,
            entity=self.schema.record_type.entity,
            input_rows=cleaning_stats.total_rows,
            output_rows=len(records),
            invalid_rows=invalid,
            blank_rows=cleaning_stats.blank_rows_removed,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            records=tuple(records),
            field_failures=dict(failures),
            cleaning=cleaning_stats,
        )

        logger.info(
            "Source transformed",
            source=source,
            entity=result.entity,
            input_rows=result.input_rows,
            output_rows=result.output_rows,
            invalid_rows=invalid,
        )
        if invalid:
            logger.warning("Invalid rows excluded", source=source, failures=result.field_failures)

        return result


def transform_source(
    schema: SourceSchema,
    rows: Iterable[Mapping[str, Any]],
    source: Optional[str] = None,
) -> TransformResult:
    """
    Convenience function to transform one source batch.

    Args:
        schema: Source schema
        rows: Raw rows
        source: Optional batch name

    Returns:
        TransformResult
    """
    return SourceTransformer(schema).transform(rows, source=source)
