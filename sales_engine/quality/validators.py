"""
Data Validation Module

Rule-based integrity checks over the integrated star schema.

Features:
- Null key checks
- Uniqueness checks on primary keys
- Range, positivity and date window checks
- Referential integrity and orphaned foreign key checks
- Date consistency between related tables
- Per-source parse error counts

Validation never raises and never changes the data it inspects: every
problem becomes a FAIL entry with a violation count.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import polars as pl
import structlog

from sales_engine.config import get_settings
from sales_engine.config.settings import Settings

logger = structlog.get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # integrity broken
    WARNING = "warning"  # data quality degraded
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


class CheckStatus(str, Enum):
    """Outcome of a single check"""
    PASS = "PASS"
    FAIL = "FAIL"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0

    @property
    def status(self) -> CheckStatus:
        return CheckStatus.PASS if self.passed else CheckStatus.FAIL

    @property
    def violation_count(self) -> int:
        return self.failed_rows

    def to_report_entry(self) -> Dict[str, Any]:
        return {
            "check_name": self.name,
            "status": self.status.value,
            "violation_count": self.violation_count,
        }


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    def report(self) -> List[Dict[str, Any]]:
        """Ordered list of {check_name, status, violation_count}"""
        return [check.to_report_entry() for check in self.checks]

    def get(self, name: str) -> Optional[ValidationCheck]:
        """Check by name"""
        for check in self.checks:
            if check.name == name:
                return check
        return None

    @classmethod
    def from_checks(
        cls,
        checks: Sequence[ValidationCheck],
        strict_mode: bool = False,
        started_at: Optional[datetime] = None,
    ) -> "ValidationResult":
        """Summarize check results into a suite result"""
        passed_checks = sum(1 for r in checks if r.passed)
        failed_checks = sum(1 for r in checks if not r.passed and r.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for r in checks if not r.passed and r.severity == ValidationSeverity.WARNING)

        if failed_checks > 0:
            status = ValidationStatus.FAILED
        elif warning_count > 0 and strict_mode:
            status = ValidationStatus.FAILED
        elif warning_count > 0:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        return cls(
            status=status,
            total_checks=len(checks),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=list(checks),
            started_at=started_at or datetime.now(timezone.utc),
            completed_at=datetime.now(timezone.utc),
        )


def _missing_column(name: str, column: str, severity: ValidationSeverity) -> ValidationCheck:
    return ValidationCheck(
        name=name,
        passed=False,
        severity=severity,
        message=f"Column '{column}' not found",
    )


class DataValidator:
    """
    Data validator for one table.

    Check names are prefixed with the table name when one is given
    ("fact_sales.unique_order_id").

    Example:
        validator = DataValidator("fact_sales")
        validator.add_not_null_check("order_id")
        validator.add_positive_check("quantity")
        result = validator.validate(df)
    """

    def __init__(self, table: Optional[str] = None, strict_mode: bool = False):
        self.table = table
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def _name(self, name: str) -> str:
        return f"{self.table}.{name}" if self.table else name

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for null values in column"""
        name = self._name(f"not_null_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            null_count = df[column].null_count()
            total = len(df)
            passed = null_count == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {null_count} null values" if not passed else f"Column '{column}' has no null values",
                details={"null_count": null_count, "null_percentage": (null_count / total) * 100 if total > 0 else 0},
                failed_rows=null_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_unique_check(
        self,
        columns: Any,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for uniqueness of a column or column combination"""
        subset = [columns] if isinstance(columns, str) else list(columns)
        name = self._name("unique_" + "_".join(subset))

        def check(df: pl.DataFrame) -> ValidationCheck:
            missing = [c for c in subset if c not in df.columns]
            if missing:
                return _missing_column(name, missing[0], severity)

            total = len(df)
            unique_count = df.select(subset).unique().height
            duplicate_count = total - unique_count
            passed = duplicate_count == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Key {subset} has {duplicate_count} duplicate values" if not passed else f"Key {subset} values are unique",
                details={"unique_count": unique_count, "duplicate_count": duplicate_count},
                failed_rows=duplicate_count,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for values within specified range"""
        name = self._name(f"range_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            values = pl.col(column).cast(pl.Float64)
            conditions = []
            if min_value is not None:
                conditions.append(values < min_value)
            if max_value is not None:
                conditions.append(values > max_value)

            if not conditions:
                return ValidationCheck(
                    name=name,
                    passed=True,
                    severity=severity,
                    message="No range specified",
                )

            combined = conditions[0]
            for cond in conditions[1:]:
                combined = combined | cond

            out_of_range = df.filter(combined).height
            total = len(df)
            passed = out_of_range == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {out_of_range} values outside range [{min_value}, {max_value}]" if not passed else "All values in range",
                details={"min": min_value, "max": max_value, "out_of_range_count": out_of_range},
                failed_rows=out_of_range,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_positive_check(
        self,
        column: str,
        allow_zero: bool = False,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that non-null values are positive"""
        name = self._name(f"positive_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            values = pl.col(column).cast(pl.Float64)
            violation = values < 0 if allow_zero else values <= 0
            bad = df.filter(violation).height
            passed = bad == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {bad} non-positive values" if not passed else f"Column '{column}' values are positive",
                details={"allow_zero": allow_zero},
                failed_rows=bad,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_date_range_check(
        self,
        column: str,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that dates fall inside [min_date, max_date]"""
        name = self._name(f"date_range_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            conditions = []
            if min_date is not None:
                conditions.append(pl.col(column) < pl.lit(min_date))
            if max_date is not None:
                conditions.append(pl.col(column) > pl.lit(max_date))

            outside = 0
            if conditions:
                combined = conditions[0]
                for cond in conditions[1:]:
                    combined = combined | cond
                outside = df.filter(combined).height

            return ValidationCheck(
                name=name,
                passed=outside == 0,
                severity=severity,
                message=f"Column '{column}' has {outside} dates outside [{min_date}, {max_date}]" if outside else "All dates in range",
                details={"min_date": str(min_date), "max_date": str(max_date)},
                failed_rows=outside,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_date_order_check(
        self,
        earlier: str,
        later: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that `later` is never before `earlier` where both are set"""
        name = self._name(f"date_order_{earlier}_{later}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            for column in (earlier, later):
                if column not in df.columns:
                    return _missing_column(name, column, severity)

            inverted = df.filter(pl.col(later) < pl.col(earlier)).height

            return ValidationCheck(
                name=name,
                passed=inverted == 0,
                severity=severity,
                message=f"{inverted} rows have '{later}' before '{earlier}'" if inverted else "Dates consistent",
                failed_rows=inverted,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def add_pattern_check(
        self,
        column: str,
        pattern: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
        check_name: Optional[str] = None,
    ) -> "DataValidator":
        """Add regex pattern check"""
        name = self._name(check_name or f"pattern_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            non_matching = df.filter(
                ~pl.col(column).str.contains(pattern) & pl.col(column).is_not_null()
            ).height
            total = df.filter(pl.col(column).is_not_null()).height
            passed = non_matching == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {non_matching} values not matching pattern" if not passed else "All values match pattern",
                details={"pattern": pattern, "non_matching_count": non_matching},
                failed_rows=non_matching,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[pl.DataFrame], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add custom validation check"""
        name = self._name(name)

        def check(df: pl.DataFrame) -> ValidationCheck:
            try:
                passed = check_func(df)
                return ValidationCheck(
                    name=name,
                    passed=passed,
                    severity=severity,
                    message="Check passed" if passed else message_on_fail,
                    failed_rows=0 if passed else 1,
                    total_rows=len(df),
                )
            except Exception as e:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Check failed with error: {str(e)}",
                    failed_rows=1,
                )

        self._checks.append(check)
        return self

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check that every non-null value exists in a reference table"""
        name = self._name(f"ref_integrity_{column}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            if column not in df.columns:
                return _missing_column(name, column, severity)

            reference = reference_df.select(pl.col(reference_column).alias(column))
            orphans = (
                df.select(column)
                .filter(pl.col(column).is_not_null())
                .join(reference, on=column, how="anti")
                .height
            )
            total = len(df)
            passed = orphans == 0

            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=f"Column '{column}' has {orphans} orphan records" if not passed else "Referential integrity maintained",
                details={"orphan_count": orphans},
                failed_rows=orphans,
                total_rows=total,
            )

        self._checks.append(check)
        return self

    def add_orphan_check(
        self,
        foreign_key: str,
        enrichment_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add check for joined rows whose FK is set but found no dimension row"""
        name = self._name(f"orphan_{foreign_key}")

        def check(df: pl.DataFrame) -> ValidationCheck:
            for column in (foreign_key, enrichment_column):
                if column not in df.columns:
                    return _missing_column(name, column, severity)

            orphans = df.filter(
                pl.col(foreign_key).is_not_null() & pl.col(enrichment_column).is_null()
            ).height

            return ValidationCheck(
                name=name,
                passed=orphans == 0,
                severity=severity,
                message=f"{orphans} rows reference an unknown '{foreign_key}'" if orphans else "No orphaned references",
                details={"orphan_count": orphans, "enrichment_column": enrichment_column},
                failed_rows=orphans,
                total_rows=len(df),
            )

        self._checks.append(check)
        return self

    def run_checks(self, df: pl.DataFrame) -> List[ValidationCheck]:
        """Run all checks and return the individual results"""
        results = []
        for check_func in self._checks:
            result = check_func(df)
            results.append(result)

            if not result.passed:
                logger.warning(
                    "Validation check failed",
                    check=result.name,
                    message=result.message,
                    severity=result.severity.value,
                    violations=result.failed_rows,
                )
        return results

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run all validation checks on DataFrame.

        Args:
            df: DataFrame to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = datetime.now(timezone.utc)

        logger.debug("Running validation checks", table=self.table, checks=len(self._checks), rows=len(df))

        results = self.run_checks(df)
        validation_result = ValidationResult.from_checks(results, self.strict_mode, started_at)

        logger.info(
            "Validation complete",
            table=self.table,
            status=validation_result.status.value,
            passed=validation_result.passed_checks,
            failed=validation_result.failed_checks,
            warnings=validation_result.warning_count,
        )

        return validation_result


# Pre-built validators for the canonical tables
def create_fact_sales_validator(settings: Optional[Settings] = None) -> DataValidator:
    """Create pre-configured validator for the denormalized sales fact table"""
    settings = settings or get_settings()
    return (
        DataValidator("fact_sales")
        .add_not_null_check("order_id")
        .add_not_null_check("customer_id")
        .add_not_null_check("product_sku")
        .add_unique_check("order_id")
        .add_date_range_check(
            "order_date",
            min_date=settings.validation.min_order_date,
            max_date=settings.validation.max_order_date,
        )
        .add_positive_check("quantity")
        .add_positive_check("unit_price")
        .add_orphan_check("product_sku", "product_name")
        .add_orphan_check("customer_id", "customer_name")
    )


def create_products_validator() -> DataValidator:
    """Create pre-configured validator for products data"""
    return (
        DataValidator("products")
        .add_not_null_check("product_sku")
        .add_unique_check("product_sku")
        .add_positive_check("unit_cost")
        .add_pattern_check("ean", r"^\d{13}$", severity=ValidationSeverity.WARNING)
    )


def create_customers_validator() -> DataValidator:
    """Create pre-configured validator for customers data"""
    return (
        DataValidator("customers")
        .add_not_null_check("customer_id")
        .add_unique_check("customer_id")
        .add_pattern_check(
            "email", r"^[\x00-\x7F]+$", severity=ValidationSeverity.WARNING, check_name="ascii_email"
        )
    )


def _with_order_date(df: pl.DataFrame, sales: pl.DataFrame) -> pl.DataFrame:
    """Attach the order date of the referenced sale (read-only view)"""
    lookup = sales.select(["order_id", "order_date"]).unique(subset=["order_id"], keep="first")
    return df.join(lookup, on="order_id", how="left")


def parse_error_checks(transform_results: Sequence[Any]) -> List[ValidationCheck]:
    """One check per source batch counting rows excluded for parse failures"""
    checks = []
    for result in transform_results:
        checks.append(
            ValidationCheck(
                name=f"parse_errors.{result.source}",
                passed=result.invalid_rows == 0,
                severity=ValidationSeverity.WARNING,
                message=f"{result.invalid_rows} rows excluded" if result.invalid_rows else "All rows parsed",
                details={"field_failures": dict(result.field_failures)},
                failed_rows=result.invalid_rows,
                total_rows=result.input_rows,
            )
        )
    return checks


def validate_star_schema(
    fact_sales: pl.DataFrame,
    tables: Mapping[str, pl.DataFrame],
    transform_results: Sequence[Any] = (),
    settings: Optional[Settings] = None,
) -> ValidationResult:
    """
    Validate the integrated model.

    Args:
        fact_sales: Denormalized sales fact table
        tables: Canonical tables by entity name ("sales", "products", ...)
        transform_results: Per-source TransformResults, for parse error counts
        settings: Settings providing the order date window

    Returns:
        ValidationResult whose report() lists every check in a fixed order
    """
    settings = settings or get_settings()
    started_at = datetime.now(timezone.utc)
    checks: List[ValidationCheck] = []

    checks.extend(create_fact_sales_validator(settings).run_checks(fact_sales))

    if "products" in tables:
        checks.extend(create_products_validator().run_checks(tables["products"]))
    if "customers" in tables:
        checks.extend(create_customers_validator().run_checks(tables["customers"]))

    sales = tables.get("sales", fact_sales)

    if "returns" in tables:
        returns_validator = (
            DataValidator("returns")
            .add_not_null_check("return_id")
            .add_unique_check("return_id")
            .add_referential_integrity_check("order_id", sales, "order_id")
            .add_date_order_check("order_date", "return_date")
        )
        if "products" in tables:
            returns_validator.add_referential_integrity_check("product_sku", tables["products"], "product_sku")
        checks.extend(returns_validator.run_checks(_with_order_date(tables["returns"], sales)))

    if "shipping" in tables:
        shipping_validator = (
            DataValidator("shipping")
            .add_unique_check("order_id")
            .add_referential_integrity_check("order_id", sales, "order_id")
            .add_date_order_check("order_date", "ship_date")
            .add_date_order_check("ship_date", "delivery_date")
        )
        checks.extend(shipping_validator.run_checks(_with_order_date(tables["shipping"], sales)))

    if "fees" in tables:
        checks.extend(
            DataValidator("fees")
            .add_unique_check(["channel", "country"])
            .add_range_check("fee_rate", min_value=0, max_value=1, severity=ValidationSeverity.WARNING)
            .run_checks(tables["fees"])
        )

    if "targets" in tables:
        checks.extend(
            DataValidator("targets")
            .add_unique_check(["salesperson", "month"])
            .add_positive_check("target_amount", allow_zero=True, severity=ValidationSeverity.WARNING)
            .run_checks(tables["targets"])
        )

    checks.extend(parse_error_checks(transform_results))

    result = ValidationResult.from_checks(checks, settings.validation.strict_mode, started_at)

    logger.info(
        "Star schema validated",
        status=result.status.value,
        passed=result.passed_checks,
        failed=result.failed_checks,
        warnings=result.warning_count,
    )

    return result
