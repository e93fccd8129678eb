"""
Data Quality Module
"""
from .validators import (
    CheckStatus,
    DataValidator,
    ValidationCheck,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    validate_star_schema,
)

__all__ = [
    "CheckStatus",
    "DataValidator",
    "ValidationCheck",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "validate_star_schema",
]
