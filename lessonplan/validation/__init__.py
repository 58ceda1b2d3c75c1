"""Validation of period assignments and configurations."""

from .result import ValidationResult
from .period_assignments import (
    validate_period_assignments,
    validate_teaching_days_format,
    validate_no_conflicts,
    validate_complete_coverage,
    validate_assignment_subset,
    validate_against_configuration,
)
from .readiness import ReadinessReport, check_generation_readiness

__all__ = [
    "ValidationResult",
    "validate_period_assignments",
    "validate_teaching_days_format",
    "validate_no_conflicts",
    "validate_complete_coverage",
    "validate_assignment_subset",
    "validate_against_configuration",
    "ReadinessReport",
    "check_generation_readiness",
]
