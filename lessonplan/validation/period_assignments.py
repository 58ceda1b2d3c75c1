"""
Period assignment validation.

Three passes, each callable on its own:

1. Format: every assignment has at least one known, non-duplicated day name
2. Conflicts: no two assignments of the same period share a day
3. Coverage: every period 1..periods_per_day covers every reference day

If the format pass reports anything, the other two are skipped; they assume
well-formed days and would only add noise. All messages are collected
rather than stopping at the first one.

Usage:
    result = validate_period_assignments(config.period_assignments, config.periods_per_day)
    if not result.is_valid:
        for error in result.errors:
            print(error)
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from lessonplan.config import ValidationOptions
from lessonplan.data.days import (
    Weekday,
    join_day_names,
    lookup_weekday,
    sort_weekdays,
    split_day_names,
    validate_teaching_days_subset,
)
from lessonplan.data.models import PeriodAssignment, ScheduleConfiguration
from lessonplan.validation.result import ValidationResult


# =============================================================================
# Full Validation
# =============================================================================

def validate_period_assignments(
    assignments: Sequence[PeriodAssignment],
    periods_per_day: int,
    reference_days: Optional[Iterable[Weekday]] = None,
) -> ValidationResult:
    """
    Run all three passes and collect every error.

    Args:
        assignments: Candidate period assignments
        periods_per_day: Number of periods that must be covered
        reference_days: Days every period must cover. Defaults to the union
            of all days named by the assignments.

    Returns:
        ValidationResult with all errors found
    """
    result = ValidationResult()

    format_result = validate_teaching_days_format(assignments)
    result.merge(format_result)
    if not format_result.is_valid:
        return result

    result.merge(validate_no_conflicts(assignments))
    result.merge(validate_complete_coverage(assignments, periods_per_day, reference_days))
    return result


# =============================================================================
# Individual Passes
# =============================================================================

def validate_teaching_days_format(assignments: Sequence[PeriodAssignment]) -> ValidationResult:
    """Check day names of every assignment."""
    result = ValidationResult()

    for assignment in assignments:
        if not assignment.teaching_days:
            result.add_error(f"Period {assignment.period}: TeachingDays cannot be empty")
            continue

        names = split_day_names(assignment.teaching_days)
        if not names:
            result.add_error(f"Period {assignment.period}: No valid teaching days found")
            continue

        invalid = [n for n in names if lookup_weekday(n) is None]
        if invalid:
            result.add_error(
                f"Period {assignment.period}: Invalid day names: {', '.join(invalid)}"
            )

        known = [lookup_weekday(n) for n in names if lookup_weekday(n) is not None]
        if len(known) != len(set(known)):
            result.add_error(f"Period {assignment.period}: Duplicate days found in TeachingDays")

    return result


def validate_no_conflicts(assignments: Sequence[PeriodAssignment]) -> ValidationResult:
    """Report any day claimed by more than one assignment of the same period."""
    result = ValidationResult()

    by_period: dict[int, list[PeriodAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_period[assignment.period].append(assignment)

    for period in sorted(by_period):
        period_assignments = by_period[period]
        if len(period_assignments) <= 1:
            continue

        by_day: dict[Weekday, list[PeriodAssignment]] = defaultdict(list)
        for assignment in period_assignments:
            for day in assignment.weekdays():
                by_day[day].append(assignment)

        for day in sort_weekdays(by_day):
            claimants = by_day[day]
            if len(claimants) > 1:
                labels = ", ".join(a.label for a in claimants)
                result.add_error(
                    f"Period {period} has conflicting assignments on {day.value}: {labels}"
                )

    return result


def validate_complete_coverage(
    assignments: Sequence[PeriodAssignment],
    periods_per_day: int,
    reference_days: Optional[Iterable[Weekday]] = None,
) -> ValidationResult:
    """
    Check that each period covers every reference day.

    A non-positive ``periods_per_day`` checks no periods.
    """
    result = ValidationResult()

    if reference_days is None:
        reference: set[Weekday] = set()
        for assignment in assignments:
            reference |= assignment.weekdays()
    else:
        reference = set(reference_days)

    if not reference:
        result.add_error("No teaching days found in period assignments")
        return result

    for period in range(1, periods_per_day + 1):
        period_assignments = [a for a in assignments if a.period == period]
        if not period_assignments:
            result.add_error(f"Period {period} has no assignments")
            continue

        covered: set[Weekday] = set()
        for assignment in period_assignments:
            covered |= assignment.weekdays()

        missing = reference - covered
        if missing:
            result.add_error(f"Period {period} missing coverage for: {join_day_names(missing)}")

    return result


# =============================================================================
# Configuration-Level Validation
# =============================================================================

def validate_assignment_subset(configuration: ScheduleConfiguration) -> ValidationResult:
    """Check every assignment only uses the configuration's teaching days."""
    result = ValidationResult()
    schedule_days = [d.value for d in configuration.teaching_days]

    for assignment in configuration.period_assignments:
        result.add_errors(
            validate_teaching_days_subset(
                schedule_days,
                assignment.teaching_days,
                f"Period {assignment.period} ({assignment.label})",
            )
        )
    return result


def validate_against_configuration(
    configuration: ScheduleConfiguration,
    options: Optional[ValidationOptions] = None,
) -> ValidationResult:
    """
    Validate a configuration's assignments in the context of the configuration.

    Adds to the three passes:
    - periods beyond ``periods_per_day``
    - days outside the configuration's teaching days (when ``check_subset``)
    - coverage against the configuration's own teaching days
      (when ``strict_coverage``)

    Args:
        configuration: Configuration to check
        options: Validation switches; defaults to ``ValidationOptions()``

    Returns:
        ValidationResult with all errors found
    """
    options = options or ValidationOptions()
    assignments = configuration.period_assignments

    reference = configuration.teaching_days if options.strict_coverage else None
    result = validate_period_assignments(assignments, configuration.periods_per_day, reference)

    for assignment in assignments:
        if assignment.period > configuration.periods_per_day:
            result.add_error(
                f"Period {assignment.period} exceeds periods per day "
                f"({configuration.periods_per_day})"
            )

    # Subset messages on malformed days would repeat the format errors
    if options.check_subset and not validate_teaching_days_format(assignments).errors:
        result.merge(validate_assignment_subset(configuration))

    return result
