"""Tests for the period assignment validator."""

from __future__ import annotations

from datetime import date

import pytest

from lessonplan.config import ValidationOptions
from lessonplan.data.days import Weekday
from lessonplan.data.models import (
    CourseTarget,
    DutyTarget,
    FixedPeriodType,
    PeriodAssignment,
    ScheduleConfiguration,
)
from lessonplan.validation import (
    ValidationResult,
    validate_against_configuration,
    validate_assignment_subset,
    validate_complete_coverage,
    validate_no_conflicts,
    validate_period_assignments,
    validate_teaching_days_format,
)


def course(period: int, course_id: int, days) -> PeriodAssignment:
    return PeriodAssignment(period=period, target=CourseTarget(course_id=course_id), teaching_days=days)


def duty(period: int, kind: FixedPeriodType, days="Monday,Tuesday,Wednesday,Thursday,Friday") -> PeriodAssignment:
    return PeriodAssignment(period=period, target=DutyTarget(duty=kind), teaching_days=days)


@pytest.fixture
def split_period_assignments() -> list[PeriodAssignment]:
    """Period 1 split between two courses, period 2 lunch every day."""
    return [
        course(1, 101, "Monday,Wednesday,Friday"),
        course(1, 102, "Tuesday,Thursday"),
        duty(2, FixedPeriodType.LUNCH),
    ]


@pytest.fixture
def configuration(split_period_assignments) -> ScheduleConfiguration:
    return ScheduleConfiguration(
        user_id=1,
        title="2024-2025",
        start_date=date(2024, 8, 26),
        end_date=date(2025, 6, 13),
        periods_per_day=2,
        period_assignments=split_period_assignments,
    )


class TestEndToEnd:
    """Scenarios over a complete two-period configuration."""

    def test_split_period_is_valid(self, split_period_assignments):
        result = validate_period_assignments(split_period_assignments, periods_per_day=2)
        assert result.is_valid
        assert result.errors == []

    def test_missing_thursday_reports_one_error(self, split_period_assignments):
        split_period_assignments[1] = course(1, 102, "Tuesday")
        result = validate_period_assignments(split_period_assignments, periods_per_day=2)
        assert result.errors == ["Period 1 missing coverage for: Thursday"]

    def test_configuration_level_is_valid(self, configuration):
        assert validate_against_configuration(configuration).is_valid


class TestFormatPass:
    """Tests for teaching day format checks."""

    def test_empty_list(self):
        result = validate_teaching_days_format([course(3, 1, [])])
        assert result.errors == ["Period 3: TeachingDays cannot be empty"]

    def test_missing_field_is_empty(self):
        """An assignment submitted without days is reported, not defaulted."""
        assignment = PeriodAssignment.model_validate({"period": 1, "target": {"kind": "course", "course_id": 1}})
        result = validate_period_assignments([assignment], periods_per_day=1)
        assert not result.is_valid
        assert result.errors == ["Period 1: TeachingDays cannot be empty"]

    def test_only_blanks(self):
        result = validate_teaching_days_format([course(2, 1, " , ")])
        assert result.errors == ["Period 2: No valid teaching days found"]

    def test_invalid_names(self):
        result = validate_teaching_days_format([course(1, 1, "Monday,Mon,Funday")])
        assert result.errors == ["Period 1: Invalid day names: Mon, Funday"]

    def test_duplicates_case_insensitive(self):
        result = validate_teaching_days_format([course(1, 1, "Monday,monday")])
        assert result.errors == ["Period 1: Duplicate days found in TeachingDays"]

    def test_all_assignments_reported(self):
        result = validate_teaching_days_format([
            course(1, 1, "Mon"),
            course(2, 2, "Tue"),
        ])
        assert len(result.errors) == 2

    def test_format_failure_skips_other_passes(self):
        assignments = [
            course(1, 1, "Monday,Tuesday"),
            course(1, 2, "Monday,Someday"),  # conflict on Monday, bad name
        ]
        result = validate_period_assignments(assignments, periods_per_day=3)
        assert result.errors == ["Period 1: Invalid day names: Someday"]
        assert not any("conflicting" in e or "coverage" in e or "no assignments" in e for e in result.errors)


class TestConflictPass:
    """Tests for per-day conflict detection."""

    def test_shared_day_named(self):
        result = validate_no_conflicts([
            course(1, 1, "Monday,Tuesday"),
            course(1, 2, "Tuesday,Wednesday"),
        ])
        assert result.errors == ["Period 1 has conflicting assignments on Tuesday: Course 1, Course 2"]

    def test_duty_label_in_conflict(self):
        result = validate_no_conflicts([
            course(2, 5, "Friday"),
            duty(2, FixedPeriodType.HALL_DUTY, "Friday"),
        ])
        assert result.errors == ["Period 2 has conflicting assignments on Friday: Course 5, HallDuty"]

    def test_days_in_canonical_order(self):
        result = validate_no_conflicts([
            course(1, 1, "Friday,Monday"),
            course(1, 2, "Monday,Friday"),
        ])
        assert [e.split(" on ")[1].split(":")[0] for e in result.errors] == ["Monday", "Friday"]

    def test_different_periods_do_not_conflict(self):
        result = validate_no_conflicts([course(1, 1, "Monday"), course(2, 2, "Monday")])
        assert result.is_valid


class TestCoveragePass:
    """Tests for coverage checks."""

    def test_reference_is_union_by_default(self):
        result = validate_complete_coverage(
            [course(1, 1, "Monday,Tuesday"), course(2, 2, "Monday")],
            periods_per_day=2,
        )
        assert result.errors == ["Period 2 missing coverage for: Tuesday"]

    def test_strict_subset_always_reported(self):
        # Period 1 covers a strict subset of the global union
        result = validate_complete_coverage(
            [course(1, 1, "Monday"), course(2, 2, "Monday,Wednesday,Friday")],
            periods_per_day=2,
        )
        assert any(e.startswith("Period 1 missing coverage") for e in result.errors)

    def test_missing_days_listed_canonically(self):
        result = validate_complete_coverage(
            [course(1, 1, "Wednesday"), course(2, 2, "Monday,Tuesday,Wednesday,Friday")],
            periods_per_day=2,
        )
        assert result.errors == ["Period 1 missing coverage for: Monday, Tuesday, Friday"]

    def test_unassigned_period(self):
        result = validate_complete_coverage([course(1, 1, "Monday")], periods_per_day=3)
        assert result.errors == ["Period 2 has no assignments", "Period 3 has no assignments"]

    def test_no_days_at_all(self):
        result = validate_complete_coverage([], periods_per_day=2)
        assert result.errors == ["No teaching days found in period assignments"]

    def test_explicit_reference_days(self):
        result = validate_complete_coverage(
            [course(1, 1, "Monday,Tuesday")],
            periods_per_day=1,
            reference_days=[Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY],
        )
        assert result.errors == ["Period 1 missing coverage for: Wednesday"]

    def test_zero_periods_checks_nothing(self):
        assert validate_complete_coverage([course(1, 1, "Monday")], periods_per_day=0).is_valid


class TestConfigurationValidation:
    """Tests for validation in the context of a configuration."""

    def test_subset_violation(self, configuration):
        configuration.teaching_days = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY]
        result = validate_assignment_subset(configuration)
        assert result.errors == [
            "Period 1 (Course 101) teaching days [Friday] are not enabled in the schedule. "
            "Schedule allows: [Monday, Tuesday, Wednesday, Thursday]",
            "Period 2 (Lunch) teaching days [Friday] are not enabled in the schedule. "
            "Schedule allows: [Monday, Tuesday, Wednesday, Thursday]",
        ]

    def test_subset_check_can_be_disabled(self, configuration):
        configuration.teaching_days = [Weekday.MONDAY]
        result = validate_against_configuration(configuration, ValidationOptions(check_subset=False))
        assert result.is_valid

    def test_period_beyond_periods_per_day(self, configuration):
        configuration.period_assignments.append(course(3, 103, "Monday,Tuesday,Wednesday,Thursday,Friday"))
        result = validate_against_configuration(configuration)
        assert "Period 3 exceeds periods per day (2)" in result.errors

    def test_strict_coverage_uses_configuration_days(self):
        config = ScheduleConfiguration(
            user_id=1,
            start_date=date(2024, 9, 2),
            end_date=date(2025, 6, 13),
            periods_per_day=1,
            period_assignments=[course(1, 1, "Monday,Tuesday,Wednesday,Thursday")],
        )
        assert validate_against_configuration(config).is_valid
        strict = validate_against_configuration(config, ValidationOptions(strict_coverage=True))
        assert strict.errors == ["Period 1 missing coverage for: Friday"]

    def test_no_subset_noise_on_format_errors(self, configuration):
        configuration.period_assignments[0] = course(1, 101, "Monday,Caturday")
        result = validate_against_configuration(configuration)
        assert result.errors == ["Period 1: Invalid day names: Caturday"]


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_merge_and_dict(self):
        first = ValidationResult()
        first.add_error("a")
        second = ValidationResult()
        second.add_warning("w")
        first.merge(second)
        assert first.to_dict() == {"is_valid": False, "errors": ["a"], "warnings": ["w"]}
