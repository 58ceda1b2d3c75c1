"""Checks that a configuration is ready for schedule generation."""

from __future__ import annotations

from dataclasses import dataclass, field

from lessonplan.data.models import MAX_PERIODS_PER_DAY, ScheduleConfiguration
from lessonplan.store.interfaces import LessonSource


@dataclass
class ReadinessReport:
    """Outcome of a pre-generation check."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    total_periods_configured: int = 0
    course_assignments: int = 0
    special_period_assignments: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def can_generate(self) -> bool:
        return self.is_valid and self.course_assignments > 0

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "can_generate": self.can_generate,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "total_periods_configured": self.total_periods_configured,
            "course_assignments": self.course_assignments,
            "special_period_assignments": self.special_period_assignments,
        }


def check_generation_readiness(
    configuration: ScheduleConfiguration,
    lesson_source: LessonSource,
) -> ReadinessReport:
    """
    Check a configuration before generating a schedule from it.

    Errors block generation; warnings describe periods or courses that will
    produce error events or repeated lessons.

    Args:
        configuration: Configuration to check
        lesson_source: Used to count each assigned course's lessons

    Returns:
        ReadinessReport
    """
    report = ReadinessReport()
    assignments = configuration.period_assignments

    if configuration.start_date >= configuration.end_date:
        report.errors.append("Start date must be before end date")
    if not 1 <= configuration.periods_per_day <= MAX_PERIODS_PER_DAY:
        report.errors.append(f"Periods per day must be between 1 and {MAX_PERIODS_PER_DAY}")
    if not configuration.teaching_days:
        report.errors.append("At least one teaching day must be specified")
    if not assignments:
        report.errors.append("No period assignments configured")

    course_assignments = [a for a in assignments if a.is_course]
    report.total_periods_configured = len(assignments)
    report.course_assignments = len(course_assignments)
    report.special_period_assignments = len(assignments) - len(course_assignments)

    if not course_assignments:
        report.errors.append("No periods assigned to courses")

    for assignment in course_assignments:
        lessons = lesson_source.get_ordered_lessons(assignment.course_id)
        if lessons is None:
            report.errors.append(
                f"Course {assignment.course_id} (Period {assignment.period}) not found"
            )
        elif not lessons:
            report.warnings.append(
                f"Course {assignment.course_id} (Period {assignment.period}) has no lessons"
            )

    assigned = {a.period for a in assignments}
    missing = [p for p in range(1, configuration.periods_per_day + 1) if p not in assigned]
    if missing:
        report.warnings.append(
            f"No assignments for period(s): {', '.join(str(p) for p in missing)}"
        )

    uncovered = configuration.teaching_day_set - {
        d for a in assignments for d in a.weekdays()
    }
    if assignments and uncovered:
        names = ", ".join(d.value for d in sorted(uncovered, key=lambda d: d.number))
        report.warnings.append(f"No period is assigned on teaching day(s): {names}")

    return report
