"""
Schedule generation from a configuration.

Walks the configuration's date range day by day and, on each teaching
day, period by period. Every (date, period) slot gets exactly one event:

- a special day covering the slot -> SpecialDay event (no lesson used)
- one course assignment           -> Lesson event from that course's cycle
- one duty assignment             -> SpecialPeriod event
- nothing assigned                -> UnderflowError event
- several assignments             -> OverflowError event

Each (period, course) pair keeps its own lesson cycle, so a course taught
in two periods runs through its lessons independently in each.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from lessonplan.config import GenerationOptions
from lessonplan.data.days import Weekday
from lessonplan.data.models import (
    EventCategory,
    LESSON_EVENT_TYPE,
    OVERFLOW_ERROR,
    UNDERFLOW_ERROR,
    PeriodAssignment,
    ScheduleConfiguration,
    ScheduleEvent,
    SpecialDay,
)
from lessonplan.errors import NotFoundError
from lessonplan.scheduling.cycle import LessonCycle, iter_dates
from lessonplan.store.interfaces import LessonSource


logger = logging.getLogger(__name__)


@dataclass
class GenerationRun:
    """Events produced by one generation plus walk statistics."""
    events: list[ScheduleEvent] = field(default_factory=list)
    calendar_days: int = 0
    teaching_days: int = 0

    @property
    def events_by_period(self) -> dict[int, int]:
        return dict(sorted(Counter(e.period for e in self.events).items()))

    @property
    def events_by_type(self) -> dict[str, int]:
        return dict(Counter(e.event_type for e in self.events))

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.events if e.is_error)


class ScheduleGenerator:
    """
    Turns a validated configuration into schedule events.

    Usage:
        generator = ScheduleGenerator(curriculum_repo)
        run = generator.generate(configuration, special_days)
        schedule_store.replace_events(schedule_id, run.events)
    """

    def __init__(
        self,
        lesson_source: LessonSource,
        options: Optional[GenerationOptions] = None,
    ) -> None:
        self.lesson_source = lesson_source
        self.options = options or GenerationOptions()

    def generate(
        self,
        configuration: ScheduleConfiguration,
        special_days: Iterable[SpecialDay] = (),
        start_date: Optional[date] = None,
        cycles: Optional[dict[tuple[int, int], LessonCycle]] = None,
    ) -> GenerationRun:
        """
        Generate events for the configuration's whole date range.

        Every course is resolved before the walk starts, so a missing course
        fails the call without producing anything.

        Args:
            configuration: Configuration to generate from
            special_days: Special days that replace the periods they list
            start_date: Begin the walk here instead of at the configuration start
            cycles: Pre-positioned lesson cycles keyed by (period, course_id);
                missing pairs start at the first lesson

        Returns:
            GenerationRun with events sorted by (date, period)

        Raises:
            NotFoundError: If an assigned course does not exist
        """
        cycles = dict(cycles or {})
        for key, lesson_ids in self.resolve_lessons(configuration).items():
            cycles.setdefault(key, LessonCycle(lesson_ids))

        specials = list(special_days) if self.options.emit_special_days else []
        by_period: dict[int, list[PeriodAssignment]] = {
            p: configuration.assignments_for_period(p)
            for p in range(1, configuration.periods_per_day + 1)
        }

        run = GenerationRun()
        walk_start = max(start_date or configuration.start_date, configuration.start_date)
        for current in iter_dates(walk_start, configuration.end_date):
            run.calendar_days += 1
            if not configuration.is_teaching_day(current):
                continue
            run.teaching_days += 1
            weekday = Weekday.from_date(current)

            for period, assignments in by_period.items():
                event = self._event_for_slot(current, weekday, period, assignments, specials, cycles)
                if event is not None:
                    run.events.append(event)

        run.events.sort(key=lambda e: (e.date, e.period))
        logger.info(
            "Generated %d events across %d days (%d teaching days)",
            len(run.events), run.calendar_days, run.teaching_days,
        )
        for event_type, count in run.events_by_type.items():
            logger.debug("  %s: %d events", event_type, count)
        return run

    def resolve_lessons(self, configuration: ScheduleConfiguration) -> dict[tuple[int, int], list[int]]:
        """
        Ordered lessons for every (period, course) pair in the configuration.

        Raises:
            NotFoundError: If a course does not exist
        """
        resolved: dict[tuple[int, int], list[int]] = {}
        cache: dict[int, list[int]] = {}
        for assignment in configuration.period_assignments:
            course_id = assignment.course_id
            if course_id is None:
                continue
            if course_id not in cache:
                lessons = self.lesson_source.get_ordered_lessons(course_id)
                if lessons is None:
                    raise NotFoundError("Course", course_id)
                cache[course_id] = list(lessons)
                logger.debug("Course %s has %d lessons", course_id, len(lessons))
            resolved[(assignment.period, course_id)] = cache[course_id]
        return resolved

    # -------------------------------------------------------------------------
    # Slot resolution
    # -------------------------------------------------------------------------

    def _event_for_slot(
        self,
        current: date,
        weekday: Weekday,
        period: int,
        assignments: Sequence[PeriodAssignment],
        specials: Sequence[SpecialDay],
        cycles: dict[tuple[int, int], LessonCycle],
    ) -> Optional[ScheduleEvent]:
        special = next((s for s in specials if s.covers(current, period)), None)
        if special is not None:
            return special_day_event(current, period, special)

        covering = [a for a in assignments if a.covers(weekday)]
        if not covering:
            if not self.options.emit_unassigned_errors:
                return None
            return error_event(current, period, UNDERFLOW_ERROR, "Period not assigned")

        if len(covering) > 1:
            labels = ", ".join(a.label for a in covering)
            return error_event(current, period, OVERFLOW_ERROR, f"Multiple assignments: {labels}")

        assignment = covering[0]
        if assignment.duty is not None:
            return ScheduleEvent(
                date=current,
                period=period,
                event_type=assignment.duty.value,
                event_category=EventCategory.SPECIAL_PERIOD,
                title=assignment.duty.display_name,
                comment=assignment.notes,
            )

        cycle = cycles[(period, assignment.course_id)]
        if cycle.is_empty:
            return error_event(
                current, period, UNDERFLOW_ERROR,
                f"No lessons available for Course {assignment.course_id}",
                course_id=assignment.course_id,
            )
        index, lesson_id = cycle.take()
        return ScheduleEvent(
            date=current,
            period=period,
            course_id=assignment.course_id,
            lesson_id=lesson_id,
            event_type=LESSON_EVENT_TYPE,
            event_category=EventCategory.LESSON,
            schedule_sort=index,
        )


# =============================================================================
# Event Builders
# =============================================================================

def special_day_event(current: date, period: int, special: SpecialDay) -> ScheduleEvent:
    return ScheduleEvent(
        date=current,
        period=period,
        special_day_id=special.id,
        event_type=special.event_type.value,
        event_category=EventCategory.SPECIAL_DAY,
        title=special.title,
        comment=special.description or "",
    )


def error_event(
    current: date,
    period: int,
    sentinel: str,
    comment: str,
    course_id: Optional[int] = None,
) -> ScheduleEvent:
    """Error sentinel event. These have no category."""
    return ScheduleEvent(
        date=current,
        period=period,
        course_id=course_id,
        event_type=sentinel,
        event_category=None,
        comment=comment,
    )
