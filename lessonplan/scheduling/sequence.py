"""
Sequence analysis and continuation.

Continuation regenerates lessons from a given date forward, resuming at the
lesson after the last one placed before that date instead of restarting at
the first lesson. ``resume_cycles`` positions every (period, course) pair of
a configuration and feeds ``ScheduleGenerator``; ``continue_sequence`` works
on a single pair and leaves every other event alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Collection, Iterable, Mapping, Optional, Sequence

from lessonplan.data.days import DEFAULT_TEACHING_DAYS, Weekday
from lessonplan.data.models import ScheduleEvent
from lessonplan.scheduling.cycle import LessonCycle, generate_lesson_events


@dataclass
class SequencePosition:
    """Where a (period, course) pair stands in its lesson sequence."""
    period: int
    course_id: int
    total_lessons: int
    last_index: int = -1
    last_date: Optional[date] = None
    assigned_events: int = 0

    @property
    def next_index(self) -> int:
        """Index of the next lesson to place, wrapping after the last one."""
        if self.total_lessons == 0:
            return 0
        return (self.last_index + 1) % self.total_lessons

    @property
    def needs_continuation(self) -> bool:
        return self.last_index < self.total_lessons - 1

    def cycle(self, lesson_ids: Sequence[int]) -> LessonCycle:
        return LessonCycle(lesson_ids, self.next_index)


def analyze_sequence(
    events: Iterable[ScheduleEvent],
    lesson_ids: Sequence[int],
    period: int,
    course_id: int,
    before: Optional[date] = None,
) -> SequencePosition:
    """
    Find the last lesson placed for a (period, course) pair.

    Args:
        events: Existing schedule events
        lesson_ids: The course's current lesson order
        period: Period to look at
        course_id: Course to look at
        before: Only consider events strictly before this date

    Returns:
        SequencePosition; ``last_index`` is -1 when nothing was placed.
        Events whose lesson is no longer in the sequence are ignored.
    """
    positions = {lesson_id: i for i, lesson_id in enumerate(lesson_ids)}
    position = SequencePosition(period=period, course_id=course_id, total_lessons=len(lesson_ids))

    relevant = sorted(
        (
            e for e in events
            if e.is_lesson and e.period == period and e.course_id == course_id
            and (before is None or e.date < before)
        ),
        key=lambda e: e.date,
    )
    for event in relevant:
        if event.lesson_id not in positions:
            continue
        position.assigned_events += 1
        position.last_index = positions[event.lesson_id]
        position.last_date = event.date
    return position


def resume_cycles(
    events: Sequence[ScheduleEvent],
    lessons: Mapping[tuple[int, int], Sequence[int]],
    before: date,
) -> dict[tuple[int, int], LessonCycle]:
    """Lesson cycles keyed by (period, course_id), each positioned after its last lesson before ``before``."""
    return {
        key: analyze_sequence(events, lesson_ids, *key, before=before).cycle(lesson_ids)
        for key, lesson_ids in lessons.items()
    }


def continue_sequence(
    events: Sequence[ScheduleEvent],
    lesson_ids: Sequence[int],
    from_date: date,
    end_date: date,
    *,
    period: int,
    course_id: int,
    teaching_days: Iterable[Weekday] = DEFAULT_TEACHING_DAYS,
    skip_dates: Collection[date] = (),
) -> list[ScheduleEvent]:
    """
    Regenerate one course's lessons in one period from ``from_date`` on.

    Only the (period, course) pair is touched. Lesson events of the pair on
    or after ``from_date`` are replaced; every other event is kept, and dates
    where the period already holds a kept event (a duty, a special day or
    another course) are skipped. Use ``ScheduleService.continue_schedule``
    to regenerate a whole configuration.

    Returns:
        The full new event list sorted by (date, period)
    """
    def replaced(event: ScheduleEvent) -> bool:
        return (
            event.is_lesson and event.period == period and event.course_id == course_id
            and event.date >= from_date
        )

    kept = [e for e in events if not replaced(e)]
    occupied = {e.date for e in kept if e.period == period and e.date >= from_date}

    position = analyze_sequence(events, lesson_ids, period, course_id, before=from_date)
    continuation = generate_lesson_events(
        lesson_ids,
        from_date,
        end_date=end_date,
        teaching_days=teaching_days,
        skip_dates=occupied | set(skip_dates),
        course_id=course_id,
        period=period,
        start_index=position.next_index,
    )
    return sorted(kept + continuation, key=lambda e: (e.date, e.period))
