"""
Lesson cycling and the calendar walk.

The cycle only advances when a lesson is actually placed; skipped dates
use up a calendar offset but not a lesson. After the last lesson the cycle
restarts at the first one.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Collection, Iterable, Iterator, Optional, Sequence

from lessonplan.data.days import DEFAULT_TEACHING_DAYS, Weekday
from lessonplan.data.models import EventCategory, LESSON_EVENT_TYPE, ScheduleEvent


class LessonCycle:
    """
    Wrap-around cursor over an ordered lesson sequence.

    Usage:
        cycle = LessonCycle([11, 12, 13])
        cycle.take()  # (0, 11)
        cycle.take()  # (1, 12)
    """

    def __init__(self, lesson_ids: Sequence[int], start_index: int = 0) -> None:
        self.lesson_ids = list(lesson_ids)
        self.index = start_index % len(self.lesson_ids) if self.lesson_ids else 0

    @property
    def is_empty(self) -> bool:
        return not self.lesson_ids

    def __len__(self) -> int:
        return len(self.lesson_ids)

    def peek(self) -> Optional[int]:
        return self.lesson_ids[self.index] if self.lesson_ids else None

    def take(self) -> tuple[int, int]:
        """
        Return ``(index, lesson_id)`` and move to the next lesson.

        Raises:
            IndexError: If the cycle has no lessons
        """
        if not self.lesson_ids:
            raise IndexError("Lesson cycle is empty")
        index = self.index
        lesson_id = self.lesson_ids[index]
        self.index = (index + 1) % len(self.lesson_ids)
        return index, lesson_id


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Every calendar date from start to end, inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def count_teaching_days(
    start_date: date,
    end_date: date,
    teaching_days: Iterable[Weekday] = DEFAULT_TEACHING_DAYS,
) -> int:
    days = frozenset(teaching_days)
    return sum(1 for d in iter_dates(start_date, end_date) if Weekday.from_date(d) in days)


def generate_lesson_events(
    lesson_ids: Sequence[int],
    start_date: date,
    *,
    days: Optional[int] = None,
    end_date: Optional[date] = None,
    teaching_days: Iterable[Weekday] = DEFAULT_TEACHING_DAYS,
    skip_dates: Collection[date] = (),
    course_id: Optional[int] = None,
    period: int = 1,
    start_index: int = 0,
) -> list[ScheduleEvent]:
    """
    Place one lesson per teaching day, cycling through the sequence.

    Exactly one of ``days`` (number of calendar offsets, starting at 0) or
    ``end_date`` (inclusive) must be given.

    Args:
        lesson_ids: Ordered lesson ids; may be empty
        start_date: First calendar date
        days: Number of calendar days to walk
        end_date: Last calendar date to walk
        teaching_days: Weekdays that receive lessons (default Monday-Friday)
        skip_dates: Extra dates that receive nothing
        course_id: Stored on each event
        period: Stored on each event
        start_index: Position in the sequence of the first lesson placed

    Returns:
        Lesson events in date order; empty if there are no lessons

    Raises:
        ValueError: If both or neither of ``days`` and ``end_date`` are given
    """
    if (days is None) == (end_date is None):
        raise ValueError("Specify exactly one of days or end_date")
    if days is not None:
        if days <= 0:
            return []
        end_date = start_date + timedelta(days=days - 1)

    cycle = LessonCycle(lesson_ids, start_index)
    if cycle.is_empty:
        return []

    allowed = frozenset(teaching_days)
    skipped = set(skip_dates)
    events: list[ScheduleEvent] = []
    for current in iter_dates(start_date, end_date):
        if Weekday.from_date(current) not in allowed or current in skipped:
            continue
        index, lesson_id = cycle.take()
        events.append(
            ScheduleEvent(
                date=current,
                period=period,
                course_id=course_id,
                lesson_id=lesson_id,
                event_type=LESSON_EVENT_TYPE,
                event_category=EventCategory.LESSON,
                schedule_sort=index,
            )
        )
    return events
