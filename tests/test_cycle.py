"""Tests for lesson cycling over a calendar window."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from lessonplan.data.days import Weekday
from lessonplan.data.models import EventCategory
from lessonplan.scheduling.cycle import (
    LessonCycle,
    count_teaching_days,
    generate_lesson_events,
    iter_dates,
)


# 2024-09-02 is a Monday
MONDAY = date(2024, 9, 2)


class TestLessonCycle:
    """Tests for LessonCycle."""

    def test_take_wraps(self):
        cycle = LessonCycle([11, 12, 13])
        taken = [cycle.take() for _ in range(5)]
        assert taken == [(0, 11), (1, 12), (2, 13), (0, 11), (1, 12)]

    def test_start_index(self):
        cycle = LessonCycle([11, 12, 13], start_index=2)
        assert cycle.peek() == 13
        assert cycle.take() == (2, 13)
        assert cycle.take() == (0, 11)

    def test_start_index_wraps(self):
        assert LessonCycle([11, 12], start_index=5).peek() == 12

    def test_empty(self):
        cycle = LessonCycle([])
        assert cycle.is_empty
        assert len(cycle) == 0
        assert cycle.peek() is None
        with pytest.raises(IndexError):
            cycle.take()


class TestCalendarHelpers:
    """Tests for date iteration helpers."""

    def test_iter_dates_inclusive(self):
        dates = list(iter_dates(MONDAY, MONDAY + timedelta(days=2)))
        assert dates == [MONDAY, MONDAY + timedelta(days=1), MONDAY + timedelta(days=2)]

    def test_count_teaching_days(self):
        assert count_teaching_days(MONDAY, MONDAY + timedelta(days=13)) == 10
        assert count_teaching_days(MONDAY, MONDAY + timedelta(days=6), [Weekday.SATURDAY]) == 1


class TestGenerateLessonEvents:
    """Tests for generate_lesson_events."""

    def test_skips_weekends(self):
        events = generate_lesson_events([1, 2, 3], MONDAY, days=14)
        assert len(events) == 10
        assert all(Weekday.from_date(e.date) not in (Weekday.SATURDAY, Weekday.SUNDAY) for e in events)

    @pytest.mark.parametrize("start_offset,days,lesson_count", [
        (0, 14, 3),
        (3, 20, 4),
        (5, 9, 1),
        (6, 31, 7),
    ])
    def test_count_and_cycle(self, start_offset, days, lesson_count):
        start = MONDAY + timedelta(days=start_offset)
        lessons = list(range(100, 100 + lesson_count))
        events = generate_lesson_events(lessons, start, days=days)

        weekend_days = sum(
            1 for i in range(days) if (start + timedelta(days=i)).isoweekday() >= 6
        )
        assert len(events) == days - weekend_days
        assert [e.lesson_id for e in events] == [lessons[i % lesson_count] for i in range(len(events))]
        assert [e.schedule_sort for e in events] == [i % lesson_count for i in range(len(events))]

    def test_weekend_does_not_consume_lesson(self):
        friday = MONDAY + timedelta(days=4)
        events = generate_lesson_events([1, 2], friday, days=4)
        assert [(e.date, e.lesson_id) for e in events] == [
            (friday, 1),
            (friday + timedelta(days=3), 2),
        ]

    def test_empty_lessons(self):
        assert generate_lesson_events([], MONDAY, days=30) == []

    def test_non_positive_days(self):
        assert generate_lesson_events([1], MONDAY, days=0) == []
        assert generate_lesson_events([1], MONDAY, days=-3) == []

    def test_end_date(self):
        events = generate_lesson_events([1], MONDAY, end_date=MONDAY + timedelta(days=4))
        assert len(events) == 5

    def test_days_or_end_date_required(self):
        with pytest.raises(ValueError, match="exactly one of days or end_date"):
            generate_lesson_events([1], MONDAY)
        with pytest.raises(ValueError, match="exactly one of days or end_date"):
            generate_lesson_events([1], MONDAY, days=3, end_date=MONDAY)

    def test_skip_dates(self):
        tuesday = MONDAY + timedelta(days=1)
        events = generate_lesson_events([1, 2, 3], MONDAY, days=3, skip_dates={tuesday})
        assert [(e.date, e.lesson_id) for e in events] == [
            (MONDAY, 1),
            (MONDAY + timedelta(days=2), 2),
        ]

    def test_custom_teaching_days(self):
        events = generate_lesson_events(
            [1], MONDAY, days=7, teaching_days=[Weekday.SATURDAY, Weekday.SUNDAY],
        )
        assert [Weekday.from_date(e.date) for e in events] == [Weekday.SATURDAY, Weekday.SUNDAY]

    def test_event_fields(self):
        event = generate_lesson_events([42], MONDAY, days=1, course_id=7, period=3)[0]
        assert event.course_id == 7
        assert event.period == 3
        assert event.event_type == "Lesson"
        assert event.event_category == EventCategory.LESSON

    def test_start_index(self):
        events = generate_lesson_events([1, 2, 3], MONDAY, days=3, start_index=1)
        assert [e.lesson_id for e in events] == [2, 3, 1]
