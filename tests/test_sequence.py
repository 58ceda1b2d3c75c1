"""Tests for sequence analysis and continuation."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from lessonplan.data.models import EventCategory, ScheduleEvent
from lessonplan.scheduling.cycle import generate_lesson_events
from lessonplan.scheduling.sequence import SequencePosition, analyze_sequence, continue_sequence, resume_cycles


MONDAY = date(2024, 9, 2)
LESSONS = [10, 11, 12, 13]


@pytest.fixture
def events() -> list[ScheduleEvent]:
    """Two weeks of course 1 in period 2, plus a lunch event on every day."""
    lessons = generate_lesson_events(LESSONS, MONDAY, days=14, course_id=1, period=2)
    lunches = [
        ScheduleEvent(
            date=e.date, period=3, event_type="Lunch", event_category=EventCategory.SPECIAL_PERIOD,
        )
        for e in lessons
    ]
    return lessons + lunches


class TestSequencePosition:
    """Tests for SequencePosition."""

    def test_next_index_wraps(self):
        assert SequencePosition(period=1, course_id=1, total_lessons=3, last_index=2).next_index == 0

    def test_nothing_placed(self):
        position = SequencePosition(period=1, course_id=1, total_lessons=3)
        assert position.next_index == 0
        assert position.needs_continuation

    def test_empty_sequence(self):
        assert SequencePosition(period=1, course_id=1, total_lessons=0).next_index == 0

    def test_cycle(self):
        position = SequencePosition(period=1, course_id=1, total_lessons=3, last_index=0)
        assert position.cycle([5, 6, 7]).peek() == 6


class TestAnalyzeSequence:
    """Tests for analyze_sequence."""

    def test_last_lesson(self, events):
        position = analyze_sequence(events, LESSONS, period=2, course_id=1)
        # 10 teaching days over 4 lessons: last is index 1
        assert position.assigned_events == 10
        assert position.last_index == 1
        assert position.last_date == date(2024, 9, 13)
        assert position.next_index == 2

    def test_before(self, events):
        position = analyze_sequence(events, LESSONS, period=2, course_id=1, before=MONDAY + timedelta(days=2))
        assert position.assigned_events == 2
        assert position.last_index == 1

    def test_other_pair_ignored(self, events):
        position = analyze_sequence(events, LESSONS, period=1, course_id=1)
        assert position.last_index == -1
        assert position.last_date is None

    def test_removed_lessons_ignored(self, events):
        position = analyze_sequence(events, [10, 11], period=2, course_id=1)
        # Last events were 13 (removed) then 10, 11 on the final days
        assert position.last_index == 1
        assert position.last_date == date(2024, 9, 13)

    def test_all_lessons_placed(self, events):
        position = analyze_sequence(events, [10, 11], period=2, course_id=1, before=MONDAY + timedelta(days=2))
        assert not position.needs_continuation


class TestResumeCycles:
    """Tests for resume_cycles."""

    def test_cycles_positioned_per_pair(self, events):
        cycles = resume_cycles(events, {(2, 1): LESSONS, (1, 5): [50, 51]}, before=date(2024, 9, 9))
        # Week one placed 10, 11, 12, 13, 10
        assert cycles[(2, 1)].peek() == 11
        assert cycles[(1, 5)].peek() == 50

    def test_empty_sequence(self, events):
        cycles = resume_cycles(events, {(2, 1): []}, before=date(2024, 9, 9))
        assert cycles[(2, 1)].is_empty


class TestContinueSequence:
    """Tests for continue_sequence."""

    def test_resumes_after_last_lesson(self, events):
        wednesday = MONDAY + timedelta(days=2)
        result = continue_sequence(
            events, LESSONS, wednesday, MONDAY + timedelta(days=11), period=2, course_id=1,
        )
        period_two = [e for e in result if e.period == 2]
        assert [e.lesson_id for e in period_two] == [10, 11, 12, 13, 10, 11, 12, 13, 10, 11]

    def test_skip_dates(self, events):
        wednesday = MONDAY + timedelta(days=2)
        result = continue_sequence(
            events, LESSONS, wednesday, MONDAY + timedelta(days=4),
            period=2, course_id=1, skip_dates={wednesday},
        )
        period_two = [(e.date, e.lesson_id) for e in result if e.period == 2]
        assert period_two[2:] == [
            (MONDAY + timedelta(days=3), 12),
            (MONDAY + timedelta(days=4), 13),
        ]

    def test_other_events_kept(self, events):
        result = continue_sequence(
            events, LESSONS, MONDAY, MONDAY + timedelta(days=11), period=2, course_id=1,
        )
        assert len([e for e in result if e.period == 3]) == 10

    def test_sorted(self, events):
        result = continue_sequence(
            events, LESSONS, MONDAY + timedelta(days=7), MONDAY + timedelta(days=11), period=2, course_id=1,
        )
        assert result == sorted(result, key=lambda e: (e.date, e.period))
