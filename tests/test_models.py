"""Tests for Pydantic models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from lessonplan.data.days import Weekday
from lessonplan.data.models import (
    CourseTarget,
    Curriculum,
    DutyTarget,
    EventCategory,
    FixedPeriodType,
    Lesson,
    Note,
    PeriodAssignment,
    ScheduleConfiguration,
    ScheduleEvent,
    SpecialDay,
    SpecialDayType,
    is_valid_event_type,
)


WEEKDAYS = "Monday,Tuesday,Wednesday,Thursday,Friday"


def make_config(**overrides) -> ScheduleConfiguration:
    data = {
        "user_id": 1,
        "title": "Test",
        "start_date": date(2024, 9, 2),
        "end_date": date(2025, 6, 13),
    }
    data.update(overrides)
    return ScheduleConfiguration(**data)


class TestFixedPeriodType:
    """Tests for duty sentinels and display names."""

    def test_sentinel_ids(self):
        assert FixedPeriodType.LUNCH.sentinel_id == -1
        assert FixedPeriodType.HALL_DUTY.sentinel_id == -2
        assert FixedPeriodType.CAFETERIA_DUTY.sentinel_id == -3
        assert FixedPeriodType.STUDY_HALL.sentinel_id == -4
        assert FixedPeriodType.PREP.sentinel_id == -5
        assert FixedPeriodType.OTHER_DUTY.sentinel_id == -6

    def test_from_sentinel_id(self):
        assert FixedPeriodType.from_sentinel_id(-5) == FixedPeriodType.PREP

    def test_unknown_sentinel(self):
        with pytest.raises(ValueError, match="Unknown special period id: -9"):
            FixedPeriodType.from_sentinel_id(-9)

    def test_display_names(self):
        assert FixedPeriodType.PREP.display_name == "Teacher Prep"
        assert FixedPeriodType.HALL_DUTY.display_name == "Hall Duty"


class TestPeriodAssignment:
    """Tests for PeriodAssignment."""

    def test_course_target(self):
        assignment = PeriodAssignment(period=1, target=CourseTarget(course_id=7), teaching_days=WEEKDAYS)
        assert assignment.is_course
        assert assignment.course_id == 7
        assert assignment.duty is None
        assert assignment.label == "Course 7"
        assert assignment.teaching_days == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

    def test_teaching_days_default_empty(self):
        assignment = PeriodAssignment.model_validate({"period": 1, "target": {"kind": "course", "course_id": 1}})
        assert assignment.teaching_days == []
        assert assignment.weekdays() == frozenset()

    def test_duty_target(self):
        assignment = PeriodAssignment(period=4, target=DutyTarget(duty=FixedPeriodType.LUNCH))
        assert not assignment.is_course
        assert assignment.course_id is None
        assert assignment.label == "Lunch"
        assert assignment.legacy_course_id == -1

    def test_target_from_dict(self):
        assignment = PeriodAssignment.model_validate(
            {"period": 2, "target": {"kind": "duty", "duty": "StudyHall"}}
        )
        assert assignment.duty == FixedPeriodType.STUDY_HALL

    def test_legacy_course_id(self):
        assignment = PeriodAssignment.model_validate({"period": 1, "course_id": 12})
        assert assignment.course_id == 12

    def test_legacy_negative_course_id(self):
        assignment = PeriodAssignment.model_validate({"period": 1, "course_id": -2})
        assert assignment.duty == FixedPeriodType.HALL_DUTY

    def test_legacy_special_period_type(self):
        assignment = PeriodAssignment.model_validate({"period": 1, "special_period_type": "Prep"})
        assert assignment.duty == FixedPeriodType.PREP

    def test_both_course_and_special_rejected(self):
        with pytest.raises(ValidationError, match="both a course and a special period type"):
            PeriodAssignment.model_validate({"period": 1, "course_id": 3, "special_period_type": "Lunch"})

    def test_comma_string_days(self):
        assignment = PeriodAssignment(
            period=1, target=CourseTarget(course_id=1), teaching_days="Monday,Wednesday"
        )
        assert assignment.weekdays() == frozenset({Weekday.MONDAY, Weekday.WEDNESDAY})

    def test_weekdays_skip_unknown_names(self):
        assignment = PeriodAssignment(
            period=1, target=CourseTarget(course_id=1), teaching_days=["monday", "Blursday"]
        )
        assert assignment.weekdays() == frozenset({Weekday.MONDAY})
        assert assignment.covers(Weekday.MONDAY)
        assert not assignment.covers(Weekday.TUESDAY)

    def test_period_out_of_range(self):
        with pytest.raises(ValidationError):
            PeriodAssignment(period=11, target=CourseTarget(course_id=1))

    def test_invalid_color(self):
        with pytest.raises(ValidationError):
            PeriodAssignment(period=1, target=CourseTarget(course_id=1), background_color="blue")


class TestScheduleConfiguration:
    """Tests for ScheduleConfiguration."""

    def test_defaults(self):
        config = make_config()
        assert config.periods_per_day == 6
        assert config.teaching_days == list(Weekday)[:5]
        assert config.is_active is False

    def test_school_year_derived(self):
        assert make_config().school_year == "2024-2025"

    def test_submitted_school_year_ignored(self):
        config = ScheduleConfiguration.model_validate({
            "user_id": 1,
            "start_date": "2024-09-02",
            "end_date": "2024-12-20",
            "school_year": "Whatever",
        })
        assert config.school_year == "Fall Semester 2024"

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError, match="must be before end_date"):
            make_config(start_date=date(2025, 1, 1), end_date=date(2025, 1, 1))

    def test_periods_per_day_bounds(self):
        with pytest.raises(ValidationError):
            make_config(periods_per_day=0)
        with pytest.raises(ValidationError):
            make_config(periods_per_day=11)

    def test_teaching_days_parsed(self):
        config = make_config(teaching_days="friday, monday")
        assert config.teaching_days == [Weekday.MONDAY, Weekday.FRIDAY]

    def test_teaching_days_invalid(self):
        with pytest.raises(ValidationError, match="Invalid day names"):
            make_config(teaching_days="Monday,Someday")

    def test_teaching_days_required(self):
        with pytest.raises(ValidationError):
            make_config(teaching_days=[])

    def test_is_teaching_day(self):
        config = make_config()
        assert config.is_teaching_day(date(2024, 9, 2))
        assert not config.is_teaching_day(date(2024, 9, 7))

    def test_is_complete(self):
        config = make_config(
            periods_per_day=2,
            period_assignments=[
                PeriodAssignment(period=1, target=CourseTarget(course_id=1), teaching_days="Monday,Wednesday,Friday"),
                PeriodAssignment(period=1, target=CourseTarget(course_id=2), teaching_days="Tuesday,Thursday"),
                PeriodAssignment(period=2, target=DutyTarget(duty=FixedPeriodType.LUNCH), teaching_days=WEEKDAYS),
            ],
        )
        assert config.is_complete()
        assert config.course_ids() == [1, 2]

    def test_is_not_complete(self):
        config = make_config(
            periods_per_day=2,
            period_assignments=[PeriodAssignment(period=1, target=CourseTarget(course_id=1), teaching_days=WEEKDAYS)],
        )
        assert not config.is_complete()

    def test_overlaps(self):
        a = make_config(start_date=date(2024, 9, 1), end_date=date(2024, 12, 20))
        b = make_config(start_date=date(2024, 12, 20), end_date=date(2025, 5, 1))
        c = make_config(start_date=date(2025, 1, 6), end_date=date(2025, 5, 1))
        assert a.overlaps(b)
        assert not a.overlaps(c)


class TestCurriculum:
    """Tests for curriculum models."""

    def test_lesson_needs_exactly_one_parent(self):
        with pytest.raises(ValidationError, match="exactly one of a topic or a subtopic"):
            Lesson(id=1, title="Orphan")
        with pytest.raises(ValidationError, match="exactly one of a topic or a subtopic"):
            Lesson(id=1, title="Twins", topic_id=1, sub_topic_id=1)

    def test_note_needs_exactly_one_parent(self):
        with pytest.raises(ValidationError, match="exactly one entity"):
            Note(id=1, content="x", course_id=1, lesson_id=2)

    def test_reference_validation(self):
        with pytest.raises(ValidationError) as exc_info:
            Curriculum.model_validate({
                "courses": [{"id": 1, "title": "Algebra I"}],
                "topics": [{"id": 1, "course_id": 2, "title": "Linear Equations"}],
                "lessons": [
                    {"id": 1, "title": "Intro", "topic_id": 1},
                    {"id": 1, "title": "Again", "topic_id": 1},
                ],
            })
        message = str(exc_info.value)
        assert "Topic 1: unknown course_id 2" in message
        assert "Duplicate lesson ID: 1" in message

    def test_summary(self):
        curriculum = Curriculum.model_validate({
            "courses": [{"id": 1, "title": "Algebra I"}],
            "topics": [{"id": 1, "course_id": 1, "title": "Linear Equations"}],
            "lessons": [{"id": 1, "title": "Intro", "topic_id": 1}],
        })
        assert curriculum.summary()["lessons"] == 1


class TestScheduleEvent:
    """Tests for event type/category consistency."""

    def test_lesson_event(self):
        event = ScheduleEvent(
            date=date(2024, 9, 2), period=1, lesson_id=5, course_id=1,
            event_type="Lesson", event_category=EventCategory.LESSON,
        )
        assert event.is_lesson
        assert not event.is_error

    def test_error_event_has_no_category(self):
        event = ScheduleEvent(date=date(2024, 9, 2), period=1, event_type="UnderflowError")
        assert event.is_error

    def test_mismatched_type_rejected(self):
        with pytest.raises(ValidationError, match="Invalid event type 'Lunch' for category 'Lesson'"):
            ScheduleEvent(
                date=date(2024, 9, 2), period=1,
                event_type="Lunch", event_category=EventCategory.LESSON,
            )

    @pytest.mark.parametrize("event_type,category,expected", [
        ("Lesson", EventCategory.LESSON, True),
        ("Prep", EventCategory.SPECIAL_PERIOD, True),
        ("Assembly", EventCategory.SPECIAL_DAY, True),
        ("OverflowError", None, True),
        ("Assembly", EventCategory.SPECIAL_PERIOD, False),
        ("Lesson", None, False),
    ])
    def test_is_valid_event_type(self, event_type, category, expected):
        assert is_valid_event_type(event_type, category) is expected


class TestSpecialDay:
    """Tests for SpecialDay."""

    def test_covers(self):
        special = SpecialDay(
            date=date(2024, 10, 4), periods=[1, 2], event_type=SpecialDayType.ASSEMBLY, title="Pep Rally",
        )
        assert special.covers(date(2024, 10, 4), 2)
        assert not special.covers(date(2024, 10, 4), 3)
        assert not special.covers(date(2024, 10, 5), 1)

    def test_periods_required(self):
        with pytest.raises(ValidationError):
            SpecialDay(date=date(2024, 10, 4), periods=[], event_type=SpecialDayType.HOLIDAY, title="Off")
