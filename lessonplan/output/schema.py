"""
Output schema for generated schedules.

This module defines the JSON-serializable output format for a schedule,
including summary counts and pre-computed views by date and by period.
"""

from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Any, Optional

from pydantic import BaseModel, Field

from lessonplan.data.days import Weekday
from lessonplan.data.models import Schedule, ScheduleConfiguration, ScheduleEvent


# =============================================================================
# Event Output
# =============================================================================

class EventOutput(BaseModel):
    """A single schedule event in the output."""
    date: dt.date
    day_name: str = Field(alias="dayName")
    period: int
    event_type: str = Field(alias="eventType")
    event_category: Optional[str] = Field(default=None, alias="eventCategory")
    is_error: bool = Field(default=False, alias="isError")
    schedule_sort: int = Field(default=0, alias="scheduleSort")

    course_id: Optional[int] = Field(default=None, alias="courseId")
    lesson_id: Optional[int] = Field(default=None, alias="lessonId")
    special_day_id: Optional[int] = Field(default=None, alias="specialDayId")
    title: Optional[str] = None
    comment: Optional[str] = None

    # Optional enriched data
    course_title: Optional[str] = Field(default=None, alias="courseTitle")
    lesson_title: Optional[str] = Field(default=None, alias="lessonTitle")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_event(
        cls,
        event: ScheduleEvent,
        course_titles: dict[int, str] | None = None,
        lesson_titles: dict[int, str] | None = None,
    ) -> EventOutput:
        """Create from a ScheduleEvent."""
        course_titles = course_titles or {}
        lesson_titles = lesson_titles or {}
        return cls(
            date=event.date,
            dayName=Weekday.from_date(event.date).value,
            period=event.period,
            eventType=event.event_type,
            eventCategory=event.event_category.value if event.event_category else None,
            isError=event.is_error,
            scheduleSort=event.schedule_sort,
            courseId=event.course_id,
            lessonId=event.lesson_id,
            specialDayId=event.special_day_id,
            title=event.title or lesson_titles.get(event.lesson_id),
            comment=event.comment,
            courseTitle=course_titles.get(event.course_id),
            lessonTitle=lesson_titles.get(event.lesson_id),
        )

    @property
    def display(self) -> str:
        """Short cell text for tables."""
        if self.is_error:
            return self.event_type
        return self.lesson_title or self.title or self.event_type


# =============================================================================
# Summary
# =============================================================================

class ScheduleSummary(BaseModel):
    """Counts over the generated events."""
    total_events: int = Field(alias="totalEvents")
    lesson_events: int = Field(alias="lessonEvents")
    special_period_events: int = Field(alias="specialPeriodEvents")
    special_day_events: int = Field(alias="specialDayEvents")
    error_events: int = Field(alias="errorEvents")
    teaching_days: int = Field(alias="teachingDays")
    events_by_period: dict[int, int] = Field(default_factory=dict, alias="eventsByPeriod")
    events_by_type: dict[str, int] = Field(default_factory=dict, alias="eventsByType")

    model_config = {"populate_by_name": True}


# =============================================================================
# Views
# =============================================================================

class DateSchedule(BaseModel):
    """All events of one date, by period."""
    date: dt.date
    day_name: str = Field(alias="dayName")
    events: list[EventOutput]

    model_config = {"populate_by_name": True}


class PeriodSchedule(BaseModel):
    """All events of one period, by date."""
    period: int
    events: list[EventOutput]

    model_config = {"populate_by_name": True}


class ScheduleViews(BaseModel):
    """Pre-computed views of the schedule for convenience."""
    by_date: dict[str, DateSchedule] = Field(default_factory=dict, alias="byDate")
    by_period: dict[int, PeriodSchedule] = Field(default_factory=dict, alias="byPeriod")

    model_config = {"populate_by_name": True}


# =============================================================================
# Complete Output
# =============================================================================

class ScheduleOutput(BaseModel):
    """Complete output for a generated schedule."""
    title: str
    school_year: str = Field(alias="schoolYear")
    configuration_id: Optional[int] = Field(default=None, alias="configurationId")
    schedule_id: Optional[int] = Field(default=None, alias="scheduleId")
    start_date: dt.date = Field(alias="startDate")
    end_date: dt.date = Field(alias="endDate")
    periods_per_day: int = Field(alias="periodsPerDay")
    summary: ScheduleSummary
    events: list[EventOutput]
    views: ScheduleViews

    model_config = {"populate_by_name": True}

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(by_alias=True, indent=indent)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(by_alias=True, mode="json")

    @property
    def dates(self) -> list[dt.date]:
        return sorted(day.date for day in self.views.by_date.values())


# =============================================================================
# Conversion Functions
# =============================================================================

def create_schedule_output(
    schedule: Schedule,
    configuration: ScheduleConfiguration,
    course_titles: dict[int, str] | None = None,
    lesson_titles: dict[int, str] | None = None,
) -> ScheduleOutput:
    """
    Create a ScheduleOutput from a stored schedule.

    Args:
        schedule: The generated schedule
        configuration: The configuration it was generated from
        course_titles: Optional mapping of course_id to title
        lesson_titles: Optional mapping of lesson_id to title

    Returns:
        ScheduleOutput with summary and views populated
    """
    events = [
        EventOutput.from_event(e, course_titles, lesson_titles)
        for e in sorted(schedule.events, key=lambda e: (e.date, e.period))
    ]
    return ScheduleOutput(
        title=schedule.title or configuration.title,
        schoolYear=configuration.school_year,
        configurationId=configuration.id,
        scheduleId=schedule.id,
        startDate=configuration.start_date,
        endDate=configuration.end_date,
        periodsPerDay=configuration.periods_per_day,
        summary=_create_summary(events),
        events=events,
        views=_create_views(events),
    )


def _create_summary(events: list[EventOutput]) -> ScheduleSummary:
    by_category = Counter(e.event_category for e in events)
    return ScheduleSummary(
        totalEvents=len(events),
        lessonEvents=by_category["Lesson"],
        specialPeriodEvents=by_category["SpecialPeriod"],
        specialDayEvents=by_category["SpecialDay"],
        errorEvents=sum(1 for e in events if e.is_error),
        teachingDays=len({e.date for e in events}),
        eventsByPeriod=dict(sorted(Counter(e.period for e in events).items())),
        eventsByType=dict(Counter(e.event_type for e in events)),
    )


def _create_views(events: list[EventOutput]) -> ScheduleViews:
    """Group events by date and by period. Input is already sorted."""
    by_date: dict[str, DateSchedule] = {}
    by_period: dict[int, PeriodSchedule] = {}

    for event in events:
        key = event.date.isoformat()
        if key not in by_date:
            by_date[key] = DateSchedule(date=event.date, dayName=event.day_name, events=[])
        by_date[key].events.append(event)

        if event.period not in by_period:
            by_period[event.period] = PeriodSchedule(period=event.period, events=[])
        by_period[event.period].events.append(event)

    return ScheduleViews(byDate=by_date, byPeriod=dict(sorted(by_period.items())))


# =============================================================================
# Convenience Functions
# =============================================================================

def schedule_to_json(
    schedule: Schedule,
    configuration: ScheduleConfiguration,
    course_titles: dict[int, str] | None = None,
    lesson_titles: dict[int, str] | None = None,
    indent: int = 2,
) -> str:
    """Convert a schedule directly to a JSON string."""
    output = create_schedule_output(schedule, configuration, course_titles, lesson_titles)
    return output.to_json(indent=indent)
