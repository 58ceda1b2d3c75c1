"""
Collaborator contracts used by the validators, the generator and the services.

Every lookup returns ``None`` when the aggregate does not exist. Services
turn that into ``NotFoundError`` where the caller asked for something
specific.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from lessonplan.data.models import Schedule, ScheduleConfiguration, ScheduleEvent, SpecialDay


class LessonSource(Protocol):
    """Provides the ordered lesson sequence of a course."""

    def get_ordered_lessons(self, course_id: int) -> Optional[list[int]]:
        """
        Lesson ids of a course in teaching order, or None if the course is unknown.

        Order: topics by sort order; inside each topic its direct lessons
        first, then each subtopic's lessons, subtopics by sort order. Each
        group is ordered by the lesson sort order. Archived lessons are left out.
        """
        ...


class ConfigurationStore(Protocol):
    """Persistence of schedule configurations."""

    def load(self, config_id: int) -> Optional[ScheduleConfiguration]: ...

    def list_for_user(self, user_id: int) -> list[ScheduleConfiguration]: ...

    def get_active(self, user_id: int) -> Optional[ScheduleConfiguration]: ...

    def get_by_school_year(self, user_id: int, school_year: str) -> Optional[ScheduleConfiguration]: ...

    def list_templates(self, user_id: int) -> list[ScheduleConfiguration]: ...

    def save_replacing_assignments(self, configuration: ScheduleConfiguration) -> ScheduleConfiguration:
        """Insert or update, replacing the whole period assignment list."""
        ...

    def set_active_exclusive(self, user_id: int, config_id: int) -> ScheduleConfiguration:
        """Activate one configuration and deactivate all the user's others, atomically."""
        ...

    def delete(self, config_id: int) -> bool: ...


class EventSink(Protocol):
    """Receives generated events."""

    def replace_events(self, schedule_id: int, events: Sequence[ScheduleEvent]) -> Schedule:
        """Discard the schedule's events and store these instead."""
        ...


class ScheduleStore(EventSink, Protocol):
    """Persistence of generated schedules."""

    def load(self, schedule_id: int) -> Optional[Schedule]: ...

    def get_for_configuration(self, config_id: int) -> Optional[Schedule]: ...

    def create(self, schedule: Schedule) -> Schedule: ...

    def add_special_day(self, schedule_id: int, special_day: SpecialDay) -> SpecialDay: ...

    def update_special_day(self, schedule_id: int, special_day: SpecialDay) -> Optional[SpecialDay]:
        """Replace the stored special day with the same id; None if the schedule has none."""
        ...

    def delete_special_day(self, schedule_id: int, special_day_id: int) -> bool: ...

    def events_in_range(self, schedule_id: int, start_date: date, end_date: date) -> Optional[list[ScheduleEvent]]:
        """Events dated start_date..end_date inclusive, sorted by (date, period)."""
        ...

    def set_locked(self, schedule_id: int, locked: bool) -> Schedule: ...

    def delete(self, schedule_id: int) -> bool: ...
