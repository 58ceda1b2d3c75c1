"""
In-memory repositories.

These implement the collaborator contracts in ``lessonplan.store.interfaces``
with plain dicts guarded by a lock. Stored models are deep copies, so
callers never share mutable state with the store.

Deletes are explicit routines: removing a course removes its topics,
subtopics, lessons, standards, notes and lesson-standard rows, deepest
first.
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from lessonplan.data.models import (
    Course,
    Curriculum,
    Lesson,
    LessonStandard,
    Note,
    Schedule,
    ScheduleConfiguration,
    ScheduleEvent,
    SpecialDay,
    Standard,
    SubTopic,
    Topic,
)
from lessonplan.errors import ConfigurationConflictError, NotFoundError


logger = logging.getLogger(__name__)


# =============================================================================
# Curriculum
# =============================================================================

class CurriculumRepository:
    """
    Course -> Topic -> SubTopic -> Lesson store.

    Also acts as the ``LessonSource`` for the generator.

    Usage:
        repo = CurriculumRepository.from_curriculum(curriculum)
        lesson_ids = repo.get_ordered_lessons(course_id=1)
        repo.delete_course(1)
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.courses: dict[int, Course] = {}
        self.topics: dict[int, Topic] = {}
        self.sub_topics: dict[int, SubTopic] = {}
        self.lessons: dict[int, Lesson] = {}
        self.standards: dict[int, Standard] = {}
        self.notes: dict[int, Note] = {}
        self.lesson_standards: set[LessonStandard] = set()

    @classmethod
    def from_curriculum(cls, curriculum: Curriculum) -> CurriculumRepository:
        repo = cls()
        for course in curriculum.courses:
            repo.add_course(course)
        for topic in curriculum.topics:
            repo.add_topic(topic)
        for sub_topic in curriculum.sub_topics:
            repo.add_sub_topic(sub_topic)
        for lesson in curriculum.lessons:
            repo.add_lesson(lesson)
        for standard in curriculum.standards:
            repo.add_standard(standard)
        for link in curriculum.lesson_standards:
            repo.link_standard(link.lesson_id, link.standard_id)
        for note in curriculum.notes:
            repo.add_note(note)
        return repo

    # -------------------------------------------------------------------------
    # Adding
    # -------------------------------------------------------------------------

    def add_course(self, course: Course) -> Course:
        with self._lock:
            self.courses[course.id] = course.model_copy(deep=True)
            return course

    def add_topic(self, topic: Topic) -> Topic:
        with self._lock:
            if topic.course_id not in self.courses:
                raise NotFoundError("Course", topic.course_id)
            self.topics[topic.id] = topic.model_copy(deep=True)
            return topic

    def add_sub_topic(self, sub_topic: SubTopic) -> SubTopic:
        with self._lock:
            if sub_topic.topic_id not in self.topics:
                raise NotFoundError("Topic", sub_topic.topic_id)
            self.sub_topics[sub_topic.id] = sub_topic.model_copy(deep=True)
            return sub_topic

    def add_lesson(self, lesson: Lesson) -> Lesson:
        with self._lock:
            if lesson.topic_id is not None and lesson.topic_id not in self.topics:
                raise NotFoundError("Topic", lesson.topic_id)
            if lesson.sub_topic_id is not None and lesson.sub_topic_id not in self.sub_topics:
                raise NotFoundError("SubTopic", lesson.sub_topic_id)
            self.lessons[lesson.id] = lesson.model_copy(deep=True)
            return lesson

    def add_standard(self, standard: Standard) -> Standard:
        with self._lock:
            if standard.topic_id not in self.topics:
                raise NotFoundError("Topic", standard.topic_id)
            self.standards[standard.id] = standard.model_copy(deep=True)
            return standard

    def add_note(self, note: Note) -> Note:
        with self._lock:
            self.notes[note.id] = note.model_copy(deep=True)
            return note

    def link_standard(self, lesson_id: int, standard_id: int) -> None:
        with self._lock:
            if lesson_id not in self.lessons:
                raise NotFoundError("Lesson", lesson_id)
            if standard_id not in self.standards:
                raise NotFoundError("Standard", standard_id)
            self.lesson_standards.add(LessonStandard(lesson_id=lesson_id, standard_id=standard_id))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_course(self, course_id: int) -> Optional[Course]:
        return self.courses.get(course_id)

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        return self.lessons.get(lesson_id)

    def topics_for_course(self, course_id: int) -> list[Topic]:
        return sorted(
            (t for t in self.topics.values() if t.course_id == course_id),
            key=lambda t: (t.sort_order, t.id),
        )

    def sub_topics_for_topic(self, topic_id: int) -> list[SubTopic]:
        return sorted(
            (s for s in self.sub_topics.values() if s.topic_id == topic_id),
            key=lambda s: (s.sort_order, s.id),
        )

    def standards_for_lesson(self, lesson_id: int) -> list[Standard]:
        ids = sorted(link.standard_id for link in self.lesson_standards if link.lesson_id == lesson_id)
        return [self.standards[i] for i in ids]

    def get_ordered_lessons(self, course_id: int) -> Optional[list[int]]:
        """Lesson ids of a course in teaching order, or None for an unknown course."""
        with self._lock:
            if course_id not in self.courses:
                return None

            ordered: list[int] = []
            for topic in self.topics_for_course(course_id):
                ordered.extend(self._lesson_ids(l for l in self.lessons.values() if l.topic_id == topic.id))
                for sub_topic in self.sub_topics_for_topic(topic.id):
                    ordered.extend(
                        self._lesson_ids(l for l in self.lessons.values() if l.sub_topic_id == sub_topic.id)
                    )
            return ordered

    @staticmethod
    def _lesson_ids(lessons: Iterable[Lesson]) -> list[int]:
        active = [l for l in lessons if not l.archived]
        return [l.id for l in sorted(active, key=lambda l: (l.sort_order, l.id))]

    # -------------------------------------------------------------------------
    # Cascading deletes
    # -------------------------------------------------------------------------

    def delete_lesson(self, lesson_id: int) -> bool:
        """Delete a lesson with its notes and standard links."""
        with self._lock:
            if lesson_id not in self.lessons:
                return False
            self.lesson_standards = {l for l in self.lesson_standards if l.lesson_id != lesson_id}
            self._delete_notes(lambda n: n.lesson_id == lesson_id)
            del self.lessons[lesson_id]
            return True

    def delete_sub_topic(self, sub_topic_id: int) -> bool:
        """Delete a subtopic, its lessons, and their notes and links."""
        with self._lock:
            if sub_topic_id not in self.sub_topics:
                return False
            for lesson_id in [l.id for l in self.lessons.values() if l.sub_topic_id == sub_topic_id]:
                self.delete_lesson(lesson_id)
            self._delete_notes(lambda n: n.sub_topic_id == sub_topic_id)
            del self.sub_topics[sub_topic_id]
            return True

    def delete_topic(self, topic_id: int) -> bool:
        """Delete a topic with its subtopics, lessons, standards and notes."""
        with self._lock:
            if topic_id not in self.topics:
                return False
            for sub_topic_id in [s.id for s in self.sub_topics.values() if s.topic_id == topic_id]:
                self.delete_sub_topic(sub_topic_id)
            for lesson_id in [l.id for l in self.lessons.values() if l.topic_id == topic_id]:
                self.delete_lesson(lesson_id)
            for standard_id in [s.id for s in self.standards.values() if s.topic_id == topic_id]:
                self.lesson_standards = {
                    l for l in self.lesson_standards if l.standard_id != standard_id
                }
                del self.standards[standard_id]
            self._delete_notes(lambda n: n.topic_id == topic_id)
            del self.topics[topic_id]
            return True

    def delete_course(self, course_id: int) -> bool:
        """Delete a course and everything below it."""
        with self._lock:
            if course_id not in self.courses:
                return False
            for topic_id in [t.id for t in self.topics.values() if t.course_id == course_id]:
                self.delete_topic(topic_id)
            self._delete_notes(lambda n: n.course_id == course_id)
            del self.courses[course_id]
            logger.info("Deleted course %s and its descendants", course_id)
            return True

    def _delete_notes(self, predicate) -> None:
        for note_id in [n.id for n in self.notes.values() if predicate(n)]:
            del self.notes[note_id]


# =============================================================================
# Schedule Configurations
# =============================================================================

class ConfigurationRepository:
    """
    Schedule configuration store.

    - ids are assigned on first save
    - a user's first configuration becomes active
    - non-template configurations of one user may not overlap in dates
    - activation goes through ``set_active_exclusive`` only
    """

    def __init__(self, schedules: Optional["ScheduleRepository"] = None) -> None:
        self._lock = threading.RLock()
        self._configs: dict[int, ScheduleConfiguration] = {}
        self._next_id = 1
        self._schedules = schedules

    def load(self, config_id: int) -> Optional[ScheduleConfiguration]:
        config = self._configs.get(config_id)
        return config.model_copy(deep=True) if config else None

    def list_for_user(self, user_id: int) -> list[ScheduleConfiguration]:
        return [
            c.model_copy(deep=True)
            for c in sorted(self._configs.values(), key=lambda c: (c.start_date, c.id))
            if c.user_id == user_id
        ]

    def get_active(self, user_id: int) -> Optional[ScheduleConfiguration]:
        for config in self.list_for_user(user_id):
            if config.is_active:
                return config
        return None

    def get_by_school_year(self, user_id: int, school_year: str) -> Optional[ScheduleConfiguration]:
        for config in self.list_for_user(user_id):
            if config.school_year == school_year:
                return config
        return None

    def list_templates(self, user_id: int) -> list[ScheduleConfiguration]:
        return [c for c in self.list_for_user(user_id) if c.is_template]

    def find_overlapping(self, configuration: ScheduleConfiguration) -> list[ScheduleConfiguration]:
        """Other non-template configurations of the same user sharing dates."""
        if configuration.is_template:
            return []
        return [
            c for c in self.list_for_user(configuration.user_id)
            if c.id != configuration.id and not c.is_template and c.overlaps(configuration)
        ]

    def save_replacing_assignments(self, configuration: ScheduleConfiguration) -> ScheduleConfiguration:
        """
        Insert or update a configuration.

        The stored period assignment list is replaced wholesale.

        Raises:
            ConfigurationConflictError: If the dates overlap another configuration
        """
        with self._lock:
            overlapping = self.find_overlapping(configuration)
            if overlapping:
                titles = ", ".join(f"'{c.title}' ({c.school_year})" for c in overlapping)
                raise ConfigurationConflictError(
                    f"Configuration dates overlap existing configuration(s): {titles}"
                )

            stored = configuration.model_copy(deep=True)
            now = datetime.now()
            if stored.id is None or stored.id not in self._configs:
                if stored.id is None:
                    stored.id = self._next_id
                self._next_id = max(self._next_id, stored.id) + 1
                stored.created_at = stored.created_at or now
                first_for_user = not any(c.user_id == stored.user_id for c in self._configs.values())
                if first_for_user and not stored.is_template:
                    stored.is_active = True
            else:
                previous = self._configs[stored.id]
                stored.created_at = previous.created_at
                stored.is_active = previous.is_active
            stored.updated_at = now

            for index, assignment in enumerate(stored.period_assignments, start=1):
                assignment.id = index

            self._configs[stored.id] = stored
            if stored.is_active:
                self._deactivate_others(stored.user_id, stored.id)
            return stored.model_copy(deep=True)

    def set_active_exclusive(self, user_id: int, config_id: int) -> ScheduleConfiguration:
        """
        Activate one configuration and deactivate all the user's others.

        Raises:
            NotFoundError: If the configuration does not exist for this user
        """
        with self._lock:
            config = self._configs.get(config_id)
            if config is None or config.user_id != user_id:
                raise NotFoundError("ScheduleConfiguration", config_id)
            self._deactivate_others(user_id, config_id)
            config.is_active = True
            config.updated_at = datetime.now()
            return config.model_copy(deep=True)

    def delete(self, config_id: int) -> bool:
        """
        Delete a configuration and its assignments.

        Raises:
            ConfigurationConflictError: If a schedule was generated from it
        """
        with self._lock:
            if config_id not in self._configs:
                return False
            if self._schedules is not None and self._schedules.get_for_configuration(config_id):
                raise ConfigurationConflictError(
                    f"Configuration {config_id} is used by a schedule and cannot be deleted"
                )
            del self._configs[config_id]
            return True

    def _deactivate_others(self, user_id: int, config_id: int) -> None:
        for other in self._configs.values():
            if other.user_id == user_id and other.id != config_id and other.is_active:
                other.is_active = False
                logger.debug("Deactivated configuration %s for user %s", other.id, user_id)


# =============================================================================
# Schedules
# =============================================================================

class ScheduleRepository:
    """Generated schedule store. Also the ``EventSink`` for generation."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._schedules: dict[int, Schedule] = {}
        self._next_id = 1
        self._next_special_day_id = 1

    def load(self, schedule_id: int) -> Optional[Schedule]:
        schedule = self._schedules.get(schedule_id)
        return schedule.model_copy(deep=True) if schedule else None

    def get_for_configuration(self, config_id: int) -> Optional[Schedule]:
        for schedule in self._schedules.values():
            if schedule.configuration_id == config_id:
                return schedule.model_copy(deep=True)
        return None

    def list_for_user(self, user_id: int) -> list[Schedule]:
        return [s.model_copy(deep=True) for s in self._schedules.values() if s.user_id == user_id]

    def create(self, schedule: Schedule) -> Schedule:
        with self._lock:
            stored = schedule.model_copy(deep=True)
            stored.id = self._next_id
            self._next_id += 1
            stored.created_at = stored.created_at or datetime.now()
            self._schedules[stored.id] = stored
            self._number_events(stored)
            return stored.model_copy(deep=True)

    def replace_events(self, schedule_id: int, events: Sequence[ScheduleEvent]) -> Schedule:
        """
        Discard all events of a schedule and store the given ones.

        Raises:
            NotFoundError: If the schedule does not exist
        """
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            schedule.events = [e.model_copy(deep=True) for e in events]
            self._number_events(schedule)
            logger.debug("Replaced events of schedule %s (%d events)", schedule_id, len(events))
            return schedule.model_copy(deep=True)

    def add_special_day(self, schedule_id: int, special_day: SpecialDay) -> SpecialDay:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            stored = special_day.model_copy(deep=True)
            stored.id = self._next_special_day_id
            self._next_special_day_id += 1
            stored.schedule_id = schedule_id
            schedule.special_days.append(stored)
            return stored.model_copy(deep=True)

    def update_special_day(self, schedule_id: int, special_day: SpecialDay) -> Optional[SpecialDay]:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            for index, existing in enumerate(schedule.special_days):
                if existing.id == special_day.id:
                    stored = special_day.model_copy(deep=True)
                    stored.schedule_id = schedule_id
                    schedule.special_days[index] = stored
                    return stored.model_copy(deep=True)
            return None

    def delete_special_day(self, schedule_id: int, special_day_id: int) -> bool:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            remaining = [s for s in schedule.special_days if s.id != special_day_id]
            if len(remaining) == len(schedule.special_days):
                return False
            schedule.special_days = remaining
            return True

    def events_in_range(self, schedule_id: int, start_date: date, end_date: date) -> Optional[list[ScheduleEvent]]:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            return None
        events = [e for e in schedule.events if start_date <= e.date <= end_date]
        return [e.model_copy(deep=True) for e in sorted(events, key=lambda e: (e.date, e.period))]

    def set_locked(self, schedule_id: int, locked: bool) -> Schedule:
        with self._lock:
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            schedule.is_locked = locked
            return schedule.model_copy(deep=True)

    def delete(self, schedule_id: int) -> bool:
        """Delete a schedule with its events and special days."""
        with self._lock:
            return self._schedules.pop(schedule_id, None) is not None

    @staticmethod
    def _number_events(schedule: Schedule) -> None:
        for index, event in enumerate(schedule.events, start=1):
            event.id = index
            event.schedule_id = schedule.id
