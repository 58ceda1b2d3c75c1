"""Repository contracts and in-memory implementations."""

from .interfaces import ConfigurationStore, EventSink, LessonSource, ScheduleStore
from .memory import ConfigurationRepository, CurriculumRepository, ScheduleRepository

__all__ = [
    "LessonSource",
    "ConfigurationStore",
    "EventSink",
    "ScheduleStore",
    "CurriculumRepository",
    "ConfigurationRepository",
    "ScheduleRepository",
]
