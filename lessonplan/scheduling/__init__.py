"""Lesson cycling, schedule generation and school-year labels."""

from .school_year import compute_school_year_label
from .cycle import LessonCycle, count_teaching_days, generate_lesson_events, iter_dates
from .generator import GenerationRun, ScheduleGenerator
from .sequence import SequencePosition, analyze_sequence, continue_sequence, resume_cycles

__all__ = [
    "compute_school_year_label",
    "LessonCycle",
    "count_teaching_days",
    "generate_lesson_events",
    "iter_dates",
    "GenerationRun",
    "ScheduleGenerator",
    "SequencePosition",
    "analyze_sequence",
    "continue_sequence",
    "resume_cycles",
]
