"""Lesson planner - period configuration validation and lesson schedule generation."""

from .data.models import Curriculum, PeriodAssignment, Schedule, ScheduleConfiguration
from .validation import ValidationResult, validate_period_assignments
from .scheduling import ScheduleGenerator, compute_school_year_label, generate_lesson_events
from .services import ScheduleConfigurationService, ScheduleService
from .cli import app as cli_app

__version__ = "0.1.0"

__all__ = [
    # Models
    "Curriculum",
    "PeriodAssignment",
    "Schedule",
    "ScheduleConfiguration",
    # Core operations
    "ValidationResult",
    "validate_period_assignments",
    "ScheduleGenerator",
    "generate_lesson_events",
    "compute_school_year_label",
    # Services
    "ScheduleConfigurationService",
    "ScheduleService",
    # CLI
    "cli_app",
]
