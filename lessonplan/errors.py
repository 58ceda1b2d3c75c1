"""Exception hierarchy for the lesson planning core.

Validation problems are never raised by the validators themselves; they are
collected as strings. The exceptions below are for callers that must refuse
an operation outright.
"""

from __future__ import annotations

from typing import Iterable, Optional


class LessonPlanError(Exception):
    """Base class for all lessonplan errors."""
    pass


class NotFoundError(LessonPlanError):
    """Raised when a configuration, schedule or course cannot be resolved."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class OwnershipError(LessonPlanError):
    """Raised when a user acts on an aggregate that belongs to someone else."""

    def __init__(self, entity: str, entity_id: object, user_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.user_id = user_id
        super().__init__(f"User {user_id} does not own {entity} {entity_id}")


class ConfigurationConflictError(LessonPlanError):
    """Raised for overlapping date ranges or deletes blocked by dependent schedules."""
    pass


class ConfigurationValidationError(LessonPlanError):
    """Raised when a configuration is refused because of validation errors.

    The full list of messages is kept on ``errors`` so callers can show the
    whole worklist at once.
    """

    def __init__(self, errors: Iterable[str], message: Optional[str] = None) -> None:
        self.errors = list(errors)
        summary = message or "Configuration validation failed"
        super().__init__(summary + ":\n" + "\n".join(f"  - {e}" for e in self.errors))


class DataValidationError(LessonPlanError):
    """Raised when input files cannot be read or fail validation."""
    pass


class ScheduleLockedError(LessonPlanError):
    """Raised when regenerating or continuing a locked schedule."""

    def __init__(self, schedule_id: int) -> None:
        self.schedule_id = schedule_id
        super().__init__(f"Schedule {schedule_id} is locked")
