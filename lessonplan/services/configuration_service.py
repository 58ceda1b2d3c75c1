"""
Schedule configuration management.

Orchestrates validation, ownership checks and persistence for schedule
configurations. The school-year label is always derived from the dates;
activation always goes through the store's ``set_active_exclusive``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from lessonplan.config import ValidationOptions
from lessonplan.data.models import ScheduleConfiguration
from lessonplan.errors import ConfigurationValidationError, NotFoundError, OwnershipError
from lessonplan.store.interfaces import ConfigurationStore, LessonSource
from lessonplan.validation.period_assignments import validate_against_configuration
from lessonplan.validation.readiness import ReadinessReport, check_generation_readiness
from lessonplan.validation.result import ValidationResult


logger = logging.getLogger(__name__)


@dataclass
class ConfigurationSummary:
    """Compact listing entry for a configuration."""
    id: int
    title: str
    school_year: str
    start_date: date
    end_date: date
    is_active: bool
    is_template: bool
    period_count: int
    assigned_periods: int

    def to_dict(self) -> dict:
        return asdict(self)


class ScheduleConfigurationService:
    """
    Create, update, activate, copy and delete schedule configurations.

    Usage:
        service = ScheduleConfigurationService(config_repo, curriculum_repo)
        created = service.create(configuration, user_id=1)
        service.set_active(created.id, user_id=1)
    """

    def __init__(
        self,
        store: ConfigurationStore,
        lesson_source: LessonSource,
        validation_options: Optional[ValidationOptions] = None,
    ) -> None:
        self.store = store
        self.lesson_source = lesson_source
        self.validation_options = validation_options or ValidationOptions()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_for_user(self, user_id: int) -> list[ScheduleConfiguration]:
        return self.store.list_for_user(user_id)

    def get(self, config_id: int, user_id: int) -> ScheduleConfiguration:
        """
        Load a configuration owned by the user.

        Raises:
            NotFoundError: If it does not exist
            OwnershipError: If another user owns it
        """
        configuration = self.store.load(config_id)
        if configuration is None:
            logger.warning("Schedule configuration %s not found", config_id)
            raise NotFoundError("ScheduleConfiguration", config_id)
        if configuration.user_id != user_id:
            logger.warning("Schedule configuration %s not owned by user %s", config_id, user_id)
            raise OwnershipError("ScheduleConfiguration", config_id, user_id)
        return configuration

    def get_active(self, user_id: int) -> Optional[ScheduleConfiguration]:
        return self.store.get_active(user_id)

    def get_by_school_year(self, user_id: int, school_year: str) -> Optional[ScheduleConfiguration]:
        return self.store.get_by_school_year(user_id, school_year)

    def list_templates(self, user_id: int) -> list[ScheduleConfiguration]:
        return self.store.list_templates(user_id)

    def summaries(self, user_id: int) -> list[ConfigurationSummary]:
        return [
            ConfigurationSummary(
                id=c.id,
                title=c.title,
                school_year=c.school_year,
                start_date=c.start_date,
                end_date=c.end_date,
                is_active=c.is_active,
                is_template=c.is_template,
                period_count=c.periods_per_day,
                assigned_periods=len(c.period_assignments),
            )
            for c in self.store.list_for_user(user_id)
        ]

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_assignments(self, configuration: ScheduleConfiguration) -> ValidationResult:
        """Validate period assignments against the configuration."""
        return validate_against_configuration(configuration, self.validation_options)

    def validate_for_generation(self, config_id: int, user_id: int) -> ReadinessReport:
        """Check whether a stored configuration can generate a schedule."""
        configuration = self.get(config_id, user_id)
        report = check_generation_readiness(configuration, self.lesson_source)
        logger.debug(
            "Validation complete for configuration %s: valid=%s, can_generate=%s",
            config_id, report.is_valid, report.can_generate,
        )
        return report

    def _require_valid(self, configuration: ScheduleConfiguration) -> None:
        result = self.validate_assignments(configuration)
        if not result.is_valid:
            logger.warning(
                "Rejected configuration '%s': %d validation errors",
                configuration.title, len(result.errors),
            )
            raise ConfigurationValidationError(result.errors)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def create(self, configuration: ScheduleConfiguration, user_id: int) -> ScheduleConfiguration:
        """
        Validate and store a new configuration for the user.

        Raises:
            ConfigurationValidationError: If the period assignments are invalid
            ConfigurationConflictError: If the dates overlap another configuration
        """
        candidate = configuration.model_copy(update={"id": None, "user_id": user_id}, deep=True)
        self._require_valid(candidate)

        wants_active = candidate.is_active
        candidate.is_active = False
        created = self.store.save_replacing_assignments(candidate)
        if wants_active and not created.is_active:
            created = self.store.set_active_exclusive(user_id, created.id)

        logger.info(
            "Created schedule configuration %s '%s' (School Year: %s) for user %s",
            created.id, created.title, created.school_year, user_id,
        )
        return created

    def update(
        self,
        config_id: int,
        configuration: ScheduleConfiguration,
        user_id: int,
    ) -> ScheduleConfiguration:
        """
        Replace a configuration's settings and its whole assignment list.

        Raises:
            NotFoundError: If the configuration does not exist
            OwnershipError: If another user owns it
            ConfigurationValidationError: If the period assignments are invalid
            ConfigurationConflictError: If the dates overlap another configuration
        """
        self.get(config_id, user_id)
        candidate = configuration.model_copy(update={"id": config_id, "user_id": user_id}, deep=True)
        self._require_valid(candidate)

        updated = self.store.save_replacing_assignments(candidate)
        if candidate.is_active and not updated.is_active:
            updated = self.store.set_active_exclusive(user_id, config_id)

        logger.info(
            "Updated schedule configuration %s '%s' (School Year: %s) for user %s",
            config_id, updated.title, updated.school_year, user_id,
        )
        return updated

    def set_active(self, config_id: int, user_id: int) -> ScheduleConfiguration:
        """Make this the user's only active configuration."""
        self.get(config_id, user_id)
        activated = self.store.set_active_exclusive(user_id, config_id)
        logger.info("Set schedule configuration %s as active for user %s", config_id, user_id)
        return activated

    def copy_as_template(self, config_id: int, new_title: str, user_id: int) -> ScheduleConfiguration:
        """Store an inactive template copy of a configuration and its assignments."""
        source = self.get(config_id, user_id)
        copy = source.model_copy(
            update={
                "id": None,
                "title": new_title,
                "is_active": False,
                "is_template": True,
                "created_at": None,
                "updated_at": None,
            },
            deep=True,
        )
        for assignment in copy.period_assignments:
            assignment.id = None
        created = self.store.save_replacing_assignments(copy)
        logger.info(
            "Copied schedule configuration %s as template %s '%s' for user %s",
            config_id, created.id, new_title, user_id,
        )
        return created

    def delete(self, config_id: int, user_id: int) -> None:
        """
        Delete a configuration.

        Raises:
            NotFoundError: If the configuration does not exist
            OwnershipError: If another user owns it
            ConfigurationConflictError: If a schedule was generated from it
        """
        self.get(config_id, user_id)
        self.store.delete(config_id)
        logger.info("Deleted schedule configuration %s for user %s", config_id, user_id)
