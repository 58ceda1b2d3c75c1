"""
Schedule generation and continuation.

Regeneration is replace-all: the schedule's whole event list is swapped for
the newly generated one. Continuation keeps events before a date and
regenerates the rest, resuming each (period, course) sequence where it
left off.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from lessonplan.config import GenerationOptions
from lessonplan.data.days import Weekday
from lessonplan.data.models import Schedule, ScheduleConfiguration, ScheduleEvent, SpecialDay
from lessonplan.errors import NotFoundError, OwnershipError, ScheduleLockedError
from lessonplan.scheduling.cycle import count_teaching_days
from lessonplan.scheduling.generator import ScheduleGenerator
from lessonplan.scheduling.sequence import SequencePosition, analyze_sequence, resume_cycles
from lessonplan.store.interfaces import ConfigurationStore, LessonSource, ScheduleStore
from lessonplan.validation.readiness import ReadinessReport, check_generation_readiness


logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of generating a schedule from a configuration."""
    success: bool
    schedule: Optional[Schedule] = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    total_events: int = 0
    teaching_days: int = 0
    events_by_period: dict[int, int] = field(default_factory=dict)
    events_by_type: dict[str, int] = field(default_factory=dict)


@dataclass
class GenerationPreview:
    """What generating a configuration would produce, computed without saving."""
    readiness: ReadinessReport
    start_date: date
    end_date: date
    teaching_days: int = 0
    estimated_events_by_period: dict[int, int] = field(default_factory=dict)

    @property
    def can_generate(self) -> bool:
        return self.readiness.can_generate

    @property
    def estimated_events(self) -> int:
        return sum(self.estimated_events_by_period.values())


class ScheduleService:
    """
    Generates, regenerates and continues schedules.

    Usage:
        service = ScheduleService(config_repo, schedule_repo, curriculum_repo)
        result = service.generate_schedule(config_id=1, user_id=1)
        if result.success:
            print(result.total_events)
    """

    def __init__(
        self,
        configurations: ConfigurationStore,
        schedules: ScheduleStore,
        lesson_source: LessonSource,
        options: Optional[GenerationOptions] = None,
    ) -> None:
        self.configurations = configurations
        self.schedules = schedules
        self.lesson_source = lesson_source
        self.generator = ScheduleGenerator(lesson_source, options)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_schedule(self, schedule_id: int, user_id: int) -> Schedule:
        """
        Raises:
            NotFoundError: If the schedule does not exist
            OwnershipError: If another user owns it
        """
        schedule = self.schedules.load(schedule_id)
        if schedule is None:
            logger.info("Schedule %s not found", schedule_id)
            raise NotFoundError("Schedule", schedule_id)
        if schedule.user_id != user_id:
            logger.warning("Schedule %s not owned by user %s", schedule_id, user_id)
            raise OwnershipError("Schedule", schedule_id, user_id)
        return schedule

    def get_for_configuration(self, config_id: int, user_id: int) -> Optional[Schedule]:
        schedule = self.schedules.get_for_configuration(config_id)
        if schedule is not None and schedule.user_id != user_id:
            logger.warning("Schedule %s for configuration %s not owned by user %s",
                           schedule.id, config_id, user_id)
            raise OwnershipError("Schedule", schedule.id, user_id)
        return schedule

    def get_events_in_range(
        self,
        schedule_id: int,
        start_date: date,
        end_date: date,
        user_id: int,
    ) -> list[ScheduleEvent]:
        """Events dated ``start_date``..``end_date`` inclusive, in (date, period) order."""
        self.get_schedule(schedule_id, user_id)
        events = self.schedules.events_in_range(schedule_id, start_date, end_date) or []
        logger.debug(
            "Schedule %s has %d events between %s and %s", schedule_id, len(events), start_date, end_date,
        )
        return events

    def _configuration(self, config_id: int, user_id: int) -> ScheduleConfiguration:
        configuration = self.configurations.load(config_id)
        if configuration is None:
            raise NotFoundError("ScheduleConfiguration", config_id)
        if configuration.user_id != user_id:
            raise OwnershipError("ScheduleConfiguration", config_id, user_id)
        return configuration

    def _unlocked_schedule(self, schedule_id: int, user_id: int) -> Schedule:
        schedule = self.get_schedule(schedule_id, user_id)
        if schedule.is_locked:
            logger.warning("Schedule %s is locked", schedule_id)
            raise ScheduleLockedError(schedule_id)
        return schedule

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate_schedule(
        self,
        config_id: int,
        user_id: int,
        title: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate (or regenerate) the schedule of a configuration.

        A configuration that is not ready returns an unsuccessful result
        listing the problems. The schedule's special days are honoured.

        Raises:
            NotFoundError: If the configuration or an assigned course does not exist
            OwnershipError: If another user owns the configuration
            ScheduleLockedError: If the existing schedule is locked
        """
        logger.info("Generating schedule from configuration %s for user %s", config_id, user_id)
        configuration = self._configuration(config_id, user_id)
        # Unknown courses raise NotFoundError rather than becoming a readiness error
        self.generator.resolve_lessons(configuration)

        report = check_generation_readiness(configuration, self.lesson_source)
        if not report.can_generate:
            logger.warning(
                "Configuration %s is not ready for schedule generation: %s",
                config_id, ", ".join(report.errors),
            )
            return GenerationResult(success=False, errors=report.errors, warnings=report.warnings)

        schedule = self.get_for_configuration(config_id, user_id)
        if schedule is not None and schedule.is_locked:
            raise ScheduleLockedError(schedule.id)

        run = self.generator.generate(configuration, schedule.special_days if schedule else ())

        if schedule is None:
            schedule = self.schedules.create(
                Schedule(
                    user_id=user_id,
                    configuration_id=config_id,
                    title=title or configuration.title or f"{configuration.school_year} Schedule",
                )
            )
        saved = self.schedules.replace_events(schedule.id, run.events)

        if report.warnings:
            logger.warning("Generation warnings: %s", ", ".join(report.warnings))
        logger.info(
            "Saved schedule %s with %d events across %d periods",
            saved.id, len(run.events), len(run.events_by_period),
        )
        return GenerationResult(
            success=True,
            schedule=saved,
            warnings=report.warnings,
            total_events=len(run.events),
            teaching_days=run.teaching_days,
            events_by_period=run.events_by_period,
            events_by_type=run.events_by_type,
        )

    def preview_generation(self, config_id: int, user_id: int) -> GenerationPreview:
        """
        Estimate what ``generate_schedule`` would produce, without saving.

        Each period is estimated at one event per teaching day that one of
        its assignments covers. A configuration that is not ready gets no
        estimates.

        Raises:
            NotFoundError: If the configuration does not exist
            OwnershipError: If another user owns the configuration
        """
        configuration = self._configuration(config_id, user_id)
        report = check_generation_readiness(configuration, self.lesson_source)
        preview = GenerationPreview(
            readiness=report,
            start_date=configuration.start_date,
            end_date=configuration.end_date,
        )
        if not report.can_generate:
            logger.info("Configuration %s cannot be previewed: %s", config_id, ", ".join(report.errors))
            return preview

        preview.teaching_days = count_teaching_days(
            configuration.start_date, configuration.end_date, configuration.teaching_days,
        )
        for period in range(1, configuration.periods_per_day + 1):
            assignments = configuration.assignments_for_period(period)
            if not assignments:
                continue
            covered: set[Weekday] = set()
            for assignment in assignments:
                covered |= assignment.weekdays()
            covered &= configuration.teaching_day_set
            preview.estimated_events_by_period[period] = count_teaching_days(
                configuration.start_date, configuration.end_date, covered,
            )

        logger.info(
            "Preview of configuration %s: %d events over %d teaching days",
            config_id, preview.estimated_events, preview.teaching_days,
        )
        return preview

    # -------------------------------------------------------------------------
    # Special days
    # -------------------------------------------------------------------------

    def add_special_day(
        self,
        schedule_id: int,
        special_day: SpecialDay,
        user_id: int,
        regenerate: bool = True,
    ) -> SpecialDay:
        """
        Attach a special day; by default regenerate from its date onward.

        Raises:
            ScheduleLockedError: If the schedule is locked; nothing is stored
        """
        schedule = self._unlocked_schedule(schedule_id, user_id)
        stored = self.schedules.add_special_day(schedule_id, special_day)
        logger.info(
            "Added special day %s (%s) on %s to schedule %s",
            stored.id, stored.event_type.value, stored.date, schedule_id,
        )
        if regenerate:
            self.continue_schedule(schedule.id, stored.date, user_id)
        return stored

    def update_special_day(
        self,
        schedule_id: int,
        special_day_id: int,
        special_day: SpecialDay,
        user_id: int,
        regenerate: bool = True,
    ) -> SpecialDay:
        """
        Replace a special day; by default regenerate from the earlier of its old and new dates.

        Raises:
            ValueError: If ``special_day.id`` is set and differs from ``special_day_id``
            NotFoundError: If the schedule has no such special day
            ScheduleLockedError: If the schedule is locked
        """
        if special_day.id is not None and special_day.id != special_day_id:
            raise ValueError(f"SpecialDay id mismatch: {special_day_id} vs {special_day.id}")

        schedule = self._unlocked_schedule(schedule_id, user_id)
        existing = self._special_day(schedule, special_day_id)

        stored = self.schedules.update_special_day(
            schedule_id, special_day.model_copy(update={"id": special_day_id}),
        )
        if stored is None:
            raise NotFoundError("SpecialDay", special_day_id)
        logger.info("Updated special day %s of schedule %s", special_day_id, schedule_id)

        if regenerate:
            self.continue_schedule(schedule_id, min(existing.date, stored.date), user_id)
        return stored

    def delete_special_day(
        self,
        schedule_id: int,
        special_day_id: int,
        user_id: int,
        regenerate: bool = True,
    ) -> None:
        """
        Remove a special day; by default regenerate from its date onward.

        Raises:
            NotFoundError: If the schedule has no such special day
            ScheduleLockedError: If the schedule is locked
        """
        schedule = self._unlocked_schedule(schedule_id, user_id)
        existing = self._special_day(schedule, special_day_id)

        self.schedules.delete_special_day(schedule_id, special_day_id)
        logger.info("Deleted special day %s from schedule %s", special_day_id, schedule_id)

        if regenerate:
            self.continue_schedule(schedule_id, existing.date, user_id)

    @staticmethod
    def _special_day(schedule: Schedule, special_day_id: int) -> SpecialDay:
        for special_day in schedule.special_days:
            if special_day.id == special_day_id:
                return special_day
        logger.info("SpecialDay %s not found in schedule %s", special_day_id, schedule.id)
        raise NotFoundError("SpecialDay", special_day_id)

    # -------------------------------------------------------------------------
    # Continuation
    # -------------------------------------------------------------------------

    def sequence_state(
        self,
        schedule_id: int,
        user_id: int,
        before: Optional[date] = None,
    ) -> list[SequencePosition]:
        """Position of every (period, course) pair, considering events before ``before``."""
        schedule = self.get_schedule(schedule_id, user_id)
        configuration = self._configuration(schedule.configuration_id, user_id)
        resolved = self.generator.resolve_lessons(configuration)
        return [
            analyze_sequence(schedule.events, lesson_ids, period, course_id, before=before)
            for (period, course_id), lesson_ids in sorted(resolved.items())
        ]

    def continue_schedule(self, schedule_id: int, from_date: date, user_id: int) -> Schedule:
        """
        Regenerate a schedule from ``from_date`` to the configuration's end.

        Events before ``from_date`` are kept. Each (period, course) pair
        resumes at the lesson after the last one placed before that date.

        Raises:
            NotFoundError: If the schedule, its configuration or a course does not exist
            OwnershipError: If another user owns the schedule
            ScheduleLockedError: If the schedule is locked
        """
        schedule = self._unlocked_schedule(schedule_id, user_id)
        configuration = self._configuration(schedule.configuration_id, user_id)

        cycles = resume_cycles(schedule.events, self.generator.resolve_lessons(configuration), from_date)
        run = self.generator.generate(
            configuration, schedule.special_days, start_date=from_date, cycles=cycles,
        )

        kept = [e for e in schedule.events if e.date < from_date]
        saved = self.schedules.replace_events(schedule_id, kept + run.events)
        logger.info(
            "Continued schedule %s from %s: kept %d events, generated %d",
            schedule_id, from_date, len(kept), len(run.events),
        )
        return saved

    def set_locked(self, schedule_id: int, user_id: int, locked: bool = True) -> Schedule:
        """Lock a schedule against regeneration, or unlock it."""
        self.get_schedule(schedule_id, user_id)
        schedule = self.schedules.set_locked(schedule_id, locked)
        logger.info("Schedule %s %s by user %s", schedule_id, "locked" if locked else "unlocked", user_id)
        return schedule

    def delete_schedule(self, schedule_id: int, user_id: int) -> None:
        self.get_schedule(schedule_id, user_id)
        self.schedules.delete(schedule_id)
        logger.info("Deleted schedule %s for user %s", schedule_id, user_id)
