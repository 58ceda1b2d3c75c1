"""Services orchestrating validation, persistence and generation."""

from .configuration_service import ConfigurationSummary, ScheduleConfigurationService
from .schedule_service import GenerationPreview, GenerationResult, ScheduleService

__all__ = [
    "ConfigurationSummary",
    "ScheduleConfigurationService",
    "GenerationPreview",
    "GenerationResult",
    "ScheduleService",
]
