"""Schedule output formatting."""

from .schema import (
    EventOutput,
    ScheduleSummary,
    DateSchedule,
    PeriodSchedule,
    ScheduleViews,
    ScheduleOutput,
    create_schedule_output,
    schedule_to_json,
)
from .formatters import (
    # Formatter classes
    JSONFormatter,
    CSVFormatter,
    ConsoleFormatter,
    # Convenience functions
    format_json,
    format_csv,
    format_console,
    print_console,
    # File utilities
    save_json,
    save_csv,
)

__all__ = [
    # Schema models
    "EventOutput",
    "ScheduleSummary",
    "DateSchedule",
    "PeriodSchedule",
    "ScheduleViews",
    "ScheduleOutput",
    # Schema conversion functions
    "create_schedule_output",
    "schedule_to_json",
    # Formatter classes
    "JSONFormatter",
    "CSVFormatter",
    "ConsoleFormatter",
    # Formatter convenience functions
    "format_json",
    "format_csv",
    "format_console",
    "print_console",
    # File utilities
    "save_json",
    "save_csv",
]
