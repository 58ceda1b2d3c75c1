"""
Output formatters for generated schedules.

This module provides formatters for different output formats:
- JSON: Complete schedule with summary and views
- CSV: One row per event, for spreadsheets
- Console: Date x period grid rendered with rich
"""

from __future__ import annotations

import csv
import json
import sys
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from .schema import EventOutput, ScheduleOutput


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter:
    """Formats schedule output as JSON."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If True, escape non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def format(self, output: ScheduleOutput) -> str:
        return json.dumps(output.to_dict(), indent=self.indent, ensure_ascii=self.ensure_ascii)

    def format_events_only(self, output: ScheduleOutput) -> str:
        """Format only the events array as JSON."""
        events_data = [
            event.model_dump(by_alias=True, mode="json")
            for event in output.events
        ]
        return json.dumps(events_data, indent=self.indent, ensure_ascii=self.ensure_ascii)


def format_json(output: ScheduleOutput, indent: int = 2) -> str:
    """Convenience function for JSON formatting."""
    return JSONFormatter(indent=indent).format(output)


# =============================================================================
# CSV Formatter
# =============================================================================

class CSVFormatter:
    """Formats schedule output as CSV, one row per event."""

    DEFAULT_COLUMNS = [
        'date', 'day_name', 'period', 'event_type', 'event_category',
        'course_id', 'course_title', 'lesson_id', 'lesson_title',
        'special_day_id', 'title', 'comment', 'schedule_sort',
    ]

    MINIMAL_COLUMNS = ['date', 'period', 'event_type', 'course_title', 'lesson_title', 'title']

    def __init__(
        self,
        columns: list[str] | None = None,
        include_header: bool = True,
        delimiter: str = ',',
    ):
        """
        Initialize CSV formatter.

        Args:
            columns: List of columns to include (None = all)
            include_header: Whether to include header row
            delimiter: Field delimiter
        """
        self.columns = columns or self.DEFAULT_COLUMNS
        self.include_header = include_header
        self.delimiter = delimiter

    def format(self, output: ScheduleOutput) -> str:
        buffer = StringIO()
        self.write(output, buffer)
        return buffer.getvalue()

    def write(self, output: ScheduleOutput, file: TextIO) -> None:
        """Write CSV to a file-like object."""
        writer = csv.writer(file, delimiter=self.delimiter)
        if self.include_header:
            writer.writerow(self.columns)
        for event in output.events:
            writer.writerow(self._event_to_row(event))

    def _event_to_row(self, event: EventOutput) -> list[str]:
        def text(value) -> str:
            return '' if value is None else str(value)

        field_map = {
            'date': event.date.isoformat(),
            'day_name': event.day_name,
            'period': str(event.period),
            'event_type': event.event_type,
            'event_category': text(event.event_category),
            'course_id': text(event.course_id),
            'course_title': text(event.course_title),
            'lesson_id': text(event.lesson_id),
            'lesson_title': text(event.lesson_title),
            'special_day_id': text(event.special_day_id),
            'title': text(event.title),
            'comment': text(event.comment),
            'schedule_sort': str(event.schedule_sort),
        }
        return [field_map.get(col, '') for col in self.columns]


def format_csv(output: ScheduleOutput, minimal: bool = False) -> str:
    """Convenience function for CSV formatting."""
    columns = CSVFormatter.MINIMAL_COLUMNS if minimal else None
    return CSVFormatter(columns=columns).format(output)


# =============================================================================
# Console Formatter
# =============================================================================

# Cell styles by event category; error events are always red
CATEGORY_STYLES = {
    "Lesson": "white",
    "SpecialPeriod": "cyan",
    "SpecialDay": "magenta",
}


class ConsoleFormatter:
    """Renders a schedule as a date x period grid."""

    def __init__(self, width: int | None = None, max_days: int | None = 10):
        """
        Initialize console formatter.

        Args:
            width: Console width (None = auto-detect)
            max_days: Number of dates to show in the grid (None = all)
        """
        self.width = width
        self.max_days = max_days

    def format(self, output: ScheduleOutput) -> str:
        """Render to a plain string via a recording console."""
        console = Console(record=True, width=self.width or 120)
        self.print(output, console)
        return console.export_text()

    def print(self, output: ScheduleOutput, console: Optional[Console] = None) -> None:
        if console is None:
            console = Console(file=sys.stdout, width=self.width)

        status_color = "red" if output.summary.error_events else "green"
        console.print(Panel(
            Text(f"{output.title} ({output.school_year})", style=f"bold {status_color}"),
            title="Lesson Schedule",
            subtitle=f"{output.start_date} to {output.end_date}",
        ))

        summary = output.summary
        console.print("\n[bold]Summary:[/bold]")
        console.print(f"  Events: {summary.total_events}")
        console.print(f"  Lessons: {summary.lesson_events}")
        console.print(f"  Teaching days: {summary.teaching_days}")
        if summary.error_events:
            console.print(f"  [red]Errors: {summary.error_events}[/red]")

        console.print(self.grid(output))

    def grid(self, output: ScheduleOutput, dates: list | None = None) -> Table:
        """Build the date x period table."""
        dates = dates if dates is not None else output.dates
        if self.max_days is not None:
            dates = dates[:self.max_days]

        table = Table(title="Schedule", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="dim")
        for period in range(1, output.periods_per_day + 1):
            table.add_column(f"P{period}", justify="center")

        for day in dates:
            day_schedule = output.views.by_date.get(day.isoformat())
            cells: dict[int, EventOutput] = {e.period: e for e in day_schedule.events} if day_schedule else {}
            row = [f"{day.isoformat()} {day.strftime('%a')}"]
            for period in range(1, output.periods_per_day + 1):
                event = cells.get(period)
                row.append(_cell(event) if event else "-")
            table.add_row(*row)
        return table


def _cell(event: EventOutput) -> Text:
    style = "bold red" if event.is_error else CATEGORY_STYLES.get(event.event_category or "", "white")
    return Text(event.display, style=style)


def format_console(output: ScheduleOutput, max_days: int | None = 10) -> str:
    """Convenience function for console formatting."""
    return ConsoleFormatter(max_days=max_days).format(output)


def print_console(output: ScheduleOutput, max_days: int | None = 10) -> None:
    """Print schedule to console."""
    ConsoleFormatter(max_days=max_days).print(output)


# =============================================================================
# File Utilities
# =============================================================================

def save_json(output: ScheduleOutput, path: Union[str, Path], indent: int = 2) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_json(output, indent=indent))
    return path


def save_csv(output: ScheduleOutput, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        CSVFormatter().write(output, f)
    return path
