"""
Command-line interface for the lesson planner.

Usage:
    python -m lessonplan validate configuration.json --strict
    python -m lessonplan generate configuration.json curriculum.json -o schedule.json
    python -m lessonplan label 2024-08-26 2025-06-13
    python -m lessonplan view schedule.json --date 2024-09-02
    python -m lessonplan sample ./sample --seed 42
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import GenerationOptions, ValidationOptions
from .data.generator import (
    GeneratorConfig,
    generate_sample_data,
    get_generation_stats,
    save_sample_data,
)
from .data.loader import load_configuration, load_curriculum, load_special_days
from .data.models import Curriculum, ScheduleConfiguration
from .errors import ConfigurationValidationError, DataValidationError, LessonPlanError
from .output.formatters import ConsoleFormatter, save_csv, save_json
from .output.schema import ScheduleOutput, create_schedule_output
from .scheduling.school_year import compute_school_year_label
from .services import ScheduleConfigurationService, ScheduleService
from .store import ConfigurationRepository, CurriculumRepository, ScheduleRepository
from .validation import check_generation_readiness, validate_against_configuration

# Create Typer app
app = typer.Typer(
    name="lessonplan",
    help="Lesson planning: period configuration validation and schedule generation.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()


class OutputFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


# =============================================================================
# Helper Functions
# =============================================================================

def configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config_file(path: Path) -> ScheduleConfiguration:
    """Load a configuration or exit with an error message."""
    try:
        return load_configuration(path)
    except DataValidationError as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)


def load_curriculum_file(path: Path) -> Curriculum:
    """Load a curriculum or exit with an error message."""
    try:
        return load_curriculum(path)
    except DataValidationError as e:
        console.print(f"[red]Error loading curriculum:[/red] {e}")
        raise typer.Exit(code=1)


def load_output(path: Path) -> ScheduleOutput:
    """Load a generated schedule JSON file."""
    if not path.exists():
        console.print(f"[red]Error:[/red] Schedule file not found: {path}")
        raise typer.Exit(code=1)
    try:
        return ScheduleOutput.model_validate_json(path.read_text())
    except ValueError as e:
        console.print(f"[red]Error loading schedule:[/red] {e}")
        raise typer.Exit(code=1)


def print_configuration(configuration: ScheduleConfiguration) -> None:
    """Print configuration summary to console."""
    table = Table(title="Configuration", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Title", configuration.title or "-")
    table.add_row("School Year", configuration.school_year)
    table.add_row("Dates", f"{configuration.start_date} to {configuration.end_date}")
    table.add_row("Periods per day", str(configuration.periods_per_day))
    table.add_row("Teaching days", ", ".join(d.value for d in configuration.teaching_days))
    table.add_row("Assignments", str(len(configuration.period_assignments)))

    console.print(table)


def print_messages(title: str, messages: list[str], style: str) -> None:
    if not messages:
        return
    console.print(f"[{style}]{title}:[/{style}]")
    for message in messages:
        console.print(f"  - {message}")


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Lesson planning: period configuration validation and schedule generation."""
    configure_logging(verbose)


@app.command()
def validate(
    config_file: Path = typer.Argument(
        ...,
        help="Path to configuration JSON file",
    ),
    curriculum_file: Optional[Path] = typer.Option(
        None,
        "--curriculum", "-c",
        help="Curriculum JSON file; enables the generation readiness check",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Require every period to cover all of the configuration's teaching days",
    ),
) -> None:
    """
    Validate a schedule configuration.

    Checks teaching day names, per-day conflicts, coverage and that
    assignment days are enabled in the configuration.

    Example:
        python -m lessonplan validate configuration.json --strict
    """
    console.print(f"\n[bold]Validating:[/bold] {config_file}\n")
    configuration = load_config_file(config_file)
    print_configuration(configuration)

    result = validate_against_configuration(configuration, ValidationOptions(strict_coverage=strict))
    console.print()
    print_messages("Errors", result.errors, "red")
    print_messages("Warnings", result.warnings, "yellow")
    ok = result.is_valid

    if curriculum_file is not None:
        curriculum = load_curriculum_file(curriculum_file)
        report = check_generation_readiness(configuration, CurriculumRepository.from_curriculum(curriculum))
        console.print("\n[bold]Generation readiness:[/bold]")
        print_messages("Errors", report.errors, "red")
        print_messages("Warnings", report.warnings, "yellow")
        console.print(
            f"  Course assignments: {report.course_assignments}, "
            f"special periods: {report.special_period_assignments}"
        )
        ok = ok and report.can_generate

    if not ok:
        console.print("\n[red]Validation failed.[/red]\n")
        raise typer.Exit(code=1)
    console.print("\n[green]Configuration is valid.[/green]\n")


@app.command()
def generate(
    config_file: Path = typer.Argument(
        ...,
        help="Path to configuration JSON file",
    ),
    curriculum_file: Path = typer.Argument(
        ...,
        help="Path to curriculum JSON file",
    ),
    special_days_file: Optional[Path] = typer.Option(
        None,
        "--special-days", "-s",
        help="JSON file with special days",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Path to write the generated schedule",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.JSON,
        "--format", "-f",
        help="Output file format",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Require every period to cover all of the configuration's teaching days",
    ),
    skip_unassigned: bool = typer.Option(
        False,
        "--skip-unassigned",
        help="Do not write error events for unassigned periods",
    ),
    days: int = typer.Option(
        10,
        "--days",
        help="Number of dates to show in the summary grid",
        min=0,
    ),
) -> None:
    """
    Generate a schedule from a configuration and a curriculum.

    Example:
        python -m lessonplan generate configuration.json curriculum.json -o schedule.json
    """
    configuration = load_config_file(config_file)
    curriculum = load_curriculum_file(curriculum_file)
    special_days = []
    if special_days_file is not None:
        try:
            special_days = load_special_days(special_days_file)
        except DataValidationError as e:
            console.print(f"[red]Error loading special days:[/red] {e}")
            raise typer.Exit(code=1)

    lessons = CurriculumRepository.from_curriculum(curriculum)
    schedules = ScheduleRepository()
    configurations = ConfigurationRepository(schedules)
    config_service = ScheduleConfigurationService(
        configurations, lessons, ValidationOptions(strict_coverage=strict),
    )
    schedule_service = ScheduleService(
        configurations, schedules, lessons,
        GenerationOptions(emit_unassigned_errors=not skip_unassigned),
    )

    try:
        stored = config_service.create(configuration, configuration.user_id)
        result = schedule_service.generate_schedule(stored.id, stored.user_id)
        if result.success and special_days:
            for special_day in special_days:
                schedule_service.add_special_day(
                    result.schedule.id, special_day, stored.user_id, regenerate=False,
                )
            result = schedule_service.generate_schedule(stored.id, stored.user_id)
    except ConfigurationValidationError as e:
        print_messages("Configuration is invalid", e.errors, "red")
        raise typer.Exit(code=1)
    except LessonPlanError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not result.success:
        print_messages("Cannot generate schedule", result.errors, "red")
        raise typer.Exit(code=1)
    print_messages("Warnings", result.warnings, "yellow")

    schedule_output = create_schedule_output(
        result.schedule,
        stored,
        course_titles={c.id: c.title for c in curriculum.courses},
        lesson_titles={l.id: l.title for l in curriculum.lessons},
    )
    ConsoleFormatter(max_days=days).print(schedule_output, console)

    if output:
        if output_format == OutputFormat.CSV:
            save_csv(schedule_output, output)
        else:
            save_json(schedule_output, output)
        console.print(f"\n[green]Schedule saved to:[/green] {output}")
    console.print()


@app.command()
def label(
    start: datetime = typer.Argument(..., formats=["%Y-%m-%d"], help="First day (YYYY-MM-DD)"),
    end: datetime = typer.Argument(..., formats=["%Y-%m-%d"], help="Last day (YYYY-MM-DD)"),
) -> None:
    """
    Print the school-year label for a date range.

    Example:
        python -m lessonplan label 2024-08-26 2025-06-13
    """
    console.print(compute_school_year_label(start.date(), end.date()))


@app.command()
def view(
    schedule_file: Path = typer.Argument(
        ...,
        help="Path to a generated schedule JSON file",
    ),
    on_date: Optional[datetime] = typer.Option(
        None,
        "--date", "-d",
        formats=["%Y-%m-%d"],
        help="Show one date",
    ),
    period: Optional[int] = typer.Option(
        None,
        "--period", "-p",
        help="Show one period across all dates",
    ),
    days: int = typer.Option(
        10,
        "--days",
        help="Number of dates to show in the overview grid",
        min=1,
    ),
) -> None:
    """
    Display a generated schedule.

    Examples:
        python -m lessonplan view schedule.json
        python -m lessonplan view schedule.json --date 2024-09-02
        python -m lessonplan view schedule.json --period 3
    """
    output = load_output(schedule_file)

    if on_date is not None:
        _show_date_view(output, on_date.date().isoformat())
    elif period is not None:
        _show_period_view(output, period)
    else:
        ConsoleFormatter(max_days=days).print(output, console)


def _show_date_view(output: ScheduleOutput, key: str) -> None:
    day = output.views.by_date.get(key)
    if day is None:
        console.print(f"[yellow]No events scheduled on {key}[/yellow]")
        return

    console.print(Panel(f"[bold]{day.day_name} {key}[/bold]", title="Daily Schedule"))
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Period")
    table.add_column("Type")
    table.add_column("Course")
    table.add_column("Lesson / Title")
    table.add_column("Comment")
    for event in day.events:
        table.add_row(
            str(event.period),
            event.event_type,
            event.course_title or (str(event.course_id) if event.course_id else ""),
            event.lesson_title or event.title or "",
            event.comment or "",
        )
    console.print(table)


def _show_period_view(output: ScheduleOutput, period: int) -> None:
    schedule = output.views.by_period.get(period)
    if schedule is None:
        console.print(f"[red]Error:[/red] Period {period} not found")
        console.print(f"Available periods: {', '.join(str(p) for p in output.views.by_period)}")
        raise typer.Exit(code=1)

    console.print(Panel(f"[bold]Period {period}[/bold]", title="Period Schedule"))
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Type")
    table.add_column("#", justify="right")
    table.add_column("Lesson / Title")
    for event in schedule.events:
        table.add_row(
            f"{event.date.isoformat()} {event.day_name[:3]}",
            event.event_type,
            str(event.schedule_sort + 1) if event.event_category == "Lesson" else "",
            event.display,
        )
    console.print(table)


@app.command()
def sample(
    outdir: Path = typer.Argument(
        ...,
        help="Directory to write configuration.json and curriculum.json",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for reproducible data",
    ),
    courses: int = typer.Option(
        3,
        "--courses",
        help="Number of courses",
        min=1,
        max=6,
    ),
) -> None:
    """
    Write a sample configuration and curriculum.

    Example:
        python -m lessonplan sample ./sample --seed 42
    """
    curriculum, configuration = generate_sample_data(GeneratorConfig(num_courses=courses, seed=seed))
    config_path, curriculum_path = save_sample_data(curriculum, configuration, outdir)

    stats = get_generation_stats(curriculum, configuration)
    table = Table(title="Sample Data", show_header=False, box=None)
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="white")
    for key, value in stats.items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    console.print(table)

    console.print(f"\n[green]Configuration saved to:[/green] {config_path}")
    console.print(f"[green]Curriculum saved to:[/green] {curriculum_path}\n")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
