"""
Weekday vocabulary and teaching-day set helpers.

Teaching days travel as plain strings at the edges (JSON files, the CLI)
and as ``Weekday`` members everywhere else. Sets are always serialized in
canonical order: Monday=1 through Sunday=7.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterable, Optional, Union


# =============================================================================
# Weekday Enum
# =============================================================================

class Weekday(str, Enum):
    """Day of week, valued by its canonical English name."""
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def number(self) -> int:
        """ISO day number: Monday=1 through Sunday=7."""
        return _WEEKDAY_ORDER.index(self) + 1

    @classmethod
    def from_date(cls, value: date) -> Weekday:
        """Weekday of a calendar date."""
        return _WEEKDAY_ORDER[value.isoweekday() - 1]

    def __str__(self) -> str:
        return self.value


_WEEKDAY_ORDER: tuple[Weekday, ...] = tuple(Weekday)
_BY_LOWER_NAME: dict[str, Weekday] = {d.value.lower(): d for d in Weekday}

DEFAULT_TEACHING_DAYS: tuple[Weekday, ...] = _WEEKDAY_ORDER[:5]
WEEKEND: frozenset[Weekday] = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})

TeachingDaysInput = Union[str, Iterable[Union[str, Weekday]], None]


# =============================================================================
# Parsing
# =============================================================================

def lookup_weekday(name: str) -> Optional[Weekday]:
    """Case-insensitive lookup of a day name. Returns None if unknown."""
    if isinstance(name, Weekday):
        return name
    return _BY_LOWER_NAME.get(name.strip().lower())


def parse_weekday(name: str) -> Weekday:
    """
    Parse a single day name.

    Raises:
        ValueError: If the name is not one of the seven English day names
    """
    day = lookup_weekday(name)
    if day is None:
        raise ValueError(f"Invalid day name: '{name}'")
    return day


def split_day_names(value: TeachingDaysInput) -> list[str]:
    """
    Split raw teaching-day input into trimmed, non-blank names.

    Accepts either a comma-delimited string or an iterable of names.
    Order and duplicates are preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts: Iterable = value.split(",")
    else:
        parts = value
    names = []
    for part in parts:
        text = part.value if isinstance(part, Weekday) else str(part).strip()
        if text:
            names.append(text)
    return names


def sort_weekdays(days: Iterable[Weekday]) -> list[Weekday]:
    """Deduplicate and order days canonically."""
    return sorted(set(days), key=lambda d: d.number)


def parse_teaching_days(value: TeachingDaysInput) -> list[Weekday]:
    """
    Parse a teaching-day set strictly.

    Duplicates collapse and the result is in canonical order.

    Raises:
        ValueError: If any name is unknown
    """
    names = split_day_names(value)
    invalid = [n for n in names if lookup_weekday(n) is None]
    if invalid:
        raise ValueError(f"Invalid day names: {', '.join(invalid)}")
    return sort_weekdays(lookup_weekday(n) for n in names)


def format_teaching_days(days: Iterable[Union[str, Weekday]]) -> str:
    """
    Format a day set as a comma-delimited string in canonical order.

    An empty set formats to the Monday-Friday default.
    """
    parsed = parse_teaching_days(list(days))
    if not parsed:
        parsed = list(DEFAULT_TEACHING_DAYS)
    return ",".join(d.value for d in parsed)


def join_day_names(days: Iterable[Weekday]) -> str:
    """Human-readable ", "-joined list in canonical order."""
    return ", ".join(d.value for d in sort_weekdays(days))


# =============================================================================
# Validation Helpers
# =============================================================================

def check_teaching_days_value(
    value: TeachingDaysInput,
    field_name: str = "TeachingDays",
) -> list[str]:
    """
    Check that a teaching-day value is non-empty and uses known day names.

    Args:
        value: Comma-delimited string or list of names
        field_name: Name used as the prefix of each message

    Returns:
        List of error messages (empty when valid)
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return [f"{field_name} cannot be empty"]

    names = split_day_names(value)
    if not names:
        return [f"{field_name} must contain at least one valid day"]

    invalid = [n for n in names if lookup_weekday(n) is None]
    if invalid:
        valid = ", ".join(d.value for d in Weekday)
        return [f"{field_name} contains invalid day names: {', '.join(invalid)}. Valid days: {valid}"]
    return []


def validate_teaching_days_subset(
    schedule_days: TeachingDaysInput,
    assignment_days: TeachingDaysInput,
    description: str = "Assignment",
) -> list[str]:
    """
    Check that an assignment only uses days enabled for the whole schedule.

    Unknown names are ignored here; the format check reports them.

    Returns:
        List of error messages (empty when valid)
    """
    schedule = sort_weekdays(
        d for d in (lookup_weekday(n) for n in split_day_names(schedule_days)) if d
    )
    assignment = sort_weekdays(
        d for d in (lookup_weekday(n) for n in split_day_names(assignment_days)) if d
    )

    if not schedule:
        return ["Schedule teaching days cannot be empty"]
    if not assignment:
        return [f"{description} teaching days cannot be empty"]

    outside = [d for d in assignment if d not in schedule]
    if outside:
        return [
            f"{description} teaching days [{join_day_names(outside)}] are not enabled "
            f"in the schedule. Schedule allows: [{join_day_names(schedule)}]"
        ]
    return []
