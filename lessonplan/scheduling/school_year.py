"""School-year label inference from a configuration's date range."""

from __future__ import annotations

from datetime import date


def compute_school_year_label(start_date: date, end_date: date) -> str:
    """
    Build a human-readable label for a date range.

    Rules are applied in order and the first match wins:

    1. Aug/Sep start, May/Jun end in a later year -> "2024-2025"
    2. Aug-Oct start, Nov-Jan end -> "Fall Semester 2024"
    3. Jan/Feb start, May/Jun end -> "Spring Semester 2025"
    4. May/Jun start, Jul/Aug end -> "Summer Session 2025"
    5. Anything else -> "Instructional Period 2024 to 2025"

    The label is descriptive only; different ranges can share a label.

    Args:
        start_date: First day of the range
        end_date: Last day of the range

    Returns:
        The label
    """
    start_month, end_month = start_date.month, end_date.month
    start_year, end_year = start_date.year, end_date.year

    if start_month in (8, 9) and end_month in (5, 6) and end_year > start_year:
        return f"{start_year}-{end_year}"
    if start_month in (8, 9, 10) and end_month in (11, 12, 1):
        return f"Fall Semester {start_year}"
    if start_month in (1, 2) and end_month in (5, 6):
        return f"Spring Semester {end_year}"
    if start_month in (5, 6) and end_month in (7, 8):
        return f"Summer Session {start_year}"
    return f"Instructional Period {start_year} to {end_year}"
