"""Option objects for validation and generation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ValidationOptions:
    """
    Switches for configuration-level validation.

    Attributes:
        strict_coverage: Check each period against the configuration's own
            teaching days instead of the days the assignments mention
        check_subset: Reject assignment days the configuration does not teach
    """
    strict_coverage: bool = False
    check_subset: bool = True


@dataclass
class GenerationOptions:
    """
    Switches for schedule generation.

    Attributes:
        emit_unassigned_errors: Write an UnderflowError event for teaching-day
            periods nothing is assigned to
        emit_special_days: Let special days replace the periods they cover
    """
    emit_unassigned_errors: bool = True
    emit_special_days: bool = True
