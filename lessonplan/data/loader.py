"""Load configurations, curricula and special days from JSON files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from lessonplan.data.models import Curriculum, ScheduleConfiguration, SpecialDay
from lessonplan.errors import DataValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_USER_ID = 1


def read_json(path: Union[str, Path]) -> Any:
    """
    Read a JSON file and convert camelCase keys to snake_case.

    Raises:
        DataValidationError: If the file is missing or not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise DataValidationError(f"File not found: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DataValidationError(f"Invalid JSON in {path}: {e}") from e
    return convert_keys_to_snake_case(data)


def load_configuration(path: Union[str, Path], user_id: int = DEFAULT_USER_ID) -> ScheduleConfiguration:
    """
    Load a schedule configuration.

    A ``schoolYear`` in the file is ignored; the label is derived from the
    dates. ``userId`` defaults to ``user_id`` when absent.

    Raises:
        DataValidationError: If the file cannot be read or fails validation
    """
    data = read_json(path)
    if not isinstance(data, dict):
        raise DataValidationError("Configuration file must contain a JSON object")
    data.setdefault("user_id", user_id)
    return _validate(ScheduleConfiguration, data, "configuration")


def load_curriculum(path: Union[str, Path]) -> Curriculum:
    """
    Load a curriculum tree.

    Raises:
        DataValidationError: If the file cannot be read or fails validation
    """
    data = read_json(path)
    if not isinstance(data, dict):
        raise DataValidationError("Curriculum file must contain a JSON object")
    return _validate(Curriculum, data, "curriculum")


def load_special_days(path: Union[str, Path]) -> list[SpecialDay]:
    """
    Load special days from a list, or from an object with a ``specialDays`` list.

    Raises:
        DataValidationError: If the file cannot be read or any entry is invalid
    """
    data = read_json(path)
    if isinstance(data, dict):
        data = data.get("special_days", [])
    if not isinstance(data, list):
        raise DataValidationError("Special days file must contain a list")

    errors: list[str] = []
    special_days: list[SpecialDay] = []
    for i, item in enumerate(data):
        try:
            special_days.append(SpecialDay.model_validate(item))
        except ValidationError as e:
            errors.extend(f"special day {i}: {msg}" for msg in format_validation_errors(e))
    if errors:
        raise DataValidationError("; ".join(errors))
    return special_days


def format_validation_errors(error: ValidationError) -> list[str]:
    """One readable line per pydantic error."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"{location}: {item['msg']}" if location else item["msg"])
    return lines


def _validate(model: Type[ModelT], data: dict, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DataValidationError(
            f"Invalid {what}: " + "; ".join(format_validation_errors(e))
        ) from e


def convert_keys_to_snake_case(obj: Any) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""

    def to_snake_case(name: str) -> str:
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
        return name.lower()

    if isinstance(obj, dict):
        return {to_snake_case(k): convert_keys_to_snake_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj
