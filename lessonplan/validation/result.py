"""Validation result container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass
class ValidationResult:
    """
    Accumulated validation messages.

    Validators never raise for bad input; they collect every problem here so
    a caller can present the full list in one go.
    """
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_errors(self, messages: Iterable[str]) -> None:
        self.errors.extend(messages)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Append another result's messages to this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
