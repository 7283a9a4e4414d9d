"""ValidationResult — outcome of a command's validation predicate."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    """Collects field-level validation errors for one command.

    Usage::

        def validate_command(self) -> ValidationResult:
            result = ValidationResult()
            result.require("user_id", bool(self.user_id), "user ID cannot be empty")
            return result
    """

    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls) -> ValidationResult:
        return cls()

    @classmethod
    def failure(cls, errors: dict[str, list[str]]) -> ValidationResult:
        return cls(errors=errors)

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)

    def require(self, field_name: str, condition: bool, message: str) -> None:
        """Record *message* against *field_name* unless *condition* holds."""
        if not condition:
            self.add_error(field_name, message)

    def merge(self, other: ValidationResult) -> ValidationResult:
        merged = {name: list(messages) for name, messages in self.errors.items()}
        for field_name, messages in other.errors.items():
            merged.setdefault(field_name, []).extend(messages)
        return ValidationResult(errors=merged)

    def __bool__(self) -> bool:
        return self.is_valid
