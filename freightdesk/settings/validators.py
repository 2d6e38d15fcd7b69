"""Value validators attached to settings fields."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, NamedTuple, Optional, Pattern, Tuple
from urllib.parse import urlsplit


class ValidationResult(NamedTuple):
    ok: bool
    reason: str = ""

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(True, "")

    @classmethod
    def failure(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)


def _type_name(value: Any) -> str:
    return type(value).__name__


class Validator(ABC):
    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Checks a single value."""


class TypeValidator(Validator):
    """Accepts instances of ``expected_type``.

    ``True`` and ``False`` are not accepted as numbers: a JSON boolean in a
    numeric field is always an editing mistake.
    """

    def __init__(self, expected_type: type | Tuple[type, ...]) -> None:
        self.expected_types: Tuple[type, ...] = (
            expected_type if isinstance(expected_type, tuple) else (expected_type,)
        )

    @property
    def expected_name(self) -> str:
        return " or ".join(t.__name__ for t in self.expected_types)

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool) and bool not in self.expected_types:
            return ValidationResult.failure(f"expected {self.expected_name}, got bool")
        if isinstance(value, self.expected_types):
            return ValidationResult.success()
        return ValidationResult.failure(f"expected {self.expected_name}, got {_type_name(value)}")


class RangeValidator(Validator):
    def __init__(self, min_value: Optional[float] = None, max_value: Optional[float] = None) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationResult.failure(f"expected a number, got {_type_name(value)}")
        if self.min_value is not None and value < self.min_value:
            return ValidationResult.failure(f"must be at least {self.min_value}")
        if self.max_value is not None and value > self.max_value:
            return ValidationResult.failure(f"must be at most {self.max_value}")
        return ValidationResult.success()


class EnumValidator(Validator):
    def __init__(self, allowed_values: Iterable[Any]) -> None:
        self.allowed_values = tuple(allowed_values)

    def validate(self, value: Any) -> ValidationResult:
        # True == 1 in Python; only accept a bool when a bool is listed
        listed = any(type(option) is type(value) and option == value for option in self.allowed_values)
        if listed:
            return ValidationResult.success()
        return ValidationResult.failure(f"must be one of {list(self.allowed_values)}")


class RegexValidator(Validator):
    """Full match of a string value against ``pattern``."""

    def __init__(self, pattern: str | Pattern[str]) -> None:
        self.pattern: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.failure(f"expected str, got {_type_name(value)}")
        if not self.pattern.fullmatch(value):
            return ValidationResult.failure(f"does not match {self.pattern.pattern!r}")
        return ValidationResult.success()


class UrlValidator(Validator):
    """Absolute http(s) URL with a host."""

    def __init__(self, schemes: Iterable[str] = ("http", "https")) -> None:
        self.schemes = tuple(schemes)

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.failure(f"expected str, got {_type_name(value)}")
        if any(char.isspace() for char in value):
            return ValidationResult.failure("URL must not contain whitespace")
        parts = urlsplit(value)
        if parts.scheme not in self.schemes:
            return ValidationResult.failure(f"URL scheme must be one of {list(self.schemes)}")
        if not parts.netloc:
            return ValidationResult.failure("URL has no host")
        return ValidationResult.success()


class SequenceValidator(Validator):
    """A JSON list whose items all pass ``item_validator``."""

    def __init__(self, item_validator: Validator) -> None:
        self.item_validator = item_validator

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, list):
            return ValidationResult.failure(f"expected list, got {_type_name(value)}")
        for index, item in enumerate(value):
            result = self.item_validator.validate(item)
            if not result.ok:
                return ValidationResult.failure(f"item {index}: {result.reason}")
        return ValidationResult.success()


class MappingValidator(Validator):
    """A JSON object with string keys whose values pass ``value_validator``."""

    def __init__(self, value_validator: Validator) -> None:
        self.value_validator = value_validator

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, dict):
            return ValidationResult.failure(f"expected dict, got {_type_name(value)}")
        for key, item in value.items():
            if not isinstance(key, str):
                return ValidationResult.failure(f"key {key!r} is not a string")
            result = self.value_validator.validate(item)
            if not result.ok:
                return ValidationResult.failure(f"{key}: {result.reason}")
        return ValidationResult.success()


class CompositeValidator(Validator):
    """Stops at the first validator that fails."""

    def __init__(self, validators: Iterable[Validator]) -> None:
        self.validators: List[Validator] = list(validators)

    def validate(self, value: Any) -> ValidationResult:
        for validator in self.validators:
            result = validator.validate(value)
            if not result.ok:
                return result
        return ValidationResult.success()
