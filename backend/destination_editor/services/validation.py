"""
Declarative validation schema for form values.

A schema is an immutable tuple of field rules. Each rule names a field, its
type tag and an ordered list of constraints; the first failing constraint is
the field's error. Rules are evaluated independently so every failing field
is reported in one pass.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from destination_editor.config import Settings
from destination_editor.schemas.form_state import (
    ErrorCode,
    FieldValidationError,
    ValidationResult,
)
from destination_editor.schemas.values import (
    FieldValue,
    FileRef,
    FileValue,
    NumberValue,
    TextValue,
)

logger = logging.getLogger(__name__)


class FieldType(str, Enum):
    """Type tag of a form field."""

    TEXT = "text"
    NUMBER = "number"
    FILE = "file"


@dataclass(frozen=True)
class Constraint:
    """
    A single acceptance check on a field's unwrapped value.

    ``check`` returns True when the value is acceptable.
    """

    code: ErrorCode
    message: str
    check: Callable[[Any], bool] = field(compare=False, repr=False)


@dataclass(frozen=True)
class FieldRule:
    """Type tag, default and ordered constraints for one field."""

    name: str
    field_type: FieldType
    constraints: tuple[Constraint, ...] = ()
    default: FieldValue | None = None

    def default_value(self) -> FieldValue:
        if self.default is not None:
            return self.default
        if self.field_type is FieldType.TEXT:
            return TextValue()
        if self.field_type is FieldType.NUMBER:
            return NumberValue()
        return FileValue()

    def evaluate(self, value: FieldValue | None) -> list[FieldValidationError]:
        """Return every failing constraint for ``value``, in declaration order."""
        if value is None:
            value = self.default_value()

        if value.kind != self.field_type.value:
            return [
                FieldValidationError(
                    field=self.name,
                    message=f"Expected {self.field_type.value}, received {value.kind}",
                    code=ErrorCode.INVALID_TYPE,
                )
            ]

        if self.field_type is FieldType.NUMBER and not _is_number(value.value):
            return [
                FieldValidationError(
                    field=self.name,
                    message="Expected number",
                    code=ErrorCode.INVALID_TYPE,
                )
            ]

        subject = unwrap(value)
        return [
            FieldValidationError(field=self.name, message=c.message, code=c.code)
            for c in self.constraints
            if not c.check(subject)
        ]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def unwrap(value: FieldValue) -> Any:
    """
    Extract the plain value constraints operate on.

    File fields unwrap to their first file (or None), text and number fields
    to their raw value.
    """
    if isinstance(value, FileValue):
        return value.first
    return value.value


@dataclass(frozen=True)
class FormSchema:
    """Immutable set of field rules for one entity type."""

    rules: tuple[FieldRule, ...]

    def __post_init__(self):
        names = [rule.name for rule in self.rules]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in schema: {names}")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    def rule(self, name: str) -> FieldRule | None:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def defaults(self) -> dict[str, FieldValue]:
        return {rule.name: rule.default_value() for rule in self.rules}

    def validate(self, values: Mapping[str, FieldValue]) -> ValidationResult:
        """
        Validate a snapshot of form values.

        Args:
            values: Field name to tagged value; missing fields use defaults

        Returns:
            ValidationResult with unwrapped values when valid, or the first
            error per failing field plus every failing constraint otherwise
        """
        errors: list[FieldValidationError] = []
        issues: list[FieldValidationError] = []
        validated: dict[str, Any] = {}

        for rule in self.rules:
            value = values.get(rule.name)
            failures = rule.evaluate(value)
            if failures:
                errors.append(failures[0])
                issues.extend(failures)
            else:
                validated[rule.name] = unwrap(value if value is not None else rule.default_value())

        if errors:
            logger.debug(
                "Validation failed for fields: %s", ", ".join(e.field for e in errors)
            )
            return ValidationResult(valid=False, errors=errors, issues=issues)

        return ValidationResult(valid=True, values=validated)


# Constraint factories


def not_blank(message: str) -> Constraint:
    """Text must contain at least one non-whitespace character."""
    return Constraint(
        code=ErrorCode.EMPTY,
        message=message,
        check=lambda v: isinstance(v, str) and len(v.strip()) >= 1,
    )


def at_least(minimum: int | float, message: str) -> Constraint:
    return Constraint(
        code=ErrorCode.BELOW_MINIMUM,
        message=message,
        check=lambda v: v >= minimum,
    )


def at_most(maximum: int | float, message: str) -> Constraint:
    return Constraint(
        code=ErrorCode.ABOVE_MAXIMUM,
        message=message,
        check=lambda v: v <= maximum,
    )


def max_file_size(max_bytes: int, message: str) -> Constraint:
    """First file must declare a size no larger than ``max_bytes``."""

    def check(file: FileRef | None) -> bool:
        return file is not None and file.size is not None and file.size <= max_bytes

    return Constraint(code=ErrorCode.SIZE, message=message, check=check)


def file_type_in(accepted: tuple[str, ...], message: str) -> Constraint:
    """First file must declare one of the ``accepted`` MIME types."""

    def check(file: FileRef | None) -> bool:
        return file is not None and file.content_type in accepted

    return Constraint(code=ErrorCode.TYPE, message=message, check=check)


DESTINATION_FIELDS = ("destination", "image", "description", "price", "rating")


def build_destination_schema(settings: Settings) -> FormSchema:
    """
    Build the destination form schema from configured limits.

    The rating upper bound is only enforced when ``rating_enforce_max`` is
    set; by default a rating above ``rating_max`` is accepted.
    """
    rating_constraints = [
        at_least(settings.rating_min, "Please enter a valid rating"),
    ]
    if settings.rating_enforce_max:
        rating_constraints.append(at_most(settings.rating_max, "Please enter a valid rating"))

    return FormSchema(
        rules=(
            FieldRule(
                name="destination",
                field_type=FieldType.TEXT,
                constraints=(not_blank("Please enter a valid destination name"),),
            ),
            FieldRule(
                name="image",
                field_type=FieldType.FILE,
                constraints=(
                    max_file_size(settings.max_image_size_bytes, "Max image size is 5MB."),
                    file_type_in(
                        tuple(settings.accepted_image_types),
                        "Only .jpg, .jpeg, .png and .webp formats are supported.",
                    ),
                ),
            ),
            FieldRule(
                name="description",
                field_type=FieldType.TEXT,
                constraints=(not_blank("Please enter a valid description"),),
            ),
            FieldRule(
                name="price",
                field_type=FieldType.TEXT,
                constraints=(not_blank("Please enter a valid price"),),
            ),
            FieldRule(
                name="rating",
                field_type=FieldType.NUMBER,
                constraints=tuple(rating_constraints),
                default=NumberValue(value=settings.rating_default),
            ),
        )
    )
