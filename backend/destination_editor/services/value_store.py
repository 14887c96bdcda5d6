"""
In-memory store of the current form values.

Values are tagged (text, number, file) and keyed by the schema's field
names. The store tracks which fields the user touched since the last reset
or hydration.
"""

from collections.abc import Iterable
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from destination_editor.exceptions import HydrationError, UnknownFieldError
from destination_editor.schemas.values import (
    FieldValue,
    FileRef,
    FileValue,
    NumberValue,
    TextValue,
)
from destination_editor.services.validation import FieldRule, FieldType, FormSchema

_field_value_adapter: TypeAdapter[FieldValue] = TypeAdapter(FieldValue)


class FieldValueStore:
    """
    Field name to tagged value mapping, seeded from schema defaults.

    Hydration replaces every field at once or nothing at all.
    """

    def __init__(self, schema: FormSchema):
        self.schema = schema
        self._values: dict[str, FieldValue] = schema.defaults()
        self._dirty: set[str] = set()

    def get(self, name: str) -> FieldValue:
        self._require_rule(name)
        return self._values[name]

    def set(self, name: str, value: Any) -> FieldValue:
        """
        Set a field from a tagged value or a raw Python value.

        Raw values are coerced according to the field's type tag.

        Returns:
            The stored tagged value
        """
        rule = self._require_rule(name)
        stored = coerce_field_value(rule, value)
        self._values[name] = stored
        self._dirty.add(name)
        return stored

    def snapshot(self) -> dict[str, FieldValue]:
        """Return a copy of the current values."""
        return dict(self._values)

    def reset(self) -> None:
        """Restore schema defaults and clear dirty tracking."""
        self._values = self.schema.defaults()
        self._dirty.clear()

    def hydrate(self, values: Mapping[str, Any]) -> None:
        """
        Overwrite every schema field from ``values``.

        Raises:
            HydrationError: If a schema field is missing, an unknown field is
                supplied, or a value cannot be coerced. The store is left
                untouched in that case.
        """
        expected = set(self.schema.field_names)
        supplied = set(values)
        missing = expected - supplied
        unknown = supplied - expected
        if missing or unknown:
            raise HydrationError(
                f"Hydration source does not match schema "
                f"(missing: {sorted(missing)}, unknown: {sorted(unknown)})"
            )

        staged: dict[str, FieldValue] = {}
        for rule in self.schema.rules:
            try:
                staged[rule.name] = coerce_field_value(rule, values[rule.name])
            except (TypeError, ValueError) as e:
                raise HydrationError(f"Cannot hydrate field '{rule.name}': {e}") from e

        self._values = staged
        self._dirty.clear()

    @property
    def is_dirty(self) -> bool:
        return bool(self._dirty)

    @property
    def dirty_fields(self) -> list[str]:
        return [name for name in self.schema.field_names if name in self._dirty]

    def _require_rule(self, name: str) -> FieldRule:
        rule = self.schema.rule(name)
        if rule is None:
            raise UnknownFieldError(name)
        return rule


def coerce_field_value(rule: FieldRule, value: Any) -> FieldValue:
    """
    Wrap a raw value in the tagged value matching the rule's type.

    Already-tagged values and their dict forms are kept as given, even when
    their tag does not match; validation reports such mismatches.
    """
    if isinstance(value, (TextValue, NumberValue, FileValue)):
        return value
    if isinstance(value, dict) and "kind" in value:
        try:
            return _field_value_adapter.validate_python(value)
        except ValidationError as e:
            raise ValueError(str(e)) from e

    if rule.field_type is FieldType.TEXT:
        if value is None:
            return TextValue()
        if not isinstance(value, str):
            raise TypeError(f"Cannot use {type(value).__name__} as text")
        return TextValue(value=value)

    if rule.field_type is FieldType.NUMBER:
        return NumberValue(value=_to_number(value))

    return FileValue(files=_to_files(value))


def _to_number(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    raise TypeError(f"Cannot use {type(value).__name__} as a number")


def _to_files(value: Any) -> tuple[FileRef, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, FileRef):
        return (value,)
    if isinstance(value, str):
        # A bare string is a reference to an already stored file
        return (FileRef(url=value),)
    if isinstance(value, dict):
        return (FileRef(**value),)
    if isinstance(value, Iterable):
        return tuple(ref for item in value for ref in _to_files(item))
    raise TypeError(f"Cannot use {type(value).__name__} as a file")
