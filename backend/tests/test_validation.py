"""
Tests for the destination validation schema.
"""

import pytest

from destination_editor.config import Settings
from destination_editor.schemas.form_state import ErrorCode
from destination_editor.schemas.values import FileRef, FileValue, NumberValue, TextValue
from destination_editor.services.validation import (
    FieldRule,
    FieldType,
    FormSchema,
    build_destination_schema,
)

SIZE_MESSAGE = "Max image size is 5MB."
TYPE_MESSAGE = "Only .jpg, .jpeg, .png and .webp formats are supported."


def with_image(values: dict, **file_kwargs) -> dict:
    return {**values, "image": FileValue(files=(FileRef(**file_kwargs),))}


class TestDestinationSchema:
    """Tests for the rules built by build_destination_schema."""

    def test_valid_values_pass(self, schema, valid_tagged_values, png):
        """Test that values satisfying every rule validate cleanly."""
        result = schema.validate(valid_tagged_values)

        assert result.valid
        assert result.errors == []
        assert result.issues == []
        assert result.values == {
            "destination": "Raja Ampat",
            "image": png,
            "description": "Coral reefs and islands",
            "price": "Rp. 2.000.000",
            "rating": 5,
        }

    def test_defaults_fail_every_field(self, schema):
        """Test that every field is evaluated independently."""
        result = schema.validate(schema.defaults())

        assert not result.valid
        assert result.values is None
        assert result.messages == {
            "destination": "Please enter a valid destination name",
            "image": SIZE_MESSAGE,
            "description": "Please enter a valid description",
            "price": "Please enter a valid price",
            "rating": "Please enter a valid rating",
        }

    def test_missing_fields_use_defaults(self, schema):
        """Test that absent fields are validated as their defaults."""
        result = schema.validate({})

        assert set(result.messages) == set(schema.field_names)

    @pytest.mark.parametrize("field", ["destination", "description", "price"])
    def test_blank_text_is_empty(self, schema, valid_tagged_values, field):
        """Test that whitespace-only text fails with EMPTY."""
        values = {**valid_tagged_values, field: TextValue(value="   ")}

        result = schema.validate(values)

        assert [e.field for e in result.errors] == [field]
        assert result.errors[0].code == ErrorCode.EMPTY

    def test_price_is_not_coerced(self, schema, valid_tagged_values):
        """Test that price stays a raw string."""
        values = {**valid_tagged_values, "price": TextValue(value="about 10k")}

        result = schema.validate(values)

        assert result.valid
        assert result.values["price"] == "about 10k"


class TestImageRules:
    """Tests for the image size and type constraints."""

    def test_one_byte_over_limit_fails_size(self, schema, valid_tagged_values):
        """Test that a 500,001 byte image fails with the size message."""
        values = with_image(valid_tagged_values, size=500_001, content_type="image/png")

        result = schema.validate(values)

        assert result.messages == {"image": SIZE_MESSAGE}
        assert result.errors[0].code == ErrorCode.SIZE

    def test_size_message_wins_regardless_of_type(self, schema, valid_tagged_values):
        """Test that size is reported first even when the type is also wrong."""
        values = with_image(valid_tagged_values, size=500_001, content_type="image/gif")

        result = schema.validate(values)

        assert result.messages == {"image": SIZE_MESSAGE}
        assert [i.code for i in result.issues] == [ErrorCode.SIZE, ErrorCode.TYPE]

    def test_exact_limit_passes(self, schema, valid_tagged_values):
        """Test that exactly 500,000 bytes is accepted."""
        values = with_image(valid_tagged_values, size=500_000, content_type="image/webp")

        assert schema.validate(values).valid

    def test_gif_fails_type(self, schema, valid_tagged_values):
        """Test that a small GIF fails with the type message."""
        values = with_image(valid_tagged_values, size=100, content_type="image/gif")

        result = schema.validate(values)

        assert result.messages == {"image": TYPE_MESSAGE}
        assert result.errors[0].code == ErrorCode.TYPE

    @pytest.mark.parametrize(
        "content_type", ["image/jpeg", "image/jpg", "image/png", "image/webp"]
    )
    def test_accepted_types(self, schema, valid_tagged_values, content_type):
        """Test each accepted MIME type."""
        values = with_image(valid_tagged_values, size=1024, content_type=content_type)

        assert schema.validate(values).valid

    def test_no_file_fails_both_constraints(self, schema, valid_tagged_values):
        """Test that a missing file fails size and type."""
        values = {**valid_tagged_values, "image": FileValue()}

        result = schema.validate(values)

        assert result.messages == {"image": SIZE_MESSAGE}
        assert [i.message for i in result.issues] == [SIZE_MESSAGE, TYPE_MESSAGE]

    def test_remote_reference_fails(self, schema, valid_tagged_values):
        """Test that a URL-only file (as hydrated from a record) is rejected."""
        values = with_image(valid_tagged_values, url="https://cdn.example.com/bali.png")

        result = schema.validate(values)

        assert "image" in result.messages

    def test_only_first_file_counts(self, schema, valid_tagged_values, png):
        """Test that later files are ignored."""
        gif = FileRef(size=100, content_type="image/gif")
        values = {**valid_tagged_values, "image": FileValue(files=(png, gif))}

        result = schema.validate(values)

        assert result.valid
        assert result.values["image"] == png


class TestRatingRules:
    """Tests for the rating constraints."""

    def test_zero_is_below_minimum(self, schema, valid_tagged_values):
        """Test that rating 0 fails with BELOW_MINIMUM."""
        values = {**valid_tagged_values, "rating": NumberValue(value=0)}

        result = schema.validate(values)

        assert result.errors[0].code == ErrorCode.BELOW_MINIMUM
        assert result.messages == {"rating": "Please enter a valid rating"}

    @pytest.mark.parametrize("rating", [1, 5, 6, 42])
    def test_upper_bound_not_enforced_by_default(self, schema, valid_tagged_values, rating):
        """Test that ratings above five are accepted unless configured."""
        values = {**valid_tagged_values, "rating": NumberValue(value=rating)}

        assert schema.validate(values).valid

    def test_upper_bound_can_be_enforced(self, valid_tagged_values):
        """Test the opt-in upper bound."""
        schema = build_destination_schema(Settings(_env_file=None, rating_enforce_max=True))
        values = {**valid_tagged_values, "rating": NumberValue(value=6)}

        result = schema.validate(values)

        assert result.errors[0].code == ErrorCode.ABOVE_MAXIMUM
        valid = {**valid_tagged_values, "rating": NumberValue(value=5)}
        assert schema.validate(valid).valid

    def test_missing_number_is_invalid_type(self, schema, valid_tagged_values):
        """Test that an empty number input is rejected."""
        values = {**valid_tagged_values, "rating": NumberValue(value=None)}

        result = schema.validate(values)

        assert result.errors[0].code == ErrorCode.INVALID_TYPE
        assert result.messages == {"rating": "Expected number"}

    def test_tag_mismatch_is_invalid_type(self, schema, valid_tagged_values):
        """Test that a text value in a number field is rejected."""
        values = {**valid_tagged_values, "rating": TextValue(value="5")}

        result = schema.validate(values)

        assert result.messages == {"rating": "Expected number, received text"}

    def test_thresholds_come_from_settings(self, valid_tagged_values):
        """Test that the minimum rating is injected from settings."""
        schema = build_destination_schema(Settings(_env_file=None, rating_min=3))
        values = {**valid_tagged_values, "rating": NumberValue(value=2)}

        assert not schema.validate(values).valid


class TestFormSchema:
    """Tests for generic schema behaviour."""

    def test_duplicate_field_names_rejected(self):
        """Test that a schema cannot declare a field twice."""
        with pytest.raises(ValueError):
            FormSchema(
                rules=(
                    FieldRule(name="a", field_type=FieldType.TEXT),
                    FieldRule(name="a", field_type=FieldType.NUMBER),
                )
            )

    def test_default_values_per_type(self):
        """Test type-derived defaults."""
        schema = FormSchema(
            rules=(
                FieldRule(name="t", field_type=FieldType.TEXT),
                FieldRule(name="n", field_type=FieldType.NUMBER),
                FieldRule(name="f", field_type=FieldType.FILE),
            )
        )

        assert schema.defaults() == {
            "t": TextValue(value=""),
            "n": NumberValue(value=None),
            "f": FileValue(files=()),
        }

    def test_destination_defaults(self, schema):
        """Test that rating defaults to zero."""
        defaults = schema.defaults()

        assert defaults["rating"] == NumberValue(value=0)
        assert defaults["destination"] == TextValue(value="")

    def test_unknown_rule_lookup(self, schema):
        """Test that rule() returns None for undeclared fields."""
        assert schema.rule("id") is None
        assert schema.rule("rating").field_type is FieldType.NUMBER
