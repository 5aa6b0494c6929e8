"""Tests for field validators."""

from __future__ import annotations

from datetime import UTC, datetime

from goatdb import (
    BooleanType,
    DateTimeType,
    EnumType,
    FloatType,
    IntegerType,
    NumberType,
    StringType,
)


class TestStringType:
    """Test string validation."""

    def test_accepts_strings_and_none_by_default(self):
        """Unconstrained strings accept any str and None."""
        validator = StringType()
        assert validator.is_valid("hello")
        assert validator.is_valid("")
        assert validator.is_valid(None)
        assert not validator.is_valid(42)

    def test_non_null(self):
        """Non-null rejects None without substituting."""
        validator = StringType().should_be_non_null()
        assert not validator.is_valid(None)
        assert not validator.substitutes(None)
        assert validator.get_validated_value(None) == ""

    def test_non_empty(self):
        """Non-empty rejects the empty string."""
        validator = StringType().should_be_non_empty()
        assert not validator.is_valid("")
        assert validator.is_valid("x")

    def test_max_length_rejects(self):
        """Over-length strings are rejected without truncation."""
        validator = StringType().should_have_max_length(5)
        assert validator.is_valid("abcde")
        assert not validator.is_valid("abcdef")
        assert not validator.substitutes("abcdef")

    def test_max_length_truncates(self):
        """With truncation enabled over-length strings are substituted."""
        validator = StringType().should_have_max_length(5, truncate=True)
        assert not validator.is_valid("abcdefgh")
        assert validator.substitutes("abcdefgh")
        assert validator.get_validated_value("abcdefgh") == "abcde"

    def test_default(self):
        """None is replaced by the default."""
        validator = StringType().should_default_to("untitled")
        assert not validator.is_valid(None)
        assert validator.substitutes(None)
        assert validator.get_validated_value(None) == "untitled"

    def test_describe(self):
        """Descriptions list the constraints."""
        validator = StringType().should_be_non_null().should_have_max_length(10, truncate=True)
        assert validator.db_type == "string"
        assert validator.describe() == "string(non-null, max_length=10, truncated)"
        assert str(StringType()) == "string"


class TestEnumType:
    """Test enum validation."""

    def test_options(self):
        """Only listed options are valid."""
        validator = EnumType(["low", "high"])
        assert validator.is_valid("low")
        assert not validator.is_valid("medium")
        assert validator.is_valid(None)

    def test_non_null_with_default(self):
        """A default substitutes for None."""
        validator = EnumType(["low", "high"]).should_be_non_null().should_default_to("low")
        assert not validator.is_valid(None)
        assert validator.substitutes(None)
        assert validator.get_validated_value(None) == "low"
        assert "options=['low', 'high']" in validator.describe()


class TestBooleanType:
    """Test boolean validation."""

    def test_only_bools(self):
        """Truthy non-bools are rejected."""
        validator = BooleanType()
        assert validator.is_valid(True)
        assert validator.is_valid(False)
        assert not validator.is_valid(1)
        assert not validator.is_valid("true")

    def test_default(self):
        """Default substitutes for None."""
        validator = BooleanType().should_default_to(False)
        assert not validator.is_valid(None)
        assert validator.substitutes(None)
        assert validator.get_validated_value(None) is False
        assert not BooleanType().substitutes(None)


class TestDateTimeType:
    """Test datetime validation and payload conversion."""

    def test_only_datetimes(self):
        """Strings are not datetimes."""
        validator = DateTimeType()
        assert validator.is_valid(datetime.now(UTC))
        assert not validator.is_valid("2024-01-01")

    def test_serialize_round_trip(self):
        """Datetimes become ISO strings in the payload and come back."""
        validator = DateTimeType()
        moment = datetime(2024, 5, 17, 12, 30, tzinfo=UTC)
        serialized = validator.serialize(moment)
        assert serialized == "2024-05-17T12:30:00+00:00"
        assert validator.deserialize(serialized) == moment

    def test_deserialize_leaves_other_values(self):
        """Non-ISO values are returned unchanged."""
        validator = DateTimeType()
        assert validator.deserialize("not a date") == "not a date"
        assert validator.deserialize(None) is None


class TestNumberTypes:
    """Test numeric validation."""

    def test_number_bounds(self):
        """Min and max are inclusive."""
        validator = NumberType().should_have_min(0).should_have_max(10)
        assert validator.is_valid(0)
        assert validator.is_valid(10.0)
        assert not validator.is_valid(-1)
        assert not validator.is_valid(10.5)
        assert validator.describe() == "number(min=0, max=10)"

    def test_number_rejects_bools_nan_and_strings(self):
        """Bools, NaN and numeric strings are not numbers."""
        validator = NumberType()
        assert not validator.is_valid(True)
        assert not validator.is_valid(float("nan"))
        assert not validator.is_valid("5")

    def test_integer(self):
        """Integral floats are accepted and normalised."""
        validator = IntegerType()
        assert validator.is_valid(3)
        assert validator.is_valid(3.0)
        assert not validator.is_valid(3.5)
        assert validator.get_validated_value(3.0) == 3
        assert isinstance(validator.get_validated_value(3.0), int)

    def test_float(self):
        """Ints are accepted and normalised to floats."""
        validator = FloatType().should_be_non_null().should_default_to(1)
        assert validator.is_valid(2)
        assert validator.substitutes(None)
        assert validator.get_validated_value(None) == 1.0
        assert isinstance(validator.get_validated_value(None), float)
