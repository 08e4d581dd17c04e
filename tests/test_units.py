"""Tests for the units module."""

from recipe_pipeline.units import (
    FRACTION_GLYPHS,
    MeasurementUnit,
    MeasurementValue,
    to_fraction_string,
)


class TestMeasurementUnit:
    """Tests for MeasurementUnit lookup."""

    def test_names_and_aliases(self):
        """Test canonical names, plurals and abbreviations."""
        assert MeasurementUnit.from_string("cup") == MeasurementUnit.CUP
        assert MeasurementUnit.from_string("cups") == MeasurementUnit.CUP
        assert MeasurementUnit.from_string("Tbsp") == MeasurementUnit.TABLESPOON
        assert MeasurementUnit.from_string("tsp.") == MeasurementUnit.TEASPOON
        assert MeasurementUnit.from_string("LBS") == MeasurementUnit.POUND
        assert MeasurementUnit.from_string("litres") == MeasurementUnit.LITER

    def test_unknown_tokens(self):
        """Test that non-unit words are not units."""
        assert MeasurementUnit.from_string("flour") is None
        assert MeasurementUnit.from_string("large") is None
        assert MeasurementUnit.from_string("") is None
        assert MeasurementUnit.from_string(None) is None

    def test_display(self):
        """Test display name and shorthand."""
        assert MeasurementUnit.TABLESPOON.display_name == "tablespoon"
        assert MeasurementUnit.TABLESPOON.short_hand == "tbsp"
        assert MeasurementUnit.CUP.short_hand == "c"

    def test_every_unit_has_shorthand(self):
        """Test that the shorthand table covers the whole enum."""
        for unit in MeasurementUnit:
            assert unit.short_hand


class TestMeasurementValue:
    """Tests for MeasurementValue."""

    def test_fraction_symbols(self):
        """Test glyphs for fractional values."""
        assert MeasurementValue.HALF.display_symbol == "½"
        assert MeasurementValue.THREE_QUARTERS.display_symbol == "¾"

    def test_whole_number_symbols(self):
        """Test whole numbers render as digits."""
        assert MeasurementValue.TWO.display_symbol == "2"
        assert MeasurementValue.ZERO.display_symbol == "0"

    def test_groupings(self):
        """Test the fraction and number groupings."""
        assert len(MeasurementValue.fractions()) == 5
        assert MeasurementValue.numbers()[0] == MeasurementValue.ONE
        assert MeasurementValue.numbers()[-1] == MeasurementValue.ZERO


class TestToFractionString:
    """Tests for to_fraction_string function."""

    def test_whole_numbers(self):
        """Test whole numbers drop the decimal part."""
        assert to_fraction_string(2.0) == "2"
        assert to_fraction_string(0) == "0"

    def test_fractions(self):
        """Test fractional values reduce."""
        assert to_fraction_string(0.75) == "3/4"
        assert to_fraction_string(0.5) == "1/2"
        assert to_fraction_string(1.5) == "3/2"


class TestFractionGlyphs:
    """Tests for the fraction glyph table."""

    def test_values(self):
        """Test a few glyph values."""
        assert FRACTION_GLYPHS["½"] == 0.5
        assert FRACTION_GLYPHS["¼"] == 0.25
        assert FRACTION_GLYPHS["⅛"] == 0.125
