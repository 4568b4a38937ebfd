"""Tests for unit conversion and formatting."""

from kicad_drill.units import format_diameter, mm_to_inch, to_nanometres


class TestUnits:
    def test_mm_to_inch(self):
        assert mm_to_inch(25.4) == 1.0

    def test_format_diameter(self):
        assert format_diameter(0.8) == '0.800mm 0.0315"'
        assert format_diameter(3.2) == '3.200mm 0.1260"'

    def test_to_nanometres(self):
        assert to_nanometres(0.8) == 800_000
        assert to_nanometres(0.8000000001) == 800_000
