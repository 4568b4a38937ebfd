"""
Unit conversion and display formatting for kicad-drill.

All internal lengths are stored in millimetres. Drill files are written in
millimetres or inches; reports and map legends show both.
"""

from __future__ import annotations

__all__ = [
    "MM_PER_INCH",
    "NM_PER_MM",
    "to_nanometres",
    "mm_to_inch",
    "format_diameter",
]

MM_PER_INCH = 25.4
NM_PER_MM = 1_000_000


def to_nanometres(value_mm: float) -> int:
    """Quantize a millimetre length to integer nanometres.

    Used as the comparison key for drill sizes so float noise from board
    files never splits one physical tool into two.
    """
    return int(round(value_mm * NM_PER_MM))


def mm_to_inch(value_mm: float) -> float:
    return value_mm / MM_PER_INCH


def format_diameter(value_mm: float) -> str:
    """Format a drill diameter in both millimetres and inches.

    >>> format_diameter(0.8)
    '0.800mm 0.0315"'
    """
    return f"{value_mm:.3f}mm {mm_to_inch(value_mm):.4f}\""
