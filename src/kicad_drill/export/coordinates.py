"""
Coordinate transform and fixed-width number encoding shared by the drill
writers and the drill map.

Board coordinates are millimetres with Y pointing down. Drill files and maps
are written with Y pointing up, relative to the selected origin, optionally
mirrored about the X axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..drill.options import DrillJobOptions, DrillPrecision, DrillUnits, ZerosFormat
from ..exceptions import ConfigurationError, CoordinateOverflow
from ..schema.pcb import BoardSnapshot
from ..units import mm_to_inch

Point = Tuple[float, float]


@dataclass(frozen=True)
class CoordinateTransform:
    """Board (Y-down) to file (Y-up) coordinate mapping.

    Example::

        t = CoordinateTransform(origin=(100.0, 100.0))
        t.apply((110.0, 95.0))  # (10.0, 5.0)
    """

    origin: Point = (0.0, 0.0)
    mirror_y: bool = False

    @classmethod
    def for_job(cls, board: BoardSnapshot, options: DrillJobOptions) -> CoordinateTransform:
        origin = board.aux_origin if options.use_aux_origin else (0.0, 0.0)
        return cls(origin=origin, mirror_y=options.mirror_y)

    @classmethod
    def for_options(cls, options: DrillJobOptions) -> CoordinateTransform:
        """Transform for callers that have no board at hand.

        Raises:
            ConfigurationError: If the options select the auxiliary origin,
                which is only known from the board
        """
        if options.use_aux_origin:
            raise ConfigurationError(
                "The auxiliary origin needs the board to resolve",
                context={"origin": options.origin.value},
                suggestions=[
                    "Pass transform=CoordinateTransform.for_job(board, options)",
                    "Use DrillJob, which builds the transform from the board",
                ],
            )
        return cls(mirror_y=options.mirror_y)

    def apply(self, point: Point) -> Point:
        x = point[0] - self.origin[0]
        y = -(point[1] - self.origin[1])
        if self.mirror_y:
            y = -y
        return (x, y)

    def apply_vector(self, vector: Point) -> Point:
        """Map a direction (no origin offset)."""
        dy = -vector[1]
        if self.mirror_y:
            dy = -dy
        return (vector[0], dy)


def to_file_units(value_mm: float, units: DrillUnits) -> float:
    if units == DrillUnits.INCH:
        return mm_to_inch(value_mm)
    return value_mm


def _scaled(value: float, precision: DrillPrecision, hole: str) -> int:
    scaled = int(round(abs(value) * 10**precision.decimal_digits))
    if scaled >= 10**precision.width:
        raise CoordinateOverflow(
            value, precision.integer_digits, precision.decimal_digits, hole=hole
        )
    return scaled


def format_excellon_number(
    value: float, precision: DrillPrecision, zeros: ZerosFormat, hole: str = ""
) -> str:
    """
    Encode one coordinate (already in file units) for an Excellon file.

    Args:
        value: Coordinate in file units
        precision: Integer and decimal digit counts of the field
        zeros: Encoding mode
        hole: Hole description used in the overflow error

    Returns:
        "12.340" in decimal mode, "12340" / "01234" / "012340" in the
        suppressed and full-field modes

    Raises:
        CoordinateOverflow: If the value does not fit the field
    """
    scaled = _scaled(value, precision, hole)
    sign = "-" if value < 0 and scaled else ""

    if zeros == ZerosFormat.DECIMAL:
        text = f"{scaled / 10**precision.decimal_digits:.{precision.decimal_digits}f}"
        return sign + text

    digits = f"{scaled:0{precision.width}d}"
    if zeros == ZerosFormat.SUPPRESS_LEADING:
        digits = digits.lstrip("0") or "0"
    elif zeros == ZerosFormat.SUPPRESS_TRAILING:
        digits = digits.rstrip("0") or "0"
    return sign + digits


def format_gerber_number(value: float, precision: DrillPrecision, hole: str = "") -> str:
    """Encode one millimetre coordinate for a Gerber file (leading zeros omitted)."""
    scaled = _scaled(value, precision, hole)
    sign = "-" if value < 0 and scaled else ""
    return f"{sign}{scaled}"


def parse_excellon_number(text: str, precision: DrillPrecision, zeros: ZerosFormat) -> float:
    """Decode a coordinate written by :func:`format_excellon_number`."""
    if zeros == ZerosFormat.DECIMAL or "." in text:
        return float(text)
    sign = -1.0 if text.startswith("-") else 1.0
    digits = text.lstrip("+-")
    if zeros == ZerosFormat.SUPPRESS_TRAILING:
        digits = digits.ljust(precision.width, "0")
    return sign * int(digits) / 10**precision.decimal_digits
