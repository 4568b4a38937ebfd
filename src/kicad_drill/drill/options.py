"""
Drill job options.

:class:`DrillJobOptions` is the single, immutable configuration value of a
drill generation request. It is built once per invocation (from the config
file plus command-line overrides) and passed by value into every stage.

Two input corrections are tolerated and logged:

- a precision outside the valid set for the format and unit is clamped to
  the nearest valid pair
- an unknown map plot format selector clamps to PostScript

Every other invalid value raises :class:`ConfigurationError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Tuple, Union

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class DrillFormat(Enum):
    """Drill file encoding."""

    EXCELLON = "excellon"
    GERBER_X2 = "gerber"


class DrillUnits(Enum):
    """Units of an Excellon drill file (Gerber drill files are always mm)."""

    MM = "mm"
    INCH = "inch"


class ZerosFormat(Enum):
    """Excellon coordinate encoding."""

    DECIMAL = "decimal"
    SUPPRESS_LEADING = "suppress-leading"
    SUPPRESS_TRAILING = "suppress-trailing"
    KEEP_ZEROS = "keep-zeros"


class DrillOrigin(Enum):
    """Reference point subtracted from every hole position."""

    ABSOLUTE = "absolute"
    AUXILIARY = "aux"


class MapFormat(Enum):
    """Drill map plot backend.

    The integer values are the historical selector indices.
    """

    HPGL = 0
    POSTSCRIPT = 1
    GERBER = 2
    DXF = 3
    SVG = 4
    PDF = 5

    @property
    def extension(self) -> str:
        return _MAP_EXTENSIONS[self]

    @classmethod
    def from_selector(cls, selector: Union[int, str, "MapFormat", None]) -> MapFormat:
        """Resolve a map format selector.

        Accepts a MapFormat, a selector index or a name ("svg", "pdf", "ps"...).
        An unknown or out-of-range selector clamps to PostScript instead of
        failing.
        """
        if isinstance(selector, MapFormat):
            return selector
        if isinstance(selector, int) and not isinstance(selector, bool):
            for fmt in cls:
                if fmt.value == selector:
                    return fmt
        elif isinstance(selector, str):
            key = selector.strip().lower()
            if key.isdigit():
                return cls.from_selector(int(key))
            if key in _MAP_NAMES:
                return _MAP_NAMES[key]

        logger.warning(f"Unknown map format selector {selector!r}, using PostScript")
        return cls.POSTSCRIPT


_MAP_EXTENSIONS = {
    MapFormat.HPGL: "plt",
    MapFormat.POSTSCRIPT: "ps",
    MapFormat.GERBER: "gbr",
    MapFormat.DXF: "dxf",
    MapFormat.SVG: "svg",
    MapFormat.PDF: "pdf",
}

_MAP_NAMES = {
    "hpgl": MapFormat.HPGL,
    "plt": MapFormat.HPGL,
    "postscript": MapFormat.POSTSCRIPT,
    "ps": MapFormat.POSTSCRIPT,
    "gerber": MapFormat.GERBER,
    "gbr": MapFormat.GERBER,
    "dxf": MapFormat.DXF,
    "svg": MapFormat.SVG,
    "pdf": MapFormat.PDF,
}


@dataclass(frozen=True)
class DrillPrecision:
    """Digits before and after the decimal point of a drill coordinate."""

    integer_digits: int
    decimal_digits: int

    def __str__(self) -> str:
        return f"{self.integer_digits}:{self.decimal_digits}"

    @property
    def width(self) -> int:
        return self.integer_digits + self.decimal_digits


PRECISION_INCH = DrillPrecision(2, 4)
PRECISION_METRIC = DrillPrecision(3, 3)
GERBER_PRECISIONS = (DrillPrecision(4, 5), DrillPrecision(4, 6))


def valid_precisions(drill_format: DrillFormat, units: DrillUnits) -> Tuple[DrillPrecision, ...]:
    """The precision pairs allowed for a format and unit combination."""
    if drill_format == DrillFormat.GERBER_X2:
        return GERBER_PRECISIONS
    if units == DrillUnits.INCH:
        return (PRECISION_INCH,)
    return (PRECISION_METRIC,)


def clamp_precision(
    precision: DrillPrecision | None, drill_format: DrillFormat, units: DrillUnits
) -> DrillPrecision:
    """Clamp a precision to the nearest valid pair for the format and unit.

    ``None`` selects the default (the finest valid pair).
    """
    allowed = valid_precisions(drill_format, units)
    if precision is None:
        return allowed[-1]
    if precision in allowed:
        return precision

    nearest = min(
        allowed,
        key=lambda p: (
            abs(p.decimal_digits - precision.decimal_digits)
            + abs(p.integer_digits - precision.integer_digits),
            -p.decimal_digits,
        ),
    )
    logger.warning(
        f"Precision {precision} is not valid for {drill_format.value} "
        f"({units.value}), using {nearest}"
    )
    return nearest


def _coerce_enum(enum_cls: type, value: Any, name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if member.value == value or member.name.lower() == str(value).lower():
            return member
    choices = ", ".join(str(m.value) for m in enum_cls)
    raise ConfigurationError(
        f"Invalid value for {name}: {value!r}",
        context={"option": name, "value": value},
        suggestions=[f"Use one of: {choices}"],
    )


@dataclass(frozen=True)
class DrillJobOptions:
    """
    Resolved, read-only configuration of a drill generation request.

    Example::

        options = DrillJobOptions(
            units=DrillUnits.INCH,
            zeros=ZerosFormat.SUPPRESS_LEADING,
            merge_pth_npth=True,
            output_dir=Path("fab"),
        )
        options.precision  # DrillPrecision(2, 4), fixed by format + unit
    """

    drill_format: DrillFormat = DrillFormat.EXCELLON
    units: DrillUnits = DrillUnits.MM
    zeros: ZerosFormat = ZerosFormat.DECIMAL
    precision: DrillPrecision | None = None
    mirror_y: bool = False
    minimal_header: bool = False
    merge_pth_npth: bool = False
    route_oval_holes: bool = True
    map_format: MapFormat = MapFormat.POSTSCRIPT
    origin: DrillOrigin = DrillOrigin.ABSOLUTE
    output_dir: Path = field(default_factory=lambda: Path("."))

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(
            self, "drill_format", _coerce_enum(DrillFormat, self.drill_format, "drill_format")
        )
        object.__setattr__(self, "units", _coerce_enum(DrillUnits, self.units, "units"))
        object.__setattr__(self, "zeros", _coerce_enum(ZerosFormat, self.zeros, "zeros"))
        object.__setattr__(self, "origin", _coerce_enum(DrillOrigin, self.origin, "origin"))
        object.__setattr__(self, "map_format", MapFormat.from_selector(self.map_format))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
        if isinstance(self.precision, (tuple, list)):
            object.__setattr__(self, "precision", DrillPrecision(*self.precision))
        object.__setattr__(
            self,
            "precision",
            clamp_precision(self.precision, self.drill_format, self.effective_units),
        )

    @property
    def effective_units(self) -> DrillUnits:
        """Units actually written; Gerber drill files are always millimetres."""
        if self.drill_format == DrillFormat.GERBER_X2:
            return DrillUnits.MM
        return self.units

    @property
    def use_aux_origin(self) -> bool:
        return self.origin == DrillOrigin.AUXILIARY

    def with_changes(self, **changes: Any) -> DrillJobOptions:
        """Return a copy with some fields replaced.

        Changing the format or units re-derives the precision unless a
        precision is given explicitly.
        """
        if ("drill_format" in changes or "units" in changes) and "precision" not in changes:
            changes["precision"] = None
        return replace(self, **changes)
