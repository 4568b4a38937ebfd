"""
Drill marker glyphs.

Each tool gets a glyph so holes of different tools can be told apart on a
map. Glyphs are cycled by tool index and scaled to the tool diameter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

Point = Tuple[float, float]
Stroke = Tuple[Point, ...]


@dataclass(frozen=True)
class Glyph:
    """A marker drawn in a unit box centred on the origin.

    Attributes:
        strokes: Open polylines, coordinates within [-0.5, 0.5]
        circle: Draw a circle of diameter 1 as well
    """

    strokes: Tuple[Stroke, ...] = ()
    circle: bool = False

    def place(self, center: Point, size: float) -> Tuple[List[Tuple[Point, Point]], float]:
        """Scale to ``size`` and move to ``center``.

        Returns:
            (segments, circle_radius); the radius is 0 when the glyph has no circle
        """
        cx, cy = center
        segments = []
        for stroke in self.strokes:
            points = [(cx + x * size, cy + y * size) for x, y in stroke]
            segments.extend(zip(points, points[1:]))
        return segments, (size / 2.0 if self.circle else 0.0)


def _regular_polygon(sides: int, rotation: float = 90.0) -> Stroke:
    points = []
    for i in range(sides + 1):
        angle = math.radians(rotation + 360.0 * i / sides)
        points.append((0.5 * math.cos(angle), 0.5 * math.sin(angle)))
    return tuple(points)


_PLUS = (((-0.5, 0.0), (0.5, 0.0)), ((0.0, -0.5), (0.0, 0.5)))
_CROSS = (((-0.35, -0.35), (0.35, 0.35)), ((-0.35, 0.35), (0.35, -0.35)))
_SQUARE = (((-0.5, -0.5), (0.5, -0.5), (0.5, 0.5), (-0.5, 0.5), (-0.5, -0.5)),)
_DIAMOND = (((0.0, -0.5), (0.5, 0.0), (0.0, 0.5), (-0.5, 0.0), (0.0, -0.5)),)

GLYPHS: Tuple[Glyph, ...] = (
    Glyph(_PLUS, circle=True),
    Glyph(_CROSS, circle=True),
    Glyph(_SQUARE + _PLUS),
    Glyph(_SQUARE + _CROSS),
    Glyph(_DIAMOND + _PLUS),
    Glyph(_DIAMOND),
    Glyph((_regular_polygon(3),)),
    Glyph((_regular_polygon(3, rotation=-90.0),) + _PLUS[:1]),
    Glyph((_regular_polygon(6),) + _CROSS),
    Glyph(_PLUS),
    Glyph(_CROSS),
    Glyph((((-0.5, 0.0), (0.5, 0.0)),), circle=True),
    Glyph((((0.0, -0.5), (0.0, 0.5)),), circle=True),
    Glyph(_SQUARE),
)


def glyph_for(tool_index: int) -> Glyph:
    """Glyph of a 1-based tool index; glyphs repeat after the last one."""
    return GLYPHS[(tool_index - 1) % len(GLYPHS)]
