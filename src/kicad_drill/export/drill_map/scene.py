"""
Drill map scene.

The scene is the plot-format independent drawing of a drill map: the board
outline, one marker per hole, oblong outlines for slots and a legend table.
All coordinates are file coordinates (millimetres, Y up), produced with the
same transform as the drill files so map and drill data overlay exactly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ...drill.models import HoleCatalog, HoleRecord, SlotHole, ToolTable
from ...units import format_diameter
from ..coordinates import CoordinateTransform
from .markers import glyph_for

Point = Tuple[float, float]

OUTLINE_WIDTH = 0.15
MARKER_WIDTH = 0.1
LEGEND_GLYPH_SIZE = 2.5
LEGEND_ROW_HEIGHT = 4.0
LEGEND_TEXT_HEIGHT = 1.6
TITLE_TEXT_HEIGHT = 2.5
LEGEND_MARGIN = 6.0
SLOT_ARC_STEPS = 16


@dataclass(frozen=True)
class MapLine:
    start: Point
    end: Point
    width: float = MARKER_WIDTH


@dataclass(frozen=True)
class MapCircle:
    center: Point
    radius: float
    width: float = MARKER_WIDTH


@dataclass(frozen=True)
class MapText:
    """Left-aligned, bottom-anchored text."""

    position: Point
    text: str
    height: float = LEGEND_TEXT_HEIGHT


@dataclass
class MapScene:
    """Primitives of one drill map, split by role."""

    title: str = ""
    outline: List[MapLine] = field(default_factory=list)
    lines: List[MapLine] = field(default_factory=list)
    circles: List[MapCircle] = field(default_factory=list)
    texts: List[MapText] = field(default_factory=list)

    def all_lines(self) -> List[MapLine]:
        return self.outline + self.lines

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of every primitive, text estimated."""
        points = []
        for line in self.all_lines():
            points += [line.start, line.end]
        for circle in self.circles:
            cx, cy = circle.center
            r = circle.radius
            points += [(cx - r, cy - r), (cx + r, cy + r)]
        for text in self.texts:
            x, y = text.position
            points += [(x, y), (x + 0.6 * text.height * len(text.text), y + text.height)]
        if not points:
            return (0.0, 0.0, 0.0, 0.0)
        array = np.asarray(points, dtype=float)
        min_x, min_y = array.min(axis=0)
        max_x, max_y = array.max(axis=0)
        return (float(min_x), float(min_y), float(max_x), float(max_y))


def slot_outline(hole: HoleRecord, transform: CoordinateTransform) -> List[MapLine]:
    """Oblong outline of a slot as straight segments in file coordinates."""
    if not isinstance(hole.shape, SlotHole):
        raise TypeError(f"{hole.source or 'hole'} is not a slot")
    radius = hole.shape.width / 2.0
    start = np.asarray(transform.apply(hole.position))
    end = np.asarray(transform.apply(hole.end_position))
    axis = np.asarray(transform.apply_vector(hole.shape.direction()))
    base = float(np.degrees(np.arctan2(axis[1], axis[0])))

    # End cap around `end` sweeps -90..90 from the axis, cap around `start` the other half
    sweep = np.radians(np.linspace(-90.0, 90.0, SLOT_ARC_STEPS + 1) + base)
    cap = np.stack([np.cos(sweep), np.sin(sweep)], axis=1) * radius
    points = np.vstack([end + cap, start - cap, end[None, :] + cap[:1]])
    return [
        MapLine(tuple(map(float, a)), tuple(map(float, b)))
        for a, b in zip(points[:-1], points[1:])
    ]


def _marker(scene: MapScene, tool_index: int, center: Point, size: float) -> None:
    segments, radius = glyph_for(tool_index).place(center, size)
    scene.lines.extend(MapLine(a, b) for a, b in segments)
    if radius > 0:
        scene.circles.append(MapCircle(center, radius))


def _legend_label(tool, holes: Sequence[HoleRecord], plating: str) -> str:
    count = len(holes)
    slots = sum(1 for hole in holes if hole.is_slot)
    label = f"T{tool.tool_index}  {format_diameter(tool.diameter)}  {count} hole{'s' if count != 1 else ''}"
    if slots:
        label += f" (with {slots} slot{'s' if slots != 1 else ''})"
    return f"{label}  {plating}"


def build_map_scene(
    catalog: HoleCatalog,
    tools: ToolTable,
    transform: Optional[CoordinateTransform] = None,
    outline: Sequence[Tuple[Point, Point]] = (),
    board_name: str = "",
) -> MapScene:
    """
    Build the drill map drawing.

    Args:
        catalog: Hole catalog
        tools: Tool table of the same catalog; marker glyphs follow its numbering
        transform: Origin and mirror transform of the drill files
        outline: Board outline segments in board coordinates
        board_name: Used in the map title

    Returns:
        MapScene in file coordinates
    """
    transform = transform or CoordinateTransform()
    scene = MapScene(title=f"Drill map: {board_name}" if board_name else "Drill map")

    for start, end in outline:
        scene.outline.append(MapLine(transform.apply(start), transform.apply(end), OUTLINE_WIDTH))

    for tool in tools:
        for hole in tool.holes(catalog):
            if hole.is_slot:
                scene.lines.extend(slot_outline(hole, transform))
            _marker(scene, tool.tool_index, transform.apply(hole.centroid), tool.diameter)

    # Legend below the drawing, one row per tool
    min_x, min_y, max_x, _ = scene.bounds()
    y = min_y - LEGEND_MARGIN
    scene.texts.append(MapText((min_x, y), scene.title, TITLE_TEXT_HEIGHT))
    for tool in tools:
        y -= LEGEND_ROW_HEIGHT
        center = (min_x + LEGEND_GLYPH_SIZE / 2.0, y + LEGEND_TEXT_HEIGHT / 2.0)
        _marker(scene, tool.tool_index, center, LEGEND_GLYPH_SIZE)
        label = _legend_label(tool, tool.holes(catalog), tools.plating_label(tool, catalog))
        scene.texts.append(MapText((min_x + LEGEND_GLYPH_SIZE * 2, y), label))

    return scene
