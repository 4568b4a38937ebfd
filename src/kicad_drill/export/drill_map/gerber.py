"""Gerber drill map plotter.

Uses the same fixed 4.6 millimetre number format as the Gerber drill files.
Text is stroked from matplotlib text paths since Gerber has no fonts.
"""

from __future__ import annotations

from typing import Iterator, List, Tuple

from ...drill.options import DrillPrecision
from ..coordinates import format_gerber_number
from .scene import MapScene, MapText

MAP_PRECISION = DrillPrecision(4, 6)
TEXT_STROKE_WIDTH = 0.1


def _xy(point: Tuple[float, float]) -> str:
    x = format_gerber_number(point[0], MAP_PRECISION)
    y = format_gerber_number(point[1], MAP_PRECISION)
    return f"X{x}Y{y}"


def text_polylines(text: MapText) -> Iterator[List[Tuple[float, float]]]:
    """Closed outline polylines of a text label, in map coordinates."""
    from matplotlib.font_manager import FontProperties
    from matplotlib.textpath import TextPath

    prop = FontProperties(family=["sans-serif"], size=text.height)
    path = TextPath(text.position, text.text, size=text.height, prop=prop)
    for polygon in path.to_polygons():
        if len(polygon) >= 2:
            yield [(float(x), float(y)) for x, y in polygon]


def render_gerber_map(scene: MapScene) -> str:
    """Render a map scene as a Gerber X2 drawing layer."""
    # Aperture per stroke width, D10 upwards
    widths = sorted(
        {line.width for line in scene.all_lines()}
        | {circle.width for circle in scene.circles}
        | {TEXT_STROKE_WIDTH}
    )
    apertures = {width: 10 + i for i, width in enumerate(widths)}

    digits = MAP_PRECISION.decimal_digits
    out = [
        "%TF.GenerationSoftware,kicad-drill*%",
        "%TF.FileFunction,Drillmap*%",
        "%TF.FilePolarity,Positive*%",
        f"%FSLAX4{digits}Y4{digits}*%",
        f"G04 {scene.title}*",
        "%MOMM*%",
        "%LPD*%",
        "G04 APERTURE LIST*",
    ]
    for width, code in apertures.items():
        out.append(f"%ADD{code}C,{width:.6f}*%")
    out += ["G04 APERTURE END LIST*", "G01*", "G75*"]

    current = None

    def select(width: float) -> None:
        nonlocal current
        if current != width:
            out.append(f"D{apertures[width]}*")
            current = width

    for line in scene.all_lines():
        select(line.width)
        out.append(f"{_xy(line.start)}D02*")
        out.append(f"{_xy(line.end)}D01*")

    for circle in scene.circles:
        # Full circle: start and end on the same point, centre offset in I/J
        select(circle.width)
        cx, cy = circle.center
        start = (cx + circle.radius, cy)
        offset = format_gerber_number(-circle.radius, MAP_PRECISION)
        out.append(f"{_xy(start)}D02*")
        out.append(f"G02{_xy(start)}I{offset}J0D01*")
        out.append("G01*")

    select(TEXT_STROKE_WIDTH)
    for text in scene.texts:
        for polyline in text_polylines(text):
            out.append(f"{_xy(polyline[0])}D02*")
            out.extend(f"{_xy(point)}D01*" for point in polyline[1:])

    out.append("M02*")
    return "\n".join(out) + "\n"
