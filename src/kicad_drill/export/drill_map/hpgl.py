"""HPGL drill map plotter."""

from __future__ import annotations

from typing import List, Tuple

from .scene import MapScene

# HPGL plotter units per millimetre
PLU_PER_MM = 40.0

# Label terminator set with DT
_ETX = "\x03"


def _plu(value: float) -> int:
    return int(round(value * PLU_PER_MM))


def _xy(point: Tuple[float, float]) -> str:
    return f"{_plu(point[0])},{_plu(point[1])}"


def render_hpgl(scene: MapScene) -> str:
    """Render a map scene as HPGL with pen 1.

    Lines are drawn with absolute pen moves, circles with CI and text with
    LB labels sized through SI (centimetres).
    """
    out: List[str] = ["IN;", f"DT{_ETX};", "SP1;", "PA;", "PU;"]

    for line in scene.all_lines():
        out.append(f"PU{_xy(line.start)};PD{_xy(line.end)};")

    for circle in scene.circles:
        out.append(f"PU{_xy(circle.center)};CI{_plu(circle.radius)};")

    for text in scene.texts:
        height_cm = text.height / 10.0
        out.append(f"PU{_xy(text.position)};SI{height_cm * 0.6:.3f},{height_cm:.3f};")
        out.append(f"LB{text.text}{_ETX};")

    out += ["PU;", "SP0;", "IN;"]
    return "\n".join(out) + "\n"
