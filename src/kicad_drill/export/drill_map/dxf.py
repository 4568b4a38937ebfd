"""DXF drill map plotter (ezdxf)."""

from __future__ import annotations

from pathlib import Path

import ezdxf
from ezdxf import units

from ...exceptions import WriteFailed
from .scene import MapScene

LAYER_OUTLINE = "OUTLINE"
LAYER_MARKERS = "DRILL_MARKS"
LAYER_LEGEND = "LEGEND"


def build_dxf_document(scene: MapScene):
    """Build an ezdxf document holding the scene, one layer per role."""
    doc = ezdxf.new("R2010")
    doc.units = units.MM
    doc.layers.add(LAYER_OUTLINE, color=7)
    doc.layers.add(LAYER_MARKERS, color=1)
    doc.layers.add(LAYER_LEGEND, color=5)

    msp = doc.modelspace()
    for line in scene.outline:
        msp.add_line(line.start, line.end, dxfattribs={"layer": LAYER_OUTLINE})
    for line in scene.lines:
        msp.add_line(line.start, line.end, dxfattribs={"layer": LAYER_MARKERS})
    for circle in scene.circles:
        msp.add_circle(circle.center, circle.radius, dxfattribs={"layer": LAYER_MARKERS})
    for text in scene.texts:
        entity = msp.add_text(text.text, dxfattribs={"layer": LAYER_LEGEND, "height": text.height})
        entity.set_placement(text.position)
    return doc


def write_dxf_map(scene: MapScene, path: Path) -> None:
    """Save the scene as a DXF file.

    Raises:
        WriteFailed: If the file cannot be written
    """
    doc = build_dxf_document(scene)
    try:
        doc.saveas(path)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise WriteFailed(path, reason=str(e)) from e
