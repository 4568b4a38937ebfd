"""KiCad board snapshot.

A read-only view of the parts of a board that drill generation needs:
pads with their drill definitions, tracks and vias, the auxiliary origin,
the copper layer stack and the Edge.Cuts outline.

Snapshots are usually loaded from a .kicad_pcb file, but callers that already
hold the inventory (tests, other tools) can build one directly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..core.sexp import SExp
from ..core.sexp_file import load_pcb

Point = Tuple[float, float]

EDGE_CUTS = "Edge.Cuts"

# Segments used to approximate a full circle of the board outline
_CIRCLE_SEGMENTS = 72


class PadAttribute(Enum):
    """Pad type as stored in the board file."""

    PTH = "thru_hole"
    NPTH = "np_thru_hole"
    SMD = "smd"
    CONNECT = "connect"

    @classmethod
    def from_token(cls, token: str) -> PadAttribute:
        for attr in cls:
            if attr.value == token:
                return attr
        return cls.SMD


class DrillShape(Enum):
    """Shape of a pad drill."""

    CIRCLE = "circle"
    OBLONG = "oval"


class ViaType(Enum):
    """Via kind."""

    THROUGH = "through"
    MICRO = "micro"
    BLIND_BURIED = "blind"


def rotate_point(x: float, y: float, angle_deg: float) -> Point:
    """Rotate a point around the origin in KiCad's Y-down board frame.

    Positive angles turn counterclockwise as seen on screen.
    """
    if angle_deg == 0:
        return (x, y)
    rad = math.radians(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return (x * c + y * s, -x * s + y * c)


@dataclass(frozen=True)
class Pad:
    """A footprint pad, positioned in absolute board coordinates.

    Attributes:
        position: Drill centre (pad position plus rotated drill offset)
        orientation: Absolute pad orientation in degrees
        drill_size: Drill (x, y) size in the pad frame; y equals x for round drills
    """

    reference: str
    number: str
    attribute: PadAttribute
    position: Point
    orientation: float = 0.0
    drill_shape: DrillShape = DrillShape.CIRCLE
    drill_size: Point = (0.0, 0.0)

    @property
    def is_plated(self) -> bool:
        return self.attribute != PadAttribute.NPTH

    @property
    def label(self) -> str:
        """Readable pad name, like "J1 pad 2"."""
        if self.reference:
            return f"{self.reference} pad {self.number}"
        return f"pad {self.number}"

    @classmethod
    def from_sexp(
        cls,
        sexp: SExp,
        footprint_at: Point = (0.0, 0.0),
        footprint_rotation: float = 0.0,
        reference: str = "",
    ) -> Pad:
        """Parse a pad from its S-expression inside a footprint."""
        number = sexp.get_string(0) or ""
        attribute = PadAttribute.from_token(sexp.get_string(1) or "")

        local = (0.0, 0.0)
        orientation = footprint_rotation
        if at := sexp.find("at"):
            local = at.get_point(0)
            # Pad angles in the file already include the footprint rotation
            if at.get_float(2) is not None:
                orientation = at.get_float(2) or 0.0

        dx, dy = rotate_point(local[0], local[1], footprint_rotation)
        center = (footprint_at[0] + dx, footprint_at[1] + dy)

        shape = DrillShape.CIRCLE
        size = (0.0, 0.0)
        if drill := sexp.find("drill"):
            numbers = [v for v in drill.atoms() if isinstance(v, (int, float))]
            if drill.has_atom("oval"):
                shape = DrillShape.OBLONG
            if numbers:
                sx = float(numbers[0])
                sy = float(numbers[1]) if len(numbers) > 1 and shape == DrillShape.OBLONG else sx
                size = (sx, sy)
            if offset := drill.find("offset"):
                ox, oy = offset.get_point(0)
                odx, ody = rotate_point(ox, oy, orientation)
                center = (center[0] + odx, center[1] + ody)

        return cls(
            reference=reference,
            number=number,
            attribute=attribute,
            position=center,
            orientation=orientation,
            drill_shape=shape,
            drill_size=size,
        )


@dataclass(frozen=True)
class Segment:
    """PCB trace segment."""

    start: Point
    end: Point
    width: float
    layer: str

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Segment:
        start = end = (0.0, 0.0)
        width = 0.0
        layer = ""
        if node := sexp.find("start"):
            start = node.get_point(0)
        if node := sexp.find("end"):
            end = node.get_point(0)
        if node := sexp.find("width"):
            width = node.get_float(0) or 0.0
        if node := sexp.find("layer"):
            layer = node.get_string(0) or ""
        return cls(start=start, end=end, width=width, layer=layer)


@dataclass(frozen=True)
class Via:
    """PCB via.

    Attributes:
        layers: Start and end copper layer of the via span
    """

    position: Point
    drill: float
    size: float = 0.0
    via_type: ViaType = ViaType.THROUGH
    layers: Tuple[str, str] = ("F.Cu", "B.Cu")

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Via:
        via_type = ViaType.THROUGH
        if sexp.has_atom("micro"):
            via_type = ViaType.MICRO
        elif sexp.has_atom("blind"):
            via_type = ViaType.BLIND_BURIED

        position = (0.0, 0.0)
        drill = size = 0.0
        layers: Tuple[str, str] = ("F.Cu", "B.Cu")
        if node := sexp.find("at"):
            position = node.get_point(0)
        if node := sexp.find("drill"):
            drill = node.get_float(0) or 0.0
        if node := sexp.find("size"):
            size = node.get_float(0) or 0.0
        if node := sexp.find("layers"):
            names = [str(v) for v in node.atoms()]
            if len(names) >= 2:
                layers = (names[0], names[-1])

        return cls(position=position, drill=drill, size=size, via_type=via_type, layers=layers)


TrackItem = Union[Segment, Via]


@dataclass(frozen=True)
class BoardSnapshot:
    """Immutable pad and track inventory of one board.

    Attributes:
        file_name: Board file path; its stem names every output file
        pads: Pads in board traversal order (footprint by footprint)
        tracks: Track segments and vias in board order
        aux_origin: Auxiliary (drill/place file) origin in board coordinates
        copper_layers: Copper layer names, front to back
        outline: Edge.Cuts outline as straight segments
    """

    file_name: str = "board.kicad_pcb"
    pads: Tuple[Pad, ...] = ()
    tracks: Tuple[TrackItem, ...] = ()
    aux_origin: Point = (0.0, 0.0)
    copper_layers: Tuple[str, ...] = ("F.Cu", "B.Cu")
    outline: Tuple[Tuple[Point, Point], ...] = field(default=())

    @property
    def board_name(self) -> str:
        """Base name used for output files."""
        return Path(self.file_name).stem

    @property
    def board_dir(self) -> Path:
        return Path(self.file_name).parent

    @property
    def vias(self) -> List[Via]:
        return [item for item in self.tracks if isinstance(item, Via)]

    @property
    def copper_layer_count(self) -> int:
        return len(self.copper_layers)

    @classmethod
    def load(cls, path: Union[str, Path]) -> BoardSnapshot:
        """Load a snapshot from a .kicad_pcb file."""
        return cls.from_sexp(load_pcb(path), file_name=str(path))

    @classmethod
    def from_sexp(cls, sexp: SExp, file_name: str = "board.kicad_pcb") -> BoardSnapshot:
        """Build a snapshot from a parsed ``kicad_pcb`` tree."""
        pads: List[Pad] = []
        tracks: List[TrackItem] = []
        outline: List[Tuple[Point, Point]] = []
        aux_origin = (0.0, 0.0)
        copper: List[str] = []

        for child in sexp.iter_children():
            tag = child.tag
            if tag == "layers":
                copper = _parse_copper_layers(child)
            elif tag == "setup":
                if node := child.find("aux_axis_origin"):
                    aux_origin = node.get_point(0)
            elif tag in ("footprint", "module"):
                pads.extend(_parse_footprint_pads(child))
            elif tag == "segment":
                tracks.append(Segment.from_sexp(child))
            elif tag == "via":
                tracks.append(Via.from_sexp(child))
            elif tag.startswith("gr_"):
                outline.extend(_parse_edge_graphic(child))

        return cls(
            file_name=file_name,
            pads=tuple(pads),
            tracks=tuple(tracks),
            aux_origin=aux_origin,
            copper_layers=tuple(copper) or ("F.Cu", "B.Cu"),
            outline=tuple(outline),
        )


def _parse_copper_layers(sexp: SExp) -> List[str]:
    """Copper layer names from the layer table, in stack order."""
    layers = []
    for child in sexp.iter_children():
        name = child.get_string(0) or ""
        layer_type = child.get_string(1) or ""
        if name.endswith(".Cu") and layer_type in ("signal", "power", "mixed", "jumper"):
            try:
                layers.append((int(child.tag), name))
            except ValueError:
                continue
    # F.Cu is 0 and B.Cu 31 up to KiCad 8; KiCad 9 numbers B.Cu 2
    front = [name for _, name in layers if name == "F.Cu"]
    back = [name for _, name in layers if name == "B.Cu"]
    inner = [name for _, name in sorted(layers) if name not in ("F.Cu", "B.Cu")]
    inner.sort(key=lambda n: int(n[2:-3]) if n[2:-3].isdigit() else 0)
    return front + inner + back


def _footprint_reference(sexp: SExp) -> str:
    for fp_text in sexp.find_all("fp_text"):
        if fp_text.get_string(0) == "reference":
            return fp_text.get_string(1) or ""
    for prop in sexp.find_all("property"):
        if prop.get_string(0) == "Reference":
            return prop.get_string(1) or ""
    return ""


def _parse_footprint_pads(sexp: SExp) -> List[Pad]:
    at = (0.0, 0.0)
    rotation = 0.0
    if node := sexp.find("at"):
        at = node.get_point(0)
        rotation = node.get_float(2) or 0.0
    reference = _footprint_reference(sexp)
    return [
        Pad.from_sexp(pad, footprint_at=at, footprint_rotation=rotation, reference=reference)
        for pad in sexp.find_all("pad")
    ]


def _arc_points(center: Point, radius: float, start_deg: float, sweep_deg: float) -> List[Point]:
    steps = max(2, int(abs(sweep_deg) / (360.0 / _CIRCLE_SEGMENTS)) + 1)
    points = []
    for i in range(steps + 1):
        a = math.radians(start_deg + sweep_deg * i / steps)
        points.append((center[0] + radius * math.cos(a), center[1] + radius * math.sin(a)))
    return points


def _circle_through(p1: Point, p2: Point, p3: Point) -> Optional[Tuple[Point, float]]:
    """Centre and radius of the circle through three points (None if collinear)."""
    ax, ay = p1
    bx, by = p2
    cx, cy = p3
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < 1e-12:
        return None
    ux = (
        (ax * ax + ay * ay) * (by - cy)
        + (bx * bx + by * by) * (cy - ay)
        + (cx * cx + cy * cy) * (ay - by)
    ) / d
    uy = (
        (ax * ax + ay * ay) * (cx - bx)
        + (bx * bx + by * by) * (ax - cx)
        + (cx * cx + cy * cy) * (bx - ax)
    ) / d
    return (ux, uy), math.hypot(ax - ux, ay - uy)


def _polyline(points: List[Point], closed: bool = False) -> List[Tuple[Point, Point]]:
    if closed and points:
        points = points + [points[0]]
    return list(zip(points, points[1:]))


def _parse_edge_graphic(sexp: SExp) -> List[Tuple[Point, Point]]:
    """Convert one Edge.Cuts graphic item into straight outline segments."""
    layer = sexp.find("layer")
    if layer is None or layer.get_string(0) != EDGE_CUTS:
        return []

    start = sexp.find("start")
    end = sexp.find("end")

    if sexp.tag == "gr_line" and start and end:
        return [(start.get_point(0), end.get_point(0))]

    if sexp.tag == "gr_rect" and start and end:
        (x1, y1), (x2, y2) = start.get_point(0), end.get_point(0)
        return _polyline([(x1, y1), (x2, y1), (x2, y2), (x1, y2)], closed=True)

    if sexp.tag == "gr_circle":
        center_node = sexp.find("center") or start
        if center_node and end:
            c = center_node.get_point(0)
            e = end.get_point(0)
            radius = math.hypot(e[0] - c[0], e[1] - c[1])
            return _polyline(_arc_points(c, radius, 0.0, 360.0))

    if sexp.tag == "gr_arc" and start and end:
        mid = sexp.find("mid")
        if mid is not None:
            p1, p2, p3 = start.get_point(0), mid.get_point(0), end.get_point(0)
            circle = _circle_through(p1, p2, p3)
            if circle is None:
                return [(p1, p3)]
            c, radius = circle
            a1 = math.degrees(math.atan2(p1[1] - c[1], p1[0] - c[0]))
            a2 = math.degrees(math.atan2(p2[1] - c[1], p2[0] - c[0]))
            a3 = math.degrees(math.atan2(p3[1] - c[1], p3[0] - c[0]))
            sweep = (a3 - a1) % 360.0
            # Sweep the way that passes through the mid point
            if (a2 - a1) % 360.0 > sweep:
                sweep -= 360.0
            return _polyline(_arc_points(c, radius, a1, sweep))
        # Legacy arcs: start is the centre, end the arc start, plus an angle
        angle = sexp.find("angle")
        c = start.get_point(0)
        e = end.get_point(0)
        radius = math.hypot(e[0] - c[0], e[1] - c[1])
        a1 = math.degrees(math.atan2(e[1] - c[1], e[0] - c[0]))
        sweep = angle.get_float(0) if angle is not None else 360.0
        return _polyline(_arc_points(c, radius, a1, sweep or 0.0))

    if sexp.tag == "gr_poly":
        pts = sexp.find("pts")
        if pts is not None:
            return _polyline([xy.get_point(0) for xy in pts.find_all("xy")], closed=True)

    return []
