"""
Hole and tool data models.

The hole taxonomy is a closed set: a hole is either a pad hole or one of
three via kinds, and either plated or not. It is modelled as an enum pair on
one record type rather than a class hierarchy, since classification and
grouping are the only behaviours that differ.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

Point = Tuple[float, float]


class Plating(Enum):
    PLATED = "plated"
    NOT_PLATED = "not-plated"


class ViaClass(Enum):
    """Kind of via a hole belongs to; NONE for pad holes."""

    NONE = "pad"
    THROUGH = "through"
    MICRO = "micro"
    BLIND_BURIED = "blind-buried"

    @property
    def is_via(self) -> bool:
        return self != ViaClass.NONE


class ShapeKind(Enum):
    """Grouping kind of a hole shape. Circles sort before slots."""

    CIRCLE = 0
    SLOT = 1

    @property
    def label(self) -> str:
        return "round" if self == ShapeKind.CIRCLE else "oblong"


@dataclass(frozen=True)
class CircularHole:
    """A round hole drilled with a single plunge."""

    diameter: float

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.CIRCLE

    @property
    def size(self) -> float:
        return self.diameter


@dataclass(frozen=True)
class SlotHole:
    """An oblong hole drilled as a routed slot.

    Attributes:
        width: Slot width, i.e. the tool diameter
        length: Overall length of the oblong, end cap to end cap
        angle: Slot axis direction in degrees (counterclockwise on screen)
    """

    width: float
    length: float
    angle: float = 0.0

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.SLOT

    @property
    def size(self) -> float:
        return self.width

    @property
    def route_length(self) -> float:
        """Distance travelled by the tool centre."""
        return max(self.length - self.width, 0.0)

    def direction(self) -> Point:
        """Unit vector of the slot axis in the Y-down board frame."""
        rad = math.radians(self.angle)
        return (math.cos(rad), -math.sin(rad))


HoleShape = Union[CircularHole, SlotHole]


@dataclass(frozen=True)
class HoleRecord:
    """
    One physical drilled feature.

    Attributes:
        position: Drill centre, or the route start point for a slot
        shape: CircularHole or SlotHole
        plating: Plated or not plated
        via_class: NONE for pad holes, otherwise the via kind
        layer_span: Start and end copper layer for vias
        source: Readable origin of the hole, used in error messages
    """

    position: Point
    shape: HoleShape
    plating: Plating = Plating.PLATED
    via_class: ViaClass = ViaClass.NONE
    layer_span: Optional[Tuple[str, str]] = None
    source: str = ""

    @property
    def is_plated(self) -> bool:
        return self.plating == Plating.PLATED

    @property
    def is_slot(self) -> bool:
        return isinstance(self.shape, SlotHole)

    @property
    def size(self) -> float:
        """Diameter, or slot width."""
        return self.shape.size

    @property
    def end_position(self) -> Point:
        """Route end point (the position itself for round holes)."""
        if not isinstance(self.shape, SlotHole):
            return self.position
        dx, dy = self.shape.direction()
        travel = self.shape.route_length
        return (self.position[0] + dx * travel, self.position[1] + dy * travel)

    @property
    def centroid(self) -> Point:
        """Centre of the hole."""
        ex, ey = self.end_position
        return ((self.position[0] + ex) / 2.0, (self.position[1] + ey) / 2.0)


@dataclass(frozen=True)
class HoleCounts:
    """Per-class hole counters, for display next to the generation options."""

    plated_pad_holes: int = 0
    non_plated_pad_holes: int = 0
    through_vias: int = 0
    micro_vias: int = 0
    blind_buried_vias: int = 0

    @property
    def total(self) -> int:
        return (
            self.plated_pad_holes
            + self.non_plated_pad_holes
            + self.through_vias
            + self.micro_vias
            + self.blind_buried_vias
        )

    def as_dict(self) -> Dict[str, int]:
        return {
            "plated_pad_holes": self.plated_pad_holes,
            "non_plated_pad_holes": self.non_plated_pad_holes,
            "through_vias": self.through_vias,
            "micro_vias": self.micro_vias,
            "blind_buried_vias": self.blind_buried_vias,
        }


@dataclass(frozen=True)
class HoleCatalog:
    """Ordered hole inventory of one board plus its class counters."""

    holes: Tuple[HoleRecord, ...] = ()
    counts: HoleCounts = field(default_factory=HoleCounts)

    def __len__(self) -> int:
        return len(self.holes)

    def __iter__(self) -> Iterator[HoleRecord]:
        return iter(self.holes)

    def __getitem__(self, index: int) -> HoleRecord:
        return self.holes[index]


@dataclass(frozen=True)
class ToolDefinition:
    """
    One row of the tool table.

    Attributes:
        tool_index: 1-based tool number
        shape_kind: Round or oblong
        diameter: Tool diameter in mm (slot width for slots)
        plating: Plating group, or None when PTH and NPTH are merged
        hole_indices: Catalog indices of the holes drilled with this tool
    """

    tool_index: int
    shape_kind: ShapeKind
    diameter: float
    plating: Optional[Plating]
    hole_indices: Tuple[int, ...] = ()

    @property
    def hole_count(self) -> int:
        return len(self.hole_indices)

    def holes(self, catalog: Union[HoleCatalog, Sequence[HoleRecord]]) -> List[HoleRecord]:
        """The hole records of this tool, in catalog order."""
        return [catalog[i] for i in self.hole_indices]


@dataclass(frozen=True)
class ToolTable:
    """Tool definitions of a catalog, ordered by tool index."""

    tools: Tuple[ToolDefinition, ...] = ()
    merged: bool = False

    def __len__(self) -> int:
        return len(self.tools)

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self.tools)

    def __getitem__(self, index: int) -> ToolDefinition:
        return self.tools[index]

    def by_index(self, tool_index: int) -> ToolDefinition:
        """Look up a tool by its 1-based tool number."""
        return self.tools[tool_index - 1]

    def tool_of(self, hole_index: int) -> ToolDefinition:
        """The tool a catalog hole is assigned to."""
        for tool in self.tools:
            if hole_index in tool.hole_indices:
                return tool
        raise KeyError(hole_index)

    def plating_label(
        self, tool: ToolDefinition, catalog: Union[HoleCatalog, Sequence[HoleRecord]]
    ) -> str:
        """Plating label of a tool; merged tools holding both kinds are "mixed"."""
        if tool.plating is not None:
            return tool.plating.value
        platings = {catalog[i].plating for i in tool.hole_indices}
        if len(platings) == 1:
            return platings.pop().value
        return "mixed"
