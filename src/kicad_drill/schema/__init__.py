"""Board snapshot models consumed by the drill pipeline."""

from .pcb import (
    BoardSnapshot,
    DrillShape,
    Pad,
    PadAttribute,
    Segment,
    TrackItem,
    Via,
    ViaType,
)

__all__ = [
    "BoardSnapshot",
    "DrillShape",
    "Pad",
    "PadAttribute",
    "Segment",
    "TrackItem",
    "Via",
    "ViaType",
]
