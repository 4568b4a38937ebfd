"""
Hole catalog builder.

Walks a board snapshot's pads, then its track items, and produces the ordered
list of drilled features. Pads without a drill (SMD pads, or a zero-sized
drill) and vias with a zero drill never reach the catalog.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..schema.pcb import BoardSnapshot, DrillShape, Pad, Via, ViaType
from .models import (
    CircularHole,
    HoleCatalog,
    HoleCounts,
    HoleRecord,
    Plating,
    SlotHole,
    ViaClass,
)

logger = logging.getLogger(__name__)

_VIA_CLASSES = {
    ViaType.THROUGH: ViaClass.THROUGH,
    ViaType.MICRO: ViaClass.MICRO,
    ViaType.BLIND_BURIED: ViaClass.BLIND_BURIED,
}


def pad_hole(pad: Pad) -> Optional[HoleRecord]:
    """Hole record of a pad, or None when the pad has no hole.

    A round drill needs a non-zero diameter; an oblong drill needs both
    sizes non-zero. An oblong drill with equal sides is a round hole.
    """
    sx, sy = pad.drill_size
    plating = Plating.PLATED if pad.is_plated else Plating.NOT_PLATED

    if pad.drill_shape == DrillShape.CIRCLE or sx == sy:
        if sx <= 0:
            return None
        return HoleRecord(
            position=pad.position,
            shape=CircularHole(sx),
            plating=plating,
            source=pad.label,
        )

    if sx <= 0 or sy <= 0:
        return None

    # Slot axis follows the longer side of the drill
    if sx >= sy:
        slot = SlotHole(width=sy, length=sx, angle=pad.orientation)
    else:
        slot = SlotHole(width=sx, length=sy, angle=pad.orientation + 90.0)

    dx, dy = slot.direction()
    half = slot.route_length / 2.0
    start = (pad.position[0] - dx * half, pad.position[1] - dy * half)
    return HoleRecord(position=start, shape=slot, plating=plating, source=pad.label)


def via_hole(via: Via) -> Optional[HoleRecord]:
    """Hole record of a via; vias are always plated."""
    if via.drill <= 0:
        return None
    return HoleRecord(
        position=via.position,
        shape=CircularHole(via.drill),
        plating=Plating.PLATED,
        via_class=_VIA_CLASSES[via.via_type],
        layer_span=via.layers,
        source=f"via at ({via.position[0]:g}, {via.position[1]:g})",
    )


def build_hole_catalog(board: BoardSnapshot) -> HoleCatalog:
    """
    Build the ordered hole catalog of a board.

    Pads come first in board traversal order, then vias in track order.
    The order is stable for identical board state.

    Args:
        board: Board snapshot to read

    Returns:
        HoleCatalog with the hole records and per-class counters
    """
    holes: List[HoleRecord] = []
    plated_pads = non_plated_pads = 0
    through = micro = blind_buried = 0

    for pad in board.pads:
        hole = pad_hole(pad)
        if hole is None:
            continue
        holes.append(hole)
        if hole.is_plated:
            plated_pads += 1
        else:
            non_plated_pads += 1

    for item in board.tracks:
        if not isinstance(item, Via):
            continue
        hole = via_hole(item)
        if hole is None:
            logger.debug(f"Skipping {item.via_type.value} via without drill at {item.position}")
            continue
        holes.append(hole)
        if hole.via_class == ViaClass.THROUGH:
            through += 1
        elif hole.via_class == ViaClass.MICRO:
            micro += 1
        else:
            blind_buried += 1

    counts = HoleCounts(
        plated_pad_holes=plated_pads,
        non_plated_pad_holes=non_plated_pads,
        through_vias=through,
        micro_vias=micro,
        blind_buried_vias=blind_buried,
    )
    logger.debug(f"Hole catalog for {board.board_name}: {counts.as_dict()}")
    return HoleCatalog(holes=tuple(holes), counts=counts)
