"""Pytest fixtures for kicad-drill tests."""

from pathlib import Path
from typing import List

import pytest

from kicad_drill.drill.models import (
    CircularHole,
    HoleCatalog,
    HoleCounts,
    HoleRecord,
    Plating,
    SlotHole,
    ViaClass,
)
from kicad_drill.schema import BoardSnapshot

# Board with plated, non-plated and oval pad holes, SMD pads, three via kinds
# and a rectangular outline. The auxiliary origin sits at the outline corner.
MINIMAL_PCB = """(kicad_pcb
  (version 20240108)
  (generator "test")
  (generator_version "8.0")
  (general
    (thickness 1.6)
  )
  (paper "A4")
  (layers
    (0 "F.Cu" signal)
    (31 "B.Cu" signal)
    (36 "B.SilkS" user "B.Silkscreen")
    (37 "F.SilkS" user "F.Silkscreen")
    (44 "Edge.Cuts" user)
  )
  (setup
    (pad_to_mask_clearance 0)
    (aux_axis_origin 100 115)
  )
  (net 0 "")
  (net 1 "GND")
  (footprint "Connector_PinHeader_2.54mm:PinHeader_1x02_P2.54mm_Vertical"
    (layer "F.Cu")
    (uuid "00000000-0000-0000-0000-000000000101")
    (at 110 95)
    (property "Reference" "J1" (at 0 -2.33 0) (layer "F.SilkS"))
    (pad "1" thru_hole rect (at 0 0) (size 1.7 1.7) (drill 1) (layers "*.Cu" "*.Mask") (net 1 "GND"))
    (pad "2" thru_hole oval (at 2.54 0) (size 1.7 1.7) (drill 1) (layers "*.Cu" "*.Mask"))
  )
  (footprint "MountingHole:MountingHole_3.2mm_M3"
    (layer "F.Cu")
    (uuid "00000000-0000-0000-0000-000000000102")
    (at 105 105)
    (property "Reference" "H1" (at 0 -4.2 0) (layer "F.SilkS"))
    (pad "" np_thru_hole circle (at 0 0) (size 3.2 3.2) (drill 3.2) (layers "*.Cu" "*.Mask"))
  )
  (footprint "Connector_USB:USB_C_Receptacle"
    (layer "F.Cu")
    (uuid "00000000-0000-0000-0000-000000000103")
    (at 120 100)
    (property "Reference" "J2" (at 0 -5 0) (layer "F.SilkS"))
    (pad "S1" thru_hole oval (at 0 0) (size 1 2.1) (drill oval 0.6 1.7) (layers "*.Cu" "*.Mask"))
  )
  (footprint "Resistor_SMD:R_0402_1005Metric"
    (layer "F.Cu")
    (uuid "00000000-0000-0000-0000-000000000104")
    (at 115 110)
    (property "Reference" "R1" (at 0 -1.17 0) (layer "F.SilkS"))
    (pad "1" smd roundrect (at -0.48 0) (size 0.56 0.62) (layers "F.Cu" "F.Paste" "F.Mask"))
    (pad "2" smd roundrect (at 0.48 0) (size 0.56 0.62) (layers "F.Cu" "F.Paste" "F.Mask"))
  )
  (segment (start 110 95) (end 115 95) (width 0.25) (layer "F.Cu") (net 1))
  (via (at 115 95) (size 0.8) (drill 0.4) (layers "F.Cu" "B.Cu") (net 1))
  (via micro (at 116 96) (size 0.3) (drill 0.1) (layers "F.Cu" "B.Cu") (net 1))
  (via blind (at 117 97) (size 0.6) (drill 0.3) (layers "F.Cu" "B.Cu") (net 1))
  (gr_rect (start 100 90) (end 130 115)
    (stroke (width 0.1) (type default))
    (fill none)
    (layer "Edge.Cuts")
  )
  (gr_line (start 100 80) (end 130 80) (stroke (width 0.1) (type default)) (layer "F.SilkS"))
)
"""

# One plated 0.8 mm pad and one 0.4 mm through via
PAD_AND_VIA_PCB = """(kicad_pcb
  (version 20240108)
  (generator "test")
  (layers
    (0 "F.Cu" signal)
    (31 "B.Cu" signal)
    (44 "Edge.Cuts" user)
  )
  (footprint "TestPoint:TestPoint_THTPad_D1.5mm_Drill0.8mm"
    (layer "F.Cu")
    (at 10 5)
    (property "Reference" "TP1" (at 0 -2 0) (layer "F.SilkS"))
    (pad "1" thru_hole circle (at 0 0) (size 1.5 1.5) (drill 0.8) (layers "*.Cu" "*.Mask"))
  )
  (via (at 20 15) (size 0.8) (drill 0.4) (layers "F.Cu" "B.Cu"))
  (gr_rect (start 0 0) (end 30 20) (stroke (width 0.1) (type default)) (fill none) (layer "Edge.Cuts"))
)
"""


@pytest.fixture
def minimal_pcb(tmp_path: Path) -> Path:
    """Create the minimal board file for testing."""
    pcb_file = tmp_path / "test.kicad_pcb"
    pcb_file.write_text(MINIMAL_PCB)
    return pcb_file


@pytest.fixture
def minimal_board(minimal_pcb: Path) -> BoardSnapshot:
    """Snapshot of the minimal board."""
    return BoardSnapshot.load(minimal_pcb)


@pytest.fixture
def pad_and_via_pcb(tmp_path: Path) -> Path:
    """Board with one plated pad and one through via."""
    pcb_file = tmp_path / "pad_via.kicad_pcb"
    pcb_file.write_text(PAD_AND_VIA_PCB)
    return pcb_file


def make_hole(
    x: float,
    y: float,
    diameter: float,
    plated: bool = True,
    via_class: ViaClass = ViaClass.NONE,
) -> HoleRecord:
    """Round hole record for synthetic catalogs."""
    return HoleRecord(
        position=(x, y),
        shape=CircularHole(diameter),
        plating=Plating.PLATED if plated else Plating.NOT_PLATED,
        via_class=via_class,
        source=f"hole at ({x}, {y})",
    )


def make_slot(x: float, y: float, width: float, length: float, angle: float = 0.0) -> HoleRecord:
    """Plated slot record starting at (x, y)."""
    return HoleRecord(
        position=(x, y),
        shape=SlotHole(width=width, length=length, angle=angle),
        plating=Plating.PLATED,
        source=f"slot at ({x}, {y})",
    )


def make_catalog(holes: List[HoleRecord]) -> HoleCatalog:
    """Catalog of synthetic holes with counters derived from the records."""
    counts = HoleCounts(
        plated_pad_holes=sum(1 for h in holes if h.is_plated and not h.via_class.is_via),
        non_plated_pad_holes=sum(1 for h in holes if not h.is_plated),
        through_vias=sum(1 for h in holes if h.via_class == ViaClass.THROUGH),
        micro_vias=sum(1 for h in holes if h.via_class == ViaClass.MICRO),
        blind_buried_vias=sum(1 for h in holes if h.via_class == ViaClass.BLIND_BURIED),
    )
    return HoleCatalog(holes=tuple(holes), counts=counts)


@pytest.fixture
def mixed_catalog() -> HoleCatalog:
    """Three plated and two non-plated 1.0 mm holes."""
    return make_catalog(
        [
            make_hole(10, 10, 1.0),
            make_hole(20, 10, 1.0),
            make_hole(30, 10, 1.0),
            make_hole(10, 20, 1.0, plated=False),
            make_hole(20, 20, 1.0, plated=False),
        ]
    )


@pytest.fixture
def synthetic_catalog() -> HoleCatalog:
    """Holes of several sizes, both platings, a via and a slot."""
    return make_catalog(
        [
            make_hole(12.5, 7.25, 0.8),
            make_hole(3.175, 40.0, 1.2),
            make_hole(45.0, 2.5, 0.8),
            make_hole(60.0, 30.0, 3.2, plated=False),
            make_hole(25.4, 25.4, 0.3, via_class=ViaClass.THROUGH),
            make_slot(70.0, 10.0, 0.8, 2.0),
            make_hole(5.0, 5.0, 1.2, plated=False),
        ]
    )
