"""Tests for hole catalog building."""

import pytest

from kicad_drill.drill import (
    CircularHole,
    HoleCatalog,
    Plating,
    SlotHole,
    ViaClass,
    build_hole_catalog,
)
from kicad_drill.drill.catalog import pad_hole, via_hole
from kicad_drill.schema import BoardSnapshot, DrillShape, Pad, PadAttribute, Via, ViaType


def _pad(attribute=PadAttribute.PTH, shape=DrillShape.CIRCLE, size=(1.0, 1.0), orientation=0.0):
    return Pad(
        reference="U1",
        number="1",
        attribute=attribute,
        position=(10.0, 20.0),
        orientation=orientation,
        drill_shape=shape,
        drill_size=size,
    )


class TestCatalogFromBoard:
    """Catalog of the minimal board."""

    def test_total_holes(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        assert len(catalog) == 7
        assert catalog.counts.total == 7

    def test_counts(self, minimal_board):
        counts = build_hole_catalog(minimal_board).counts
        assert counts.plated_pad_holes == 3
        assert counts.non_plated_pad_holes == 1
        assert counts.through_vias == 1
        assert counts.micro_vias == 1
        assert counts.blind_buried_vias == 1

    def test_pads_before_vias(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        classes = [hole.via_class for hole in catalog]
        assert classes[:4] == [ViaClass.NONE] * 4
        assert classes[4:] == [ViaClass.THROUGH, ViaClass.MICRO, ViaClass.BLIND_BURIED]

    def test_smd_pads_excluded(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        assert not any(hole.source.startswith("R1") for hole in catalog)

    def test_npth_hole(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        npth = [hole for hole in catalog if not hole.is_plated]
        assert len(npth) == 1
        assert npth[0].position == (105.0, 105.0)
        assert npth[0].size == 3.2
        assert npth[0].source == "H1 pad "

    def test_vias_are_plated(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        vias = [hole for hole in catalog if hole.via_class.is_via]
        assert all(hole.plating == Plating.PLATED for hole in vias)
        assert vias[0].layer_span == ("F.Cu", "B.Cu")
        assert vias[0].source == "via at (115, 95)"

    def test_oval_pad_becomes_slot(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        slots = [hole for hole in catalog if hole.is_slot]
        assert len(slots) == 1
        slot = slots[0]
        assert slot.shape == SlotHole(width=0.6, length=1.7, angle=90.0)
        assert slot.position == pytest.approx((120.0, 100.55))
        assert slot.end_position == pytest.approx((120.0, 99.45))
        assert slot.centroid == pytest.approx((120.0, 100.0))

    def test_deterministic(self, minimal_board):
        assert build_hole_catalog(minimal_board) == build_hole_catalog(minimal_board)

    def test_empty_board(self):
        catalog = build_hole_catalog(BoardSnapshot())
        assert len(catalog) == 0
        assert catalog == HoleCatalog()


class TestPadHole:
    """Pad to hole record conversion."""

    def test_round_pad(self):
        hole = pad_hole(_pad())
        assert hole.shape == CircularHole(1.0)
        assert hole.position == (10.0, 20.0)
        assert hole.source == "U1 pad 1"

    def test_zero_drill_excluded(self):
        assert pad_hole(_pad(size=(0.0, 0.0))) is None

    def test_smd_pad_excluded(self):
        assert pad_hole(_pad(attribute=PadAttribute.SMD, size=(0.0, 0.0))) is None

    def test_oblong_with_zero_side_excluded(self):
        assert pad_hole(_pad(shape=DrillShape.OBLONG, size=(1.0, 0.0))) is None

    def test_square_oblong_is_round(self):
        hole = pad_hole(_pad(shape=DrillShape.OBLONG, size=(0.9, 0.9)))
        assert hole.shape == CircularHole(0.9)

    def test_horizontal_slot(self):
        hole = pad_hole(_pad(shape=DrillShape.OBLONG, size=(3.0, 1.0)))
        assert hole.shape == SlotHole(width=1.0, length=3.0, angle=0.0)
        assert hole.position == pytest.approx((9.0, 20.0))
        assert hole.end_position == pytest.approx((11.0, 20.0))

    def test_rotated_slot(self):
        hole = pad_hole(_pad(shape=DrillShape.OBLONG, size=(3.0, 1.0), orientation=90.0))
        # 90 degrees points the axis up the screen (negative Y)
        assert hole.position == pytest.approx((10.0, 21.0))
        assert hole.end_position == pytest.approx((10.0, 19.0))

    def test_npth_pad(self):
        hole = pad_hole(_pad(attribute=PadAttribute.NPTH))
        assert hole.plating == Plating.NOT_PLATED


class TestViaHole:
    """Via to hole record conversion."""

    def test_via_classes(self):
        for via_type, via_class in [
            (ViaType.THROUGH, ViaClass.THROUGH),
            (ViaType.MICRO, ViaClass.MICRO),
            (ViaType.BLIND_BURIED, ViaClass.BLIND_BURIED),
        ]:
            hole = via_hole(Via(position=(1.0, 2.0), drill=0.3, via_type=via_type))
            assert hole.via_class == via_class
            assert hole.is_plated

    def test_zero_drill_via_excluded(self):
        assert via_hole(Via(position=(1.0, 2.0), drill=0.0)) is None

    def test_zero_drill_via_not_counted(self):
        board = BoardSnapshot(tracks=(Via(position=(1.0, 2.0), drill=0.0),))
        catalog = build_hole_catalog(board)
        assert len(catalog) == 0
        assert catalog.counts.through_vias == 0
