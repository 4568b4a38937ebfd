"""Tests for the drill report."""

from datetime import datetime

import pytest
from conftest import make_catalog

from kicad_drill.drill import assign_tools, build_hole_catalog
from kicad_drill.exceptions import WriteFailed
from kicad_drill.export.report import generate_report, render_report, report_file_name

CREATED = datetime(2024, 1, 2, 3, 4, 5)


class TestRenderReport:
    """Report text."""

    def test_header(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        text = render_report(catalog, assign_tools(catalog), False, "test", created=CREATED)
        lines = text.splitlines()
        assert lines[0] == "Drill report for test"
        assert lines[1] == "Created on 2024-01-02T03:04:05 by kicad-drill 0.1.0"
        assert "Copper layers: 2 (F.Cu - B.Cu)" in lines
        assert "PTH and NPTH holes merged: no" in lines

    def test_tool_lines(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        lines = render_report(catalog, assign_tools(catalog), False).splitlines()
        start = lines.index("Drill tools (6):")
        tool_lines = lines[start + 1 : start + 7]
        assert tool_lines[0].split() == ["T1", "round", "0.100mm", '0.0039"', "plated", "1", "hole"]
        assert tool_lines[3].split()[:2] == ["T4", "oblong"]
        assert tool_lines[4].split()[-2:] == ["2", "holes"]
        assert "not-plated" in tool_lines[5]

    def test_totals(self, minimal_board):
        catalog = build_hole_catalog(minimal_board)
        lines = render_report(catalog, assign_tools(catalog), False).splitlines()
        assert "Total plated holes: 6" in lines
        assert "Total not plated holes: 1" in lines
        assert "Total slots: 1" in lines
        assert "  Micro vias:           1" in lines
        assert "  Total:                7" in lines

    def test_regroups_for_merge_flag(self, mixed_catalog):
        unmerged_tools = assign_tools(mixed_catalog)
        lines = render_report(mixed_catalog, unmerged_tools, True).splitlines()
        assert "PTH and NPTH holes merged: yes" in lines
        assert "Drill tools (1):" in lines
        tool_line = lines[lines.index("Drill tools (1):") + 1]
        assert "mixed" in tool_line
        assert tool_line.endswith("5 holes")

    def test_no_holes(self):
        catalog = make_catalog([])
        text = render_report(catalog, assign_tools(catalog), False)
        assert "No drill tools (board has no holes)" in text
        assert "Total plated holes: 0" in text

    def test_deterministic(self, mixed_catalog):
        first = render_report(mixed_catalog, assign_tools(mixed_catalog), False, created=CREATED)
        second = render_report(mixed_catalog, assign_tools(mixed_catalog), False, created=CREATED)
        assert first == second


class TestGenerateReport:
    """Report files."""

    def test_writes_file(self, mixed_catalog, tmp_path):
        path = generate_report(
            mixed_catalog, assign_tools(mixed_catalog), False, tmp_path / "board-drl.rpt"
        )
        assert path.read_text().startswith("Drill report for board\n")

    def test_replaces_existing(self, mixed_catalog, tmp_path):
        path = tmp_path / "board-drl.rpt"
        path.write_text("stale content\n" * 100)
        generate_report(mixed_catalog, assign_tools(mixed_catalog), False, path)
        assert "stale" not in path.read_text()

    def test_write_failure(self, mixed_catalog, tmp_path):
        with pytest.raises(WriteFailed) as exc_info:
            generate_report(
                mixed_catalog, assign_tools(mixed_catalog), False, tmp_path / "missing" / "r.rpt"
            )
        assert exc_info.value.file_path == tmp_path / "missing" / "r.rpt"

    def test_file_name(self):
        assert report_file_name("board") == "board-drl.rpt"
