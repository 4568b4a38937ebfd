"""
Drill report generator.

Writes a plain-text summary of a drill job: one line per tool, then hole
totals per plating and via class. The report does not depend on the drill
file encoding; only the PTH/NPTH merge flag changes the tool grouping.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .. import __version__
from ..drill.models import HoleCatalog, ToolTable
from ..drill.tools import assign_tools
from ..units import format_diameter
from .drill_writer import write_text_file

logger = logging.getLogger(__name__)


def report_file_name(board_name: str) -> str:
    return f"{board_name}-drl.rpt"


def render_report(
    catalog: HoleCatalog,
    tools: ToolTable,
    merge_pth_npth: bool,
    board_name: str = "board",
    copper_layers: Sequence[str] = ("F.Cu", "B.Cu"),
    created: Optional[datetime] = None,
) -> str:
    """Render the report text.

    ``tools`` is regrouped from the catalog when its merge mode differs from
    ``merge_pth_npth``.
    """
    if tools.merged != merge_pth_npth:
        tools = assign_tools(catalog, merge_pth_npth)
    created = created or datetime.now()

    lines: List[str] = [
        f"Drill report for {board_name}",
        f"Created on {created.isoformat(timespec='seconds')} by kicad-drill {__version__}",
        "",
    ]
    if copper_layers:
        lines.append(
            f"Copper layers: {len(copper_layers)} ({copper_layers[0]} - {copper_layers[-1]})"
        )
    lines.append(f"PTH and NPTH holes merged: {'yes' if merge_pth_npth else 'no'}")
    lines.append("")

    if len(tools) == 0:
        lines.append("No drill tools (board has no holes)")
    else:
        lines.append(f"Drill tools ({len(tools)}):")
        for tool in tools:
            count = tool.hole_count
            plating = tools.plating_label(tool, catalog)
            lines.append(
                f"  T{tool.tool_index:<3} {tool.shape_kind.label:<7} "
                f"{format_diameter(tool.diameter):<18} {plating:<11} "
                f"{count} hole{'s' if count != 1 else ''}"
            )
    lines.append("")

    plated = sum(1 for hole in catalog if hole.is_plated)
    slots = sum(1 for hole in catalog if hole.is_slot)
    counts = catalog.counts
    lines += [
        f"Total plated holes: {plated}",
        f"Total not plated holes: {len(catalog) - plated}",
        f"Total slots: {slots}",
        "",
        "Holes by class:",
        f"  Plated pad holes:     {counts.plated_pad_holes}",
        f"  Not plated pad holes: {counts.non_plated_pad_holes}",
        f"  Through vias:         {counts.through_vias}",
        f"  Micro vias:           {counts.micro_vias}",
        f"  Blind/buried vias:    {counts.blind_buried_vias}",
        f"  Total:                {counts.total}",
    ]
    return "\n".join(lines) + "\n"


def generate_report(
    catalog: HoleCatalog,
    tools: ToolTable,
    merge_pth_npth: bool,
    output_path: Union[str, Path],
    board_name: str = "board",
    copper_layers: Sequence[str] = ("F.Cu", "B.Cu"),
    created: Optional[datetime] = None,
) -> Path:
    """
    Write the drill report, replacing any previous report.

    The whole report is rendered before the file is opened.

    Args:
        catalog: Hole catalog
        tools: Tool table of the same catalog
        merge_pth_npth: Group tools ignoring plating
        output_path: Report file path
        board_name: Board name shown in the header
        copper_layers: Copper layer names, front to back
        created: Timestamp shown in the header (default: now)

    Returns:
        The report path

    Raises:
        WriteFailed: If the file cannot be written
    """
    path = Path(output_path)
    text = render_report(catalog, tools, merge_pth_npth, board_name, copper_layers, created)
    write_text_file(path, text)
    logger.info(f"Report file {path} created")
    return path
