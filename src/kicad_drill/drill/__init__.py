"""
Hole inventory and tool assignment.

Turns a board snapshot into the (catalog, tool table) pair that every
output writer consumes::

    from kicad_drill.drill import assign_tools, build_hole_catalog

    catalog = build_hole_catalog(board)
    tools = assign_tools(catalog, merge_pth_npth=False)
    for tool in tools:
        print(tool.tool_index, tool.diameter, tool.hole_count)
"""

from .catalog import build_hole_catalog
from .models import (
    CircularHole,
    HoleCatalog,
    HoleCounts,
    HoleRecord,
    Plating,
    ShapeKind,
    SlotHole,
    ToolDefinition,
    ToolTable,
    ViaClass,
)
from .options import (
    DrillFormat,
    DrillJobOptions,
    DrillOrigin,
    DrillPrecision,
    DrillUnits,
    MapFormat,
    ZerosFormat,
    clamp_precision,
)
from .tools import assign_tools

__all__ = [
    "build_hole_catalog",
    "assign_tools",
    "CircularHole",
    "SlotHole",
    "HoleRecord",
    "HoleCatalog",
    "HoleCounts",
    "Plating",
    "ShapeKind",
    "ViaClass",
    "ToolDefinition",
    "ToolTable",
    "DrillFormat",
    "DrillJobOptions",
    "DrillOrigin",
    "DrillPrecision",
    "DrillUnits",
    "MapFormat",
    "ZerosFormat",
    "clamp_precision",
]
