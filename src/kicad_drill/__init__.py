"""
kicad-drill: drill files, drill maps and drill reports for KiCad boards.

Modules:
    core: S-expression parsing and board file loading
    schema: Board snapshot (pads, tracks, vias, outline)
    drill: Hole catalog, tool assignment and job options
    export: Drill file writers, drill map, report and the drill job
    config: TOML configuration files

Quick Start::

    from kicad_drill import BoardSnapshot, DrillJob, DrillJobOptions

    board = BoardSnapshot.load("board.kicad_pcb")
    options = DrillJobOptions(units="inch", zeros="suppress-leading", output_dir="fab")
    result = DrillJob(board, options).run(drill=True, map=True, report=True)
    print(result)
"""

__version__ = "0.1.0"

from kicad_drill.drill import (
    DrillFormat,
    DrillJobOptions,
    DrillOrigin,
    DrillPrecision,
    DrillUnits,
    HoleCatalog,
    HoleRecord,
    MapFormat,
    ToolDefinition,
    ToolTable,
    ZerosFormat,
    assign_tools,
    build_hole_catalog,
)
from kicad_drill.exceptions import (
    ConfigurationError,
    CoordinateOverflow,
    DirectoryUnavailable,
    DrillError,
    DrillToolsError,
    WriteFailed,
)
from kicad_drill.export import (
    DrillJob,
    DrillJobResult,
    generate_map,
    generate_report,
    write_drill_files,
)
from kicad_drill.schema import BoardSnapshot

__all__ = [
    "__version__",
    "BoardSnapshot",
    "build_hole_catalog",
    "assign_tools",
    "HoleRecord",
    "HoleCatalog",
    "ToolDefinition",
    "ToolTable",
    "DrillJobOptions",
    "DrillFormat",
    "DrillUnits",
    "ZerosFormat",
    "DrillPrecision",
    "DrillOrigin",
    "MapFormat",
    "write_drill_files",
    "generate_map",
    "generate_report",
    "DrillJob",
    "DrillJobResult",
    "DrillToolsError",
    "DrillError",
    "ConfigurationError",
    "DirectoryUnavailable",
    "CoordinateOverflow",
    "WriteFailed",
]
