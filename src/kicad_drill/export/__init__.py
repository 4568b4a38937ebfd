"""
Drill output generation.

Writers for drill files (Excellon, Gerber X2), drill maps (six plot formats)
and drill reports, plus :class:`DrillJob`, which runs them together.

Example::

    from kicad_drill.export import DrillJob

    result = DrillJob(board, options).run(drill=True, map=True, report=True)
    print(result)
"""

from .coordinates import CoordinateTransform, format_excellon_number, format_gerber_number
from .drill_map import generate_map, map_file_name
from .drill_writer import (
    EXCELLON_POLICY,
    EXCELLON_WRITER,
    GERBER_POLICY,
    GERBER_WRITER,
    DrillFormatPolicy,
    DrillStream,
    DrillWriter,
    DrillWriteResult,
    ensure_output_directory,
    write_drill_files,
)
from .job import DrillJob, DrillJobResult
from .report import generate_report, render_report, report_file_name

__all__ = [
    "CoordinateTransform",
    "format_excellon_number",
    "format_gerber_number",
    "DrillFormatPolicy",
    "DrillStream",
    "DrillWriter",
    "DrillWriteResult",
    "EXCELLON_POLICY",
    "EXCELLON_WRITER",
    "GERBER_POLICY",
    "GERBER_WRITER",
    "ensure_output_directory",
    "write_drill_files",
    "generate_map",
    "map_file_name",
    "generate_report",
    "render_report",
    "report_file_name",
    "DrillJob",
    "DrillJobResult",
]
