"""
Drill file writer.

One rendering pipeline serves both drill encodings. What differs between
Excellon and Gerber X2 (header, tool table syntax, tool selection, hit and
route records, number encoding) lives in a :class:`DrillFormatPolicy` value;
the pipeline owns everything they share: stream partitioning, tool
iteration, the origin/mirror transform and file output.

Example::

    from kicad_drill.drill import DrillJobOptions, assign_tools, build_hole_catalog
    from kicad_drill.export import write_drill_files

    catalog = build_hole_catalog(board)
    tools = assign_tools(catalog, merge_pth_npth=False)
    result = write_drill_files(catalog, tools, DrillJobOptions(), "fab", board.board_name)
    for path in result.files:
        print(path)

Unmerged jobs write two files: ``-PTH`` (plated pad holes and every via) and
``-NPTH``. Merged jobs write one. Every file is written even when it holds no
holes. Each file lists only the tools with holes in it, under their job-wide
tool numbers, so drill files, map legend and report agree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .. import __version__
from ..drill.models import HoleCatalog, HoleRecord, Plating, ToolDefinition, ToolTable
from ..drill.options import DrillFormat, DrillJobOptions, DrillPrecision, DrillUnits, ZerosFormat
from ..exceptions import CoordinateOverflow, DirectoryUnavailable, DrillError, WriteFailed
from .coordinates import (
    CoordinateTransform,
    format_excellon_number,
    format_gerber_number,
    to_file_units,
)

logger = logging.getLogger(__name__)

GENERATOR = "kicad-drill"

# Gerber aperture codes D0..D9 are reserved
APERTURE_OFFSET = 9


class DrillStream(Enum):
    """Plating class of one drill file."""

    PTH = "PTH"
    NPTH = "NPTH"
    MERGED = "MERGED"

    def accepts(self, hole: HoleRecord) -> bool:
        if self == DrillStream.PTH:
            return hole.plating == Plating.PLATED
        if self == DrillStream.NPTH:
            return hole.plating == Plating.NOT_PLATED
        return True


def drill_streams(merge_pth_npth: bool) -> Tuple[DrillStream, ...]:
    if merge_pth_npth:
        return (DrillStream.MERGED,)
    return (DrillStream.PTH, DrillStream.NPTH)


@dataclass(frozen=True)
class DrillFileContext:
    """Everything a policy needs to render one drill file."""

    catalog: HoleCatalog
    tool_table: ToolTable
    options: DrillJobOptions
    stream: DrillStream
    transform: CoordinateTransform
    board_name: str
    copper_layers: int = 2
    created: datetime = field(default_factory=datetime.now)

    @property
    def precision(self) -> DrillPrecision:
        # Options always hold a clamped precision
        return self.options.precision  # type: ignore[return-value]

    @property
    def units(self) -> DrillUnits:
        return self.options.effective_units

    @property
    def tools(self) -> List[ToolDefinition]:
        """Job-wide tools owning at least one hole of this stream."""
        return [tool for tool in self.tool_table if self.stream_holes(tool)]

    def stream_holes(self, tool: ToolDefinition) -> List[HoleRecord]:
        return [hole for hole in tool.holes(self.catalog) if self.stream.accepts(hole)]

    def file_function(self) -> str:
        """X2 file function value shared by Gerber and Excellon headers."""
        span = f"1,{self.copper_layers}"
        if self.stream == DrillStream.PTH:
            return f"Plated,{span},PTH"
        if self.stream == DrillStream.NPTH:
            return f"NonPlated,{span},NPTH"
        return f"MixedPlating,{span}"


Lines = List[str]


@dataclass(frozen=True)
class DrillFormatPolicy:
    """
    Syntax of one drill encoding.

    Attributes:
        name: Format name used in log messages
        extension: File extension without the dot
        name_suffix: Suffix appended after the plating class ("-drl" for Gerber)
        header: Lines up to the tool table
        tool_definitions: Tool table lines for the stream's tools
        body_start: Lines between the tool table and the first hit
        select_tool: Lines selecting a tool before its hits
        hit: One plunge at a formatted (x, y)
        route: One routed slot between two formatted points
        footer: Closing lines
        format_number: Encodes one coordinate in file units
        routes_slots: Whether slots are routed for the given options
    """

    name: str
    extension: str
    name_suffix: str
    header: Callable[[DrillFileContext], Lines]
    tool_definitions: Callable[[DrillFileContext], Lines]
    body_start: Callable[[DrillFileContext], Lines]
    select_tool: Callable[[DrillFileContext, ToolDefinition], Lines]
    hit: Callable[[DrillFileContext, Tuple[str, str]], Lines]
    route: Callable[[DrillFileContext, Tuple[str, str], Tuple[str, str]], Lines]
    footer: Callable[[DrillFileContext], Lines]
    format_number: Callable[[DrillFileContext, float, str], str]
    routes_slots: Callable[[DrillJobOptions], bool]

    def file_name(self, board_name: str, stream: DrillStream) -> str:
        if stream == DrillStream.MERGED:
            return f"{board_name}{self.name_suffix}.{self.extension}"
        return f"{board_name}-{stream.value}{self.name_suffix}.{self.extension}"


# Excellon


_ZEROS_DESCRIPTION = {
    ZerosFormat.DECIMAL: "decimal",
    ZerosFormat.SUPPRESS_LEADING: "suppress leading zeros",
    ZerosFormat.SUPPRESS_TRAILING: "suppress trailing zeros",
    ZerosFormat.KEEP_ZEROS: "keep zeros",
}

_ZEROS_UNIT_SUFFIX = {
    ZerosFormat.DECIMAL: "",
    ZerosFormat.SUPPRESS_LEADING: ",TZ",
    ZerosFormat.SUPPRESS_TRAILING: ",LZ",
    ZerosFormat.KEEP_ZEROS: ",TZ",
}

_EXCELLON_PLATING_TYPE = {
    "plated": "PLATED",
    "not-plated": "NON_PLATED",
    "mixed": "MIXED",
}


def _excellon_header(ctx: DrillFileContext) -> Lines:
    zeros = ctx.options.zeros
    unit_line = "INCH" if ctx.units == DrillUnits.INCH else "METRIC"
    lines = ["M48"]
    if not ctx.options.minimal_header:
        precision = "-:-" if zeros == ZerosFormat.DECIMAL else str(ctx.precision)
        units = "inch" if ctx.units == DrillUnits.INCH else "metric"
        lines += [
            f"; DRILL file {{{GENERATOR} {__version__}}} "
            f"date {ctx.created.isoformat(timespec='seconds')}",
            f"; FORMAT={{{precision}/ absolute / {units} / {_ZEROS_DESCRIPTION[zeros]}}}",
            f"; #@! TF.FileFunction,{ctx.file_function()}",
            "FMAT,2",
        ]
    lines.append(unit_line + _ZEROS_UNIT_SUFFIX[zeros])
    return lines


def _excellon_tool_definitions(ctx: DrillFileContext) -> Lines:
    digits = 4 if ctx.units == DrillUnits.INCH else 3
    annotate = ctx.stream == DrillStream.MERGED and not ctx.options.minimal_header
    lines = []
    current_type = None
    for tool in ctx.tools:
        if annotate:
            plating_type = _EXCELLON_PLATING_TYPE[ctx.tool_table.plating_label(tool, ctx.catalog)]
            if plating_type != current_type:
                lines.append(f";TYPE={plating_type}")
                current_type = plating_type
        diameter = to_file_units(tool.diameter, ctx.units)
        lines.append(f"T{tool.tool_index}C{diameter:.{digits}f}")
    return lines


EXCELLON_POLICY = DrillFormatPolicy(
    name="Excellon",
    extension="drl",
    name_suffix="",
    header=_excellon_header,
    tool_definitions=_excellon_tool_definitions,
    body_start=lambda ctx: ["%", "G90", "G05"],
    select_tool=lambda ctx, tool: [f"T{tool.tool_index}"],
    hit=lambda ctx, p: [f"X{p[0]}Y{p[1]}"],
    route=lambda ctx, start, end: [
        f"G00X{start[0]}Y{start[1]}",
        "M15",
        f"G01X{end[0]}Y{end[1]}",
        "M16",
        "G05",
    ],
    footer=lambda ctx: ["T0", "M30"],
    format_number=lambda ctx, value, hole: format_excellon_number(
        value, ctx.precision, ctx.options.zeros, hole=hole
    ),
    routes_slots=lambda options: options.route_oval_holes,
)


# Gerber X2


def _gerber_header(ctx: DrillFileContext) -> Lines:
    digits = ctx.precision.decimal_digits
    created = ctx.created.isoformat(timespec="seconds")
    return [
        f"%TF.GenerationSoftware,{GENERATOR},{__version__}*%",
        f"%TF.CreationDate,{created}*%",
        "%TF.SameCoordinates,Original*%",
        f"%TF.FileFunction,{ctx.file_function()}*%",
        "%TF.FilePolarity,Positive*%",
        f"%FSLAX4{digits}Y4{digits}*%",
        f"G04 Gerber Fmt 4.{digits}, Leading zero omitted, Abs format (unit mm)*",
        f"G04 Created by {GENERATOR} {__version__} date {created}*",
        "%MOMM*%",
        "%LPD*%",
        "G01*",
    ]


def aperture_function(holes: List[HoleRecord]) -> str:
    """X2 aperture function of a drill tool."""
    if holes and all(hole.via_class.is_via for hole in holes):
        return "ViaDrill"
    if any(hole.is_plated for hole in holes):
        return "ComponentDrill"
    return "MechanicalDrill"


def _gerber_tool_definitions(ctx: DrillFileContext) -> Lines:
    lines = ["G04 APERTURE LIST*"]
    for tool in ctx.tools:
        lines.append(f"%TA.AperFunction,{aperture_function(ctx.stream_holes(tool))}*%")
        lines.append(f"%ADD{tool.tool_index + APERTURE_OFFSET}C,{tool.diameter:.6f}*%")
    lines.append("%TD*%")
    lines.append("G04 APERTURE END LIST*")
    return lines


GERBER_POLICY = DrillFormatPolicy(
    name="Gerber X2",
    extension="gbr",
    name_suffix="-drl",
    header=_gerber_header,
    tool_definitions=_gerber_tool_definitions,
    body_start=lambda ctx: [],
    select_tool=lambda ctx, tool: [f"D{tool.tool_index + APERTURE_OFFSET}*"],
    hit=lambda ctx, p: [f"X{p[0]}Y{p[1]}D03*"],
    route=lambda ctx, start, end: [
        f"X{start[0]}Y{start[1]}D02*",
        f"X{end[0]}Y{end[1]}D01*",
    ],
    footer=lambda ctx: ["M02*"],
    format_number=lambda ctx, value, hole: format_gerber_number(value, ctx.precision, hole=hole),
    # Gerber drill layers always route slots
    routes_slots=lambda options: True,
)


def render_drill_file(policy: DrillFormatPolicy, ctx: DrillFileContext) -> str:
    """
    Render one drill file in memory.

    Raises:
        CoordinateOverflow: If any coordinate does not fit the number format
    """

    def point(p: Tuple[float, float], hole: HoleRecord) -> Tuple[str, str]:
        x, y = ctx.transform.apply(p)
        return (
            policy.format_number(ctx, to_file_units(x, ctx.units), hole.source),
            policy.format_number(ctx, to_file_units(y, ctx.units), hole.source),
        )

    route = policy.routes_slots(ctx.options)
    lines = policy.header(ctx) + policy.tool_definitions(ctx) + policy.body_start(ctx)

    for tool in ctx.tools:
        lines += policy.select_tool(ctx, tool)
        for hole in ctx.stream_holes(tool):
            if hole.is_slot and route:
                lines += policy.route(ctx, point(hole.position, hole), point(hole.end_position, hole))
            elif hole.is_slot:
                lines += policy.hit(ctx, point(hole.centroid, hole))
            else:
                lines += policy.hit(ctx, point(hole.position, hole))

    lines += policy.footer(ctx)
    return "\n".join(lines) + "\n"


@dataclass
class DrillWriteResult:
    """Result of drill file generation."""

    files: List[Path] = field(default_factory=list)
    errors: List[DrillError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every requested file was written."""
        return len(self.errors) == 0

    def __str__(self) -> str:
        lines = [f"Drill files: {len(self.files)} written"]
        for path in self.files:
            lines.append(f"  {path.name}")
        for err in self.errors:
            lines.append(f"  Error: {err.message} ({err.context.get('file', '')})")
        return "\n".join(lines)


def ensure_output_directory(output_dir: Union[str, Path]) -> Path:
    """
    Create the output directory if needed.

    Raises:
        DirectoryUnavailable: If the directory cannot be created or is a file
    """
    path = Path(output_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryUnavailable(path, reason=str(e)) from e
    if not path.is_dir():
        raise DirectoryUnavailable(path, reason="not a directory")
    return path


def write_text_file(path: Path, text: str) -> None:
    """Write a fully rendered file with a single write call.

    Raises:
        WriteFailed: If the storage rejects the write
    """
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise WriteFailed(path, reason=str(e)) from e


class DrillWriter:
    """
    Writes the drill files of a job in one encoding.

    Example::

        writer = DrillWriter(EXCELLON_POLICY)
        result = writer.write(catalog, tools, options, "fab", "board")
    """

    def __init__(self, policy: DrillFormatPolicy):
        self.policy = policy

    def write(
        self,
        catalog: HoleCatalog,
        tools: ToolTable,
        options: DrillJobOptions,
        output_dir: Union[str, Path],
        board_name: str,
        transform: Optional[CoordinateTransform] = None,
        copper_layers: int = 2,
        created: Optional[datetime] = None,
    ) -> DrillWriteResult:
        """
        Write one file per plating stream.

        Args:
            catalog: Hole catalog of the board
            tools: Tool table built from the same catalog
            options: Resolved job options
            output_dir: Target directory, created if missing
            board_name: Base name of the output files
            transform: Origin and mirror transform (default: board origin)
            copper_layers: Copper layer count for the X2 file function
            created: Timestamp written in the headers (default: now)

        Returns:
            DrillWriteResult with the written files and per-file errors

        Raises:
            DirectoryUnavailable: If the output directory cannot be created;
                no file is written in that case
            ConfigurationError: If the options select the auxiliary origin and
                no transform is given
        """
        if transform is None:
            transform = CoordinateTransform.for_options(options)
        directory = ensure_output_directory(output_dir)
        created = created or datetime.now()

        result = DrillWriteResult()
        for stream in drill_streams(options.merge_pth_npth):
            path = directory / self.policy.file_name(board_name, stream)
            ctx = DrillFileContext(
                catalog=catalog,
                tool_table=tools,
                options=options,
                stream=stream,
                transform=transform,
                board_name=board_name,
                copper_layers=copper_layers,
                created=created,
            )
            try:
                text = render_drill_file(self.policy, ctx)
            except CoordinateOverflow as e:
                logger.error(f"{self.policy.name} file {path.name} aborted: {e.message}")
                # Drop the stale file of an earlier run
                path.unlink(missing_ok=True)
                result.errors.append(e.for_file(path))
                continue

            try:
                write_text_file(path, text)
            except WriteFailed as e:
                logger.error(f"Unable to create {path}")
                result.errors.append(e)
                continue

            hole_count = sum(len(ctx.stream_holes(tool)) for tool in ctx.tools)
            logger.info(f"Created {self.policy.name} file {path} ({hole_count} holes)")
            result.files.append(path)

        return result


EXCELLON_WRITER = DrillWriter(EXCELLON_POLICY)
GERBER_WRITER = DrillWriter(GERBER_POLICY)


def write_drill_files(
    catalog: HoleCatalog,
    tools: ToolTable,
    options: DrillJobOptions,
    output_dir: Union[str, Path],
    board_name: str,
    transform: Optional[CoordinateTransform] = None,
    copper_layers: int = 2,
    created: Optional[datetime] = None,
) -> DrillWriteResult:
    """Write the drill files in the encoding selected by ``options``."""
    writer = GERBER_WRITER if options.drill_format == DrillFormat.GERBER_X2 else EXCELLON_WRITER
    return writer.write(
        catalog,
        tools,
        options,
        output_dir,
        board_name,
        transform=transform,
        copper_layers=copper_layers,
        created=created,
    )
