"""Console output of the drill commands: job results, hole tables and errors."""

from __future__ import annotations

import logging
import sys
import traceback
from typing import TYPE_CHECKING

from kicad_drill.exceptions import CoordinateOverflow, DrillToolsError
from kicad_drill.units import format_diameter

if TYPE_CHECKING:
    from rich.console import Console

    from kicad_drill.drill.models import HoleCatalog, ToolTable
    from kicad_drill.export.job import DrillJobResult

__all__ = [
    "configure_logging",
    "describe_error",
    "print_error",
    "print_job_result",
    "print_hole_summary",
]


def configure_logging(verbose: bool = False) -> None:
    """Send library log records to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _stderr_console() -> Console:
    from rich.console import Console

    return Console(stderr=True)


def describe_error(e: Exception) -> str:
    """
    One plain-text description of an error for pipes and log files.

    A coordinate overflow names the hole and the file it was found in, since
    that is what the user has to move or change.

    >>> describe_error(CoordinateOverflow(1234.5, 3, 3, hole="J1 pad 1", file_path="b-PTH.drl"))
    'Error: b-PTH.drl: J1 pad 1 at 1234.500000 does not fit the 3:3 number format'
    """
    if isinstance(e, CoordinateOverflow):
        where = f"{e.file_path.name}: " if e.file_path else ""
        hole = e.hole or "a hole"
        return (
            f"Error: {where}{hole} at {e.context['value']} "
            f"does not fit the {e.context['format']} number format"
        )
    if isinstance(e, DrillToolsError):
        return f"Error: {e}"
    return f"Error: {type(e).__name__}: {e}"


def print_error(e: Exception, verbose: bool = False) -> None:
    """
    Print an error to stderr.

    Terminals get the Rich rendering of :class:`DrillToolsError`; pipes get
    :func:`describe_error`. With ``verbose`` the traceback is printed as well
    when the error was raised.
    """
    if verbose and e.__traceback__ is not None:
        print("".join(traceback.format_exception(type(e), e, e.__traceback__)), file=sys.stderr)

    console = _stderr_console()
    if console.is_terminal and isinstance(e, DrillToolsError):
        console.print(e)
    else:
        print(describe_error(e), file=sys.stderr)


def print_job_result(result: DrillJobResult, verbose: bool = False) -> None:
    """Print the file lines of a drill job on stdout and its errors on stderr."""
    for line in result.messages:
        print(line)
    if verbose:
        print(f"{result.counts.total} holes, {len(result.files)} files in {result.output_dir}")
    for err in result.errors:
        print_error(err, verbose=verbose)


def print_hole_summary(
    console: Console, board_name: str, catalog: HoleCatalog, tools: ToolTable
) -> None:
    """Print hole counts per class and the tool table of a catalog."""
    from rich.table import Table

    counts = catalog.counts
    console.print(f"[bold]{board_name}[/bold]: {len(catalog)} holes, {len(tools)} tools")
    console.print(f"  Plated pad holes:     {counts.plated_pad_holes}")
    console.print(f"  Not plated pad holes: {counts.non_plated_pad_holes}")
    console.print(f"  Through vias:         {counts.through_vias}")
    console.print(f"  Micro vias:           {counts.micro_vias}")
    console.print(f"  Blind/buried vias:    {counts.blind_buried_vias}")

    if not len(tools):
        return

    table = Table(title="Drill Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Shape")
    table.add_column("Diameter")
    table.add_column("Plating")
    table.add_column("Holes", justify="right")
    for tool in tools:
        table.add_row(
            f"T{tool.tool_index}",
            tool.shape_kind.label,
            format_diameter(tool.diameter),
            tools.plating_label(tool, catalog),
            str(tool.hole_count),
        )
    console.print(table)
