"""
Command-line interface for kicad-drill.

    kicad-drill drill <pcb>     - Write drill files, drill map and report
    kicad-drill holes <pcb>     - Show hole counts and the tool table
    kicad-drill config          - View/manage configuration

Examples:
    kicad-drill drill board.kicad_pcb -o fab
    kicad-drill drill board.kicad_pcb --units inch --zeros suppress-leading --map pdf
    kicad-drill drill board.kicad_pcb --format gerber --merge-npth --report
    kicad-drill holes board.kicad_pcb
    kicad-drill config --template > .kicad-drill.toml
"""

import argparse
from pathlib import Path
from typing import List, Optional

from kicad_drill import __version__
from kicad_drill.config import Config
from kicad_drill.drill import (
    DrillFormat,
    DrillOrigin,
    DrillPrecision,
    DrillUnits,
    MapFormat,
    ZerosFormat,
    assign_tools,
    build_hole_catalog,
)
from kicad_drill.exceptions import DrillToolsError
from kicad_drill.export import DrillJob
from kicad_drill.schema import BoardSnapshot

from .config_cmd import add_config_arguments, run_config
from .utils import configure_logging, print_error, print_hole_summary, print_job_result

__all__ = ["main", "create_parser"]

MAP_CHOICES = ["hpgl", "ps", "postscript", "gerber", "dxf", "svg", "pdf"]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kicad-drill",
        description="Drill file, drill map and drill report generation for KiCad boards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"kicad-drill {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Drill subcommand
    drill_parser = subparsers.add_parser("drill", help="Generate drill files")
    drill_parser.add_argument("board", help="Path to .kicad_pcb file")
    drill_parser.add_argument(
        "--format", choices=[f.value for f in DrillFormat], help="Drill file format"
    )
    drill_parser.add_argument(
        "--units", choices=[u.value for u in DrillUnits], help="Excellon units"
    )
    drill_parser.add_argument(
        "--zeros", choices=[z.value for z in ZerosFormat], help="Excellon coordinate encoding"
    )
    drill_parser.add_argument(
        "--gerber-precision", type=int, choices=[5, 6], help="Gerber decimal digits"
    )
    drill_parser.add_argument(
        "--mirror", action="store_true", default=None, help="Mirror Y coordinates"
    )
    drill_parser.add_argument(
        "--minimal-header", action="store_true", default=None, help="Minimal Excellon header"
    )
    drill_parser.add_argument(
        "--merge-npth",
        action="store_true",
        default=None,
        help="Merge plated and non-plated holes into one file",
    )
    drill_parser.add_argument(
        "--no-route-slots",
        dest="route_slots",
        action="store_false",
        default=None,
        help="Drill oval holes as one hit at the slot centre",
    )
    drill_parser.add_argument(
        "--map", choices=MAP_CHOICES, help="Also write a drill map in this format"
    )
    drill_parser.add_argument(
        "--no-drill", action="store_true", help="Do not write drill files"
    )
    drill_parser.add_argument("--report", action="store_true", help="Also write a drill report")
    drill_parser.add_argument(
        "--origin", choices=[o.value for o in DrillOrigin], help="Coordinate origin"
    )
    drill_parser.add_argument("-o", "--output", help="Output directory")
    drill_parser.add_argument("-v", "--verbose", action="store_true")

    # Holes subcommand
    holes_parser = subparsers.add_parser("holes", help="Show hole counts and drill tools")
    holes_parser.add_argument("board", help="Path to .kicad_pcb file")
    holes_parser.add_argument(
        "--merge-npth", action="store_true", help="Group tools ignoring plating"
    )
    holes_parser.add_argument("-v", "--verbose", action="store_true")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="View/manage configuration")
    add_config_arguments(config_parser)
    config_parser.add_argument("-v", "--verbose", action="store_true")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for kicad-drill CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    try:
        if args.command == "drill":
            return _run_drill(args)
        elif args.command == "holes":
            return _run_holes(args)
        elif args.command == "config":
            return run_config(args)
    except DrillToolsError as e:
        print_error(e, verbose=args.verbose)
        return 1

    return 0


def _run_drill(args: argparse.Namespace) -> int:
    board_path = Path(args.board)
    board = BoardSnapshot.load(board_path)
    config = Config.load(board_path.resolve().parent)

    precision = None
    if args.gerber_precision:
        precision = DrillPrecision(4, args.gerber_precision)

    options = config.to_options(
        drill_format=args.format,
        units=args.units,
        zeros=args.zeros,
        precision=precision,
        mirror_y=args.mirror,
        minimal_header=args.minimal_header,
        merge_pth_npth=args.merge_npth,
        route_oval_holes=args.route_slots,
        map_format=MapFormat.from_selector(args.map) if args.map else None,
        origin=args.origin,
        output_dir=Path(args.output).resolve() if args.output else None,
    )

    job = DrillJob(board, options)
    result = job.run(drill=not args.no_drill, map=args.map is not None, report=args.report)

    print_job_result(result, verbose=args.verbose)

    return 0 if result.success else 1


def _run_holes(args: argparse.Namespace) -> int:
    from rich.console import Console

    board = BoardSnapshot.load(args.board)
    catalog = build_hole_catalog(board)
    tools = assign_tools(catalog, args.merge_npth)
    print_hole_summary(Console(), board.board_name, catalog, tools)
    return 0
