"""
Drill map generation.

A drill map is a drawing of the board outline with one marker per hole and a
legend mapping markers to tools, used to check drill files by eye. Six plot
formats are available:

- HPGL (``.plt``)
- PostScript (``.ps``)
- Gerber (``.gbr``)
- DXF (``.dxf``)
- SVG (``.svg``)
- PDF (``.pdf``)

An unknown format selector falls back to PostScript instead of failing.

Example::

    from kicad_drill.export.drill_map import generate_map

    path = generate_map(catalog, tools, options, "svg", "fab", "board")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ...drill.models import HoleCatalog, ToolTable
from ...drill.options import DrillJobOptions, MapFormat
from ...exceptions import DrillError, WriteFailed
from ..coordinates import CoordinateTransform
from ..drill_writer import ensure_output_directory, write_text_file
from .dxf import write_dxf_map
from .gerber import render_gerber_map
from .hpgl import render_hpgl
from .mpl import write_matplotlib_map
from .scene import MapScene, build_map_scene

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def map_file_name(board_name: str, plot_format: MapFormat) -> str:
    return f"{board_name}-drl_map.{plot_format.extension}"


def render_map(scene: MapScene, plot_format: MapFormat, path: Path) -> None:
    """Write a scene to ``path`` with the backend of ``plot_format``.

    Raises:
        WriteFailed: If the file cannot be written or the plotter fails
    """
    try:
        if plot_format == MapFormat.HPGL:
            write_text_file(path, render_hpgl(scene))
        elif plot_format == MapFormat.GERBER:
            write_text_file(path, render_gerber_map(scene))
        elif plot_format == MapFormat.DXF:
            write_dxf_map(scene, path)
        else:
            write_matplotlib_map(scene, path, plot_format.extension)
    except DrillError:
        raise
    except Exception as e:
        logger.error(f"{plot_format.name} drill map plotting failed: {e}")
        path.unlink(missing_ok=True)
        raise WriteFailed(path, reason=f"{type(e).__name__}: {e}") from e


def generate_map(
    catalog: HoleCatalog,
    tools: ToolTable,
    options: DrillJobOptions,
    plot_format: Union[MapFormat, int, str, None] = None,
    output_dir: Union[str, Path, None] = None,
    board_name: str = "board",
    outline: Sequence[Tuple[Point, Point]] = (),
    transform: Optional[CoordinateTransform] = None,
) -> Path:
    """
    Generate the drill map of a catalog.

    Args:
        catalog: Hole catalog
        tools: Tool table of the same catalog
        options: Job options (mirror and default plot format)
        plot_format: Plot format or selector; defaults to ``options.map_format``
        output_dir: Target directory; defaults to ``options.output_dir``
        board_name: Base name of the map file
        outline: Board outline segments in board coordinates
        transform: Origin and mirror transform shared with the drill files

    Returns:
        Path of the written map file

    Raises:
        DirectoryUnavailable: If the output directory cannot be created
        WriteFailed: If the file cannot be written or the plotter fails
        ConfigurationError: If the options select the auxiliary origin and
            no transform is given
    """
    fmt = options.map_format if plot_format is None else MapFormat.from_selector(plot_format)
    if transform is None:
        transform = CoordinateTransform.for_options(options)
    directory = ensure_output_directory(output_dir if output_dir is not None else options.output_dir)

    scene = build_map_scene(catalog, tools, transform, outline, board_name)
    path = directory / map_file_name(board_name, fmt)
    render_map(scene, fmt, path)
    logger.info(f"Created drill map {path} ({fmt.name})")
    return path


__all__ = [
    "generate_map",
    "map_file_name",
    "render_map",
    "build_map_scene",
    "MapScene",
]
