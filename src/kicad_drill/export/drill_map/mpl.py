"""
PostScript, SVG and PDF drill map plotters (matplotlib).

Figures are built with the object-oriented :class:`matplotlib.figure.Figure`
API rather than pyplot, so maps can be rendered from worker threads while the
drill files are written.
"""

from __future__ import annotations

from pathlib import Path

from ...exceptions import WriteFailed
from ...units import MM_PER_INCH
from .scene import MapScene

POINTS_PER_INCH = 72.0

# Page size bounds in inches; drawings are scaled 1:1 when they fit
MIN_PAGE_INCHES = 4.0
MAX_PAGE_INCHES = 40.0
PAGE_MARGIN_MM = 5.0


def _import_matplotlib():
    """Lazily import matplotlib, raising a clear error if missing."""
    try:
        import matplotlib

        matplotlib.use("Agg")  # Non-interactive backend for file output
        from matplotlib.collections import LineCollection
        from matplotlib.figure import Figure
        from matplotlib.patches import Circle

        return Figure, LineCollection, Circle
    except ImportError as exc:
        raise ImportError(
            "matplotlib is required for PostScript, SVG and PDF drill maps. "
            "Install it with: pip install matplotlib"
        ) from exc


def build_figure(scene: MapScene):
    """Draw the scene on a new matplotlib figure sized to the drawing."""
    Figure, LineCollection, Circle = _import_matplotlib()

    min_x, min_y, max_x, max_y = scene.bounds()
    min_x -= PAGE_MARGIN_MM
    min_y -= PAGE_MARGIN_MM
    max_x += PAGE_MARGIN_MM
    max_y += PAGE_MARGIN_MM
    width_mm = max(max_x - min_x, 1.0)
    height_mm = max(max_y - min_y, 1.0)

    scale = 1.0 / MM_PER_INCH  # inches per mm
    longest = max(width_mm, height_mm) * scale
    if longest > MAX_PAGE_INCHES:
        scale *= MAX_PAGE_INCHES / longest
    elif longest < MIN_PAGE_INCHES:
        scale *= MIN_PAGE_INCHES / longest
    points_per_mm = scale * POINTS_PER_INCH

    fig = Figure(figsize=(width_mm * scale, height_mm * scale))
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(min_x, max_x)
    ax.set_ylim(min_y, max_y)
    ax.set_aspect("equal")
    ax.set_axis_off()

    if scene.outline:
        ax.add_collection(
            LineCollection(
                [(line.start, line.end) for line in scene.outline],
                linewidths=[line.width * points_per_mm for line in scene.outline],
                colors="black",
            )
        )
    if scene.lines:
        ax.add_collection(
            LineCollection(
                [(line.start, line.end) for line in scene.lines],
                linewidths=[line.width * points_per_mm for line in scene.lines],
                colors="tab:blue",
            )
        )
    for circle in scene.circles:
        ax.add_patch(
            Circle(
                circle.center,
                circle.radius,
                fill=False,
                linewidth=circle.width * points_per_mm,
                edgecolor="tab:blue",
            )
        )
    for text in scene.texts:
        ax.text(
            text.position[0],
            text.position[1],
            text.text,
            fontsize=text.height * points_per_mm,
            ha="left",
            va="baseline",
        )
    return fig


def write_matplotlib_map(scene: MapScene, path: Path, plot_format: str) -> None:
    """Save the scene with matplotlib in ``plot_format`` ("ps", "svg" or "pdf").

    Raises:
        WriteFailed: If the file cannot be written
    """
    fig = build_figure(scene)
    try:
        fig.savefig(str(path), format=plot_format)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise WriteFailed(path, reason=str(e)) from e
