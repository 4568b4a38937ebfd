"""
Exception hierarchy for kicad-drill.

Every error carries context (file paths, offending hole, values) and
suggestions so the caller can turn it into a user-facing message.

Drill generation failures derive from :class:`DrillError`:

- :class:`DirectoryUnavailable` - output directory missing and not creatable,
  nothing was written
- :class:`CoordinateOverflow` - a scaled coordinate does not fit the fixed-width
  field of the selected format, the affected file was not written
- :class:`WriteFailed` - the storage rejected a write

Example::

    from kicad_drill.exceptions import CoordinateOverflow

    raise CoordinateOverflow(
        12345.678, 3, 3, hole="J1 pad 1", file_path="board-PTH.drl"
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class DrillToolsError(Exception):
    """
    Base exception for all kicad-drill errors.

    Attributes:
        context: Dictionary of contextual information (file, hole, value...)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()

    def __rich_console__(self, console, options):
        """Render with Rich markup when printed on a terminal console."""
        from rich.text import Text

        yield Text(f"Error: {self.message}", style="bold red")
        for key, value in self.context.items():
            yield Text(f"  {key}: {value}", style="dim")
        for suggestion in self.suggestions:
            yield Text(f"  - {suggestion}", style="yellow")


class ParseError(DrillToolsError):
    """
    Board file parsing failed.

    Example::

        raise ParseError(
            "Unexpected end of input in list",
            file_path="board.kicad_pcb",
            suggestions=["Check for missing parentheses"],
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        position: Optional[int] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if position is not None and "position" not in ctx:
            ctx["position"] = position

        super().__init__(message, ctx, suggestions)


class FileFormatError(DrillToolsError):
    """File exists but is not a KiCad board file."""

    pass


class FileNotFoundError(DrillToolsError):
    """Required input file was not found."""

    pass


class ConfigurationError(DrillToolsError):
    """
    Invalid drill job configuration.

    Raised when an option value cannot be interpreted at all (an unknown
    drill format name, for example). Out-of-range precision and map
    selectors are clamped instead.
    """

    pass


class DrillError(DrillToolsError):
    """Base class for failures of a drill, map or report generation request."""

    pass


class DirectoryUnavailable(DrillError):
    """
    Output directory is missing and could not be created.

    Fatal to the whole request: no file is written.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        reason: str = "",
        suggestions: Optional[List[str]] = None,
    ):
        self.directory = Path(directory)
        context: Dict[str, Any] = {"directory": str(directory)}
        if reason:
            context["reason"] = reason
        super().__init__(
            "Output directory is not available",
            context,
            suggestions
            or [
                "Check that the parent directory exists and is writable",
                "Choose another output directory",
            ],
        )


class CoordinateOverflow(DrillError):
    """
    A coordinate does not fit the fixed-width field after scaling.

    Fatal to the file being generated only.
    """

    def __init__(
        self,
        value: float,
        integer_digits: int,
        decimal_digits: int,
        hole: str = "",
        file_path: Optional[Union[str, Path]] = None,
    ):
        self.value = value
        self.hole = hole
        self.file_path = Path(file_path) if file_path else None
        context: Dict[str, Any] = {
            "value": f"{value:.6f}",
            "format": f"{integer_digits}:{decimal_digits}",
        }
        if hole:
            context["hole"] = hole
        if file_path:
            context["file"] = str(file_path)
        super().__init__(
            "Coordinate does not fit the drill file number format",
            context,
            [
                "Use the auxiliary origin so coordinates stay near 0,0",
                "Use millimetre units, which allow a larger integer part",
            ],
        )

    def for_file(self, file_path: Union[str, Path]) -> "CoordinateOverflow":
        """Return a copy of this error tagged with the file being written."""
        fmt = self.context["format"].split(":")
        return CoordinateOverflow(
            self.value, int(fmt[0]), int(fmt[1]), hole=self.hole, file_path=file_path
        )


class WriteFailed(DrillError):
    """The underlying storage rejected a write."""

    def __init__(self, file_path: Union[str, Path], reason: str = ""):
        self.file_path = Path(file_path)
        context: Dict[str, Any] = {"file": str(file_path)}
        if reason:
            context["reason"] = reason
        super().__init__(
            "Unable to write output file",
            context,
            ["Check free disk space and file permissions"],
        )


__all__ = [
    "DrillToolsError",
    "ParseError",
    "FileFormatError",
    "FileNotFoundError",
    "ConfigurationError",
    "DrillError",
    "DirectoryUnavailable",
    "CoordinateOverflow",
    "WriteFailed",
]
