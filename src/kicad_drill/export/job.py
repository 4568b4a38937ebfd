"""
Drill job orchestration.

A job turns one board snapshot and one options value into drill files, a
drill map and a report:

1. the output directory is created once, before anything is written
2. the hole catalog and tool table are built
3. the requested outputs are written concurrently; each writes its own files
   and only reads the shared catalog and tool table

Example::

    from kicad_drill import BoardSnapshot, DrillJob, DrillJobOptions

    board = BoardSnapshot.load("board.kicad_pcb")
    job = DrillJob(board, DrillJobOptions(output_dir="fab"))
    result = job.run(drill=True, map=True, report=True)
    for line in result.messages:
        print(line)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..drill.catalog import build_hole_catalog
from ..drill.models import HoleCatalog, HoleCounts, ToolTable
from ..drill.options import DrillJobOptions
from ..drill.tools import assign_tools
from ..exceptions import DirectoryUnavailable, DrillError
from ..schema.pcb import BoardSnapshot
from .coordinates import CoordinateTransform
from .drill_map import generate_map
from .drill_writer import ensure_output_directory, write_drill_files
from .report import generate_report, report_file_name

logger = logging.getLogger(__name__)


@dataclass
class DrillJobResult:
    """Result of a drill job."""

    output_dir: Path
    files: List[Path] = field(default_factory=list)
    errors: List[DrillError] = field(default_factory=list)
    counts: HoleCounts = field(default_factory=HoleCounts)
    messages: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every requested output was written."""
        return len(self.errors) == 0

    def __str__(self) -> str:
        lines = [f"Drill job: {self.output_dir}"]
        for path in self.files:
            lines.append(f"  {path.name}")
        if self.errors:
            lines.append(f"  Errors: {len(self.errors)}")
            for err in self.errors:
                lines.append(f"    - {err.message}")
        return "\n".join(lines)


class DrillJob:
    """
    One drill generation request over a board snapshot.

    A job must not be run concurrently with itself: the outputs of one run
    share a single catalog and tool numbering.
    """

    def __init__(self, board: BoardSnapshot, options: Optional[DrillJobOptions] = None):
        self.board = board
        self.options = options or DrillJobOptions()
        self.catalog: Optional[HoleCatalog] = None
        self.tools: Optional[ToolTable] = None

    @property
    def output_dir(self) -> Path:
        """Output directory; relative paths are relative to the board file."""
        output_dir = self.options.output_dir
        if output_dir.is_absolute():
            return output_dir
        return self.board.board_dir / output_dir

    @property
    def transform(self) -> CoordinateTransform:
        return CoordinateTransform.for_job(self.board, self.options)

    def prepare(self) -> None:
        """Build the hole catalog and tool table."""
        self.catalog = build_hole_catalog(self.board)
        self.tools = assign_tools(self.catalog, self.options.merge_pth_npth)
        logger.debug(f"{len(self.catalog)} holes, {len(self.tools)} tools")

    def run(
        self,
        drill: bool = True,
        map: bool = False,
        report: bool = False,
        report_path: Union[str, Path, None] = None,
        created: Optional[datetime] = None,
    ) -> DrillJobResult:
        """
        Generate the requested outputs.

        Args:
            drill: Write the drill files
            map: Write the drill map in ``options.map_format``
            report: Write the drill report
            report_path: Report file (default: ``<board>-drl.rpt`` in the
                output directory; relative paths are relative to it)
            created: Timestamp written in file headers (default: now)

        Returns:
            DrillJobResult; a failure of one output does not stop the others
        """
        directory = self.output_dir
        result = DrillJobResult(output_dir=directory)

        try:
            ensure_output_directory(directory)
        except DirectoryUnavailable as e:
            logger.error(f"Output directory {directory} is not available")
            result.errors.append(e)
            result.messages.append(
                f'Could not write drill and/or map files to folder "{directory}".'
            )
            return result

        self.prepare()
        result.counts = self.catalog.counts
        created = created or datetime.now()

        tasks: Dict[str, Callable[[], Tuple[List[Path], List[DrillError]]]] = {}
        if drill:
            tasks["drill"] = lambda: self._write_drill(directory, created)
        if map:
            tasks["map"] = lambda: ([self._write_map(directory)], [])
        if report:
            tasks["report"] = lambda: (
                [self._write_report(directory, report_path, created)],
                [],
            )

        if tasks:
            with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
                futures = {executor.submit(task): name for name, task in tasks.items()}
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        files, errors = future.result()
                        result.files.extend(files)
                        result.errors.extend(errors)
                    except DrillError as e:
                        logger.error(f"{name} output failed: {e.message}")
                        result.errors.append(e)
                    except Exception as e:
                        logger.error(f"{name} output failed: {e}")
                        result.errors.append(
                            DrillError(
                                f"{name.capitalize()} generation failed: {e}",
                                {"output": name, "error": type(e).__name__},
                            )
                        )

        # Stable order regardless of completion order
        result.files.sort()
        for path in result.files:
            result.messages.append(f"Created file {path}")
        for err in result.errors:
            target = err.context.get("file") or err.context.get("directory", "")
            result.messages.append(f"** Unable to create {target} ** {err.message}")
        return result

    def _write_drill(
        self, directory: Path, created: datetime
    ) -> Tuple[List[Path], List[DrillError]]:
        written = write_drill_files(
            self.catalog,
            self.tools,
            self.options,
            directory,
            self.board.board_name,
            transform=self.transform,
            copper_layers=self.board.copper_layer_count,
            created=created,
        )
        return written.files, written.errors

    def _write_map(self, directory: Path) -> Path:
        return generate_map(
            self.catalog,
            self.tools,
            self.options,
            self.options.map_format,
            directory,
            self.board.board_name,
            outline=self.board.outline,
            transform=self.transform,
        )

    def _write_report(
        self, directory: Path, report_path: Union[str, Path, None], created: datetime
    ) -> Path:
        path = Path(report_path) if report_path else Path(report_file_name(self.board.board_name))
        if not path.is_absolute():
            path = directory / path
        return generate_report(
            self.catalog,
            self.tools,
            self.options.merge_pth_npth,
            path,
            self.board.board_name,
            self.board.copper_layers,
            created,
        )
