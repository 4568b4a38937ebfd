"""
File loading for KiCad board files.
"""

from pathlib import Path

from kicad_drill.exceptions import FileFormatError, ParseError
from kicad_drill.exceptions import FileNotFoundError as DrillFileNotFoundError

from .sexp import SExp, parse_sexp


def load_pcb(path: str | Path) -> SExp:
    """
    Load a KiCad PCB file.

    Args:
        path: Path to .kicad_pcb file

    Returns:
        Parsed SExp tree

    Raises:
        FileNotFoundError: If file doesn't exist
        ParseError: If the file is not a well formed S-expression
        FileFormatError: If file is not a PCB
    """
    path = Path(path)
    if not path.exists():
        raise DrillFileNotFoundError(
            "PCB file not found",
            context={"file": str(path)},
            suggestions=[
                "Check that the file path is correct",
                "Ensure the file has a .kicad_pcb extension",
            ],
        )

    text = path.read_text(encoding="utf-8")
    try:
        sexp = parse_sexp(text)
    except ParseError as e:
        raise ParseError(
            e.message,
            context={**e.context, "file": str(path)},
            suggestions=["Open and re-save the board in KiCad to repair it"],
        ) from e

    if sexp.tag != "kicad_pcb":
        raise FileFormatError(
            "Not a KiCad PCB file",
            context={"file": str(path), "expected": "kicad_pcb", "got": sexp.tag},
            suggestions=["Use a .kicad_pcb file for drill generation"],
        )

    return sexp
