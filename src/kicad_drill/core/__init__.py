"""S-expression parsing and board file loading."""

from .sexp import SExp, parse_sexp
from .sexp_file import load_pcb

__all__ = [
    "SExp",
    "parse_sexp",
    "load_pcb",
]
