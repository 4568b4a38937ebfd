"""
S-expression reader for KiCad board files.

KiCad stores boards as Lisp-like S-expressions:

    (kicad_pcb
        (version 20240108)
        (footprint "Connector:Pin_1x02"
            (at 100 50 90)
            (pad "1" thru_hole circle (at 0 0) (size 1.7 1.7) (drill 1.0))
        )
        (via (at 110 50) (size 0.6) (drill 0.3) (layers "F.Cu" "B.Cu"))
    )

Only reading is supported; drill generation never rewrites the board.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from ..exceptions import ParseError

SExpValue = Union[str, int, float, "SExp"]

# Quoted strings, parentheses, or bare atoms
_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<comment>;[^\n]*)
  | (?P<open>\()
  | (?P<close>\))
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<atom>[^ \t\r\n()"]+)
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"'}


@dataclass
class SExp:
    """
    An S-expression list node: ``(tag value1 value2 (child ...))``.

    Attributes:
        tag: The first element of the list (e.g., "pad", "via")
        values: The remaining elements (atoms or nested SExp)
    """

    tag: str
    values: List[SExpValue] = field(default_factory=list)

    def find(self, tag: str) -> Optional[SExp]:
        """Find the first child SExp with the given tag."""
        for v in self.values:
            if isinstance(v, SExp) and v.tag == tag:
                return v
        return None

    def find_all(self, tag: str) -> List[SExp]:
        """Find all children with the given tag."""
        return [v for v in self.values if isinstance(v, SExp) and v.tag == tag]

    def iter_children(self) -> Iterator[SExp]:
        """Iterate over child SExp nodes (skipping atoms)."""
        for v in self.values:
            if isinstance(v, SExp):
                yield v

    def atoms(self) -> List[Union[str, int, float]]:
        """Atom values of this node, in order, skipping nested lists."""
        return [v for v in self.values if not isinstance(v, SExp)]

    def get_value(self, index: int = 0) -> Optional[SExpValue]:
        """Get a value by index (0 = first value after tag)."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return None

    def get_string(self, index: int = 0) -> Optional[str]:
        """Get a value by index as a string."""
        val = self.get_value(index)
        if val is None or isinstance(val, SExp):
            return None
        return str(val)

    def get_int(self, index: int = 0) -> Optional[int]:
        """Get an integer value by index."""
        val = self.get_value(index)
        if isinstance(val, bool) or isinstance(val, SExp):
            return None
        if isinstance(val, int):
            return val
        try:
            return int(str(val))
        except ValueError:
            return None

    def get_float(self, index: int = 0) -> Optional[float]:
        """Get a float value by index."""
        val = self.get_value(index)
        if isinstance(val, (int, float)):
            return float(val)
        if isinstance(val, str):
            try:
                return float(val)
            except ValueError:
                return None
        return None

    def get_point(self, index: int = 0) -> tuple[float, float]:
        """Read two consecutive numeric values as an (x, y) point."""
        return (self.get_float(index) or 0.0, self.get_float(index + 1) or 0.0)

    def has_atom(self, atom: str) -> bool:
        """Check whether a bare atom (like ``hide`` or ``micro``) is present."""
        return any(isinstance(v, str) and v == atom for v in self.values)

    def __repr__(self) -> str:
        if not self.values:
            return f"SExp({self.tag!r})"
        return f"SExp({self.tag!r}, {self.values!r})"


def _unquote(token: str) -> str:
    body = token[1:-1]
    if "\\" not in body:
        return body
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


def _convert_atom(token: str) -> Union[str, int, float]:
    try:
        if "." in token or "e" in token.lower():
            return float(token)
        return int(token)
    except ValueError:
        return token


def parse_sexp(text: str) -> SExp:
    """Parse S-expression text into an SExp tree.

    Raises:
        ParseError: On unbalanced parentheses, stray atoms or trailing content
    """
    stack: List[SExp] = []
    root: Optional[SExp] = None
    expect_tag = False
    last_end = 0

    for match in _TOKEN_RE.finditer(text):
        if match.start() != last_end:
            break
        last_end = match.end()
        kind = match.lastgroup
        if kind in ("ws", "comment"):
            continue

        pos = match.start()
        if root is not None and not stack:
            raise ParseError("Unexpected content after the root expression", position=pos)

        if kind == "open":
            if expect_tag:
                # A list as the first element; KiCad never does this
                raise ParseError("Expected a tag after '('", position=pos)
            expect_tag = True
            stack.append(SExp(""))
            continue

        if kind == "close":
            if not stack:
                raise ParseError("Unbalanced ')'", position=pos)
            expect_tag = False
            node = stack.pop()
            if stack:
                stack[-1].values.append(node)
            else:
                root = node
            continue

        token = match.group()
        value = _unquote(token) if kind == "string" else _convert_atom(token)

        if not stack:
            raise ParseError("Expected '(' at start of expression", position=pos)
        if expect_tag:
            # Layer tables use numeric tags: (0 "F.Cu" signal)
            stack[-1].tag = str(value)
            expect_tag = False
        else:
            stack[-1].values.append(value)

    if last_end != len(text):
        # Only an unterminated quote leaves text the tokenizer cannot match
        raise ParseError("Unterminated string", position=last_end)
    if stack:
        raise ParseError("Unexpected end of input, expected ')'", position=len(text))
    if root is None:
        raise ParseError("Empty input")
    return root
