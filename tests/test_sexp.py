"""Tests for the S-expression parser and board file loading."""

import pytest

from kicad_drill.core import SExp, load_pcb, parse_sexp
from kicad_drill.exceptions import FileFormatError, FileNotFoundError, ParseError


class TestSExpParsing:
    """Basic parsing tests."""

    def test_parse_simple(self):
        sexp = parse_sexp('(test "value")')
        assert sexp.tag == "test"
        assert sexp.get_string(0) == "value"

    def test_parse_numbers(self):
        sexp = parse_sexp("(at 10 -2.5 90)")
        assert sexp.get_value(0) == 10
        assert isinstance(sexp.get_value(0), int)
        assert sexp.get_float(1) == -2.5
        assert sexp.get_point(0) == (10.0, -2.5)

    def test_parse_nested(self):
        sexp = parse_sexp('(pad "1" thru_hole circle (at 1 2) (drill 0.8))')
        assert sexp.get_string(0) == "1"
        assert sexp.has_atom("thru_hole")
        assert sexp.find("drill").get_float(0) == 0.8
        assert sexp.find("missing") is None

    def test_find_all(self):
        sexp = parse_sexp("(root (item 1) (other) (item 2))")
        items = sexp.find_all("item")
        assert [i.get_int(0) for i in items] == [1, 2]
        assert len(list(sexp.iter_children())) == 3

    def test_numeric_tags(self):
        """Layer tables use numbers as list tags."""
        sexp = parse_sexp('(layers (0 "F.Cu" signal) (31 "B.Cu" signal))')
        assert [c.tag for c in sexp.iter_children()] == ["0", "31"]

    def test_escaped_string(self):
        sexp = parse_sexp(r'(text "say \"hi\"")')
        assert sexp.get_string(0) == 'say "hi"'

    def test_atoms_skip_lists(self):
        sexp = parse_sexp("(drill oval 0.6 1.7 (offset 0 0.2))")
        assert sexp.atoms() == ["oval", 0.6, 1.7]

    def test_repr(self):
        assert repr(SExp("empty")) == "SExp('empty')"


class TestSExpErrors:
    """Malformed input raises ParseError."""

    def test_unbalanced_close(self):
        with pytest.raises(ParseError):
            parse_sexp("(a))")

    def test_missing_close(self):
        with pytest.raises(ParseError, match="Unexpected end"):
            parse_sexp("(a (b 1)")

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="Unterminated"):
            parse_sexp('(a "open)')

    def test_empty_input(self):
        with pytest.raises(ParseError):
            parse_sexp("   ")

    def test_content_after_root(self):
        with pytest.raises(ParseError):
            parse_sexp("(a) (b)")

    def test_atom_outside_list(self):
        with pytest.raises(ParseError):
            parse_sexp("atom")


class TestLoadPcb:
    """Board file loading."""

    def test_load_minimal(self, minimal_pcb):
        sexp = load_pcb(minimal_pcb)
        assert sexp.tag == "kicad_pcb"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError) as exc_info:
            load_pcb(tmp_path / "missing.kicad_pcb")
        assert "missing.kicad_pcb" in exc_info.value.context["file"]

    def test_wrong_root(self, tmp_path):
        path = tmp_path / "schematic.kicad_sch"
        path.write_text("(kicad_sch (version 20231120))")
        with pytest.raises(FileFormatError) as exc_info:
            load_pcb(path)
        assert exc_info.value.context["got"] == "kicad_sch"

    def test_parse_error_names_file(self, tmp_path):
        path = tmp_path / "broken.kicad_pcb"
        path.write_text("(kicad_pcb (version 1)")
        with pytest.raises(ParseError) as exc_info:
            load_pcb(path)
        assert exc_info.value.context["file"] == str(path)
