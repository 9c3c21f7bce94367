"""
Tests for literal recognition and value type inference.
"""

import pytest

from arturo_lsp.parser.inference import infer_type, is_function_value, type_family
from arturo_lsp.parser.literals import is_literal, is_number


class TestLiterals:
    """Tests for is_literal."""

    @pytest.mark.parametrize("token", [
        "42", "-3", "3.14", "0xFF", "0b101",
        "true", "false", "maybe", "null",
        "1.2.3", "2.0.0-alpha", "10-beta",
        "fff", "a0b1c2",
        "kg", "mph", "bar", "red", "navy",
        "x",
    ])
    def test_literals(self, token):
        """Numbers, logicals, versions, hex bodies, units, colors and single letters."""
        assert is_literal(token)

    @pytest.mark.parametrize("token", ["", "foo", "qux", "Hello", "x1", "deadbeef", "myVar"])
    def test_non_literals(self, token):
        """Ordinary identifiers are not literals."""
        assert not is_literal(token)

    def test_is_number(self):
        """Hex and binary prefixes count as numbers."""
        assert is_number("0x1A")
        assert is_number("0b11")
        assert not is_number("0b12")


class TestInference:
    """Tests for infer_type."""

    @pytest.mark.parametrize("value,expected", [
        ("42", ":integer"),
        ("-1.5", ":floating"),
        ("3:4", ":rational"),
        ("maybe", ":logical"),
        ("null", ":null"),
        ('"hi"', ":string"),
        ("{text}", ":string"),
        ("«text", ":string"),
        ("`a", ":char"),
        ("#[a: 1]", ":dictionary"),
        ("[1 2]", ":block"),
        (":integer", ":type"),
        ("'sym", ":literal"),
        ("method [][]", ":method"),
        ("function [x][x]", ":function"),
        ("$[x][x]", ":function"),
        ("#ff00aa", ":color"),
        ("#red", ":color"),
        ("1..10", ":range"),
        ("foo", ":any"),
    ])
    def test_infer(self, value, expected):
        """First matching rule wins."""
        assert infer_type(value) == expected

    def test_surrounding_whitespace(self):
        """Values are stripped before inference."""
        assert infer_type("  7  ") == ":integer"

    def test_function_marker_needs_word_boundary(self):
        """'functional' is not a function value."""
        assert not is_function_value("functional")
        assert infer_type("functional") == ":any"

    def test_type_family(self):
        """Numeric and string tags collapse to families."""
        assert type_family(":floating") == "number"
        assert type_family(":char") == "string"
        assert type_family(":block") == "block"
