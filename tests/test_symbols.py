"""
Tests for the symbol table builder.
"""

from arturo_lsp.parser.symbols import (
    SymbolKind,
    SymbolTableBuilder,
    build_symbol_table,
    extract_dictionary_keys,
    extract_function_params,
    extract_loop_variables,
    extract_quasi_bindings,
    is_valid_identifier,
)


class TestBindings:
    """Tests for name: value bindings."""

    def test_variable(self):
        """A plain binding records a variable."""
        symbols = build_symbol_table("x: 5")
        symbol = symbols.variables["x"]
        assert symbol.line == 0
        assert symbol.column == 0
        assert symbol.kind == SymbolKind.VARIABLE
        assert symbol.inferred_type == ":integer"

    def test_function(self, greet_source):
        """A function value records a function."""
        symbols = build_symbol_table(greet_source)
        assert "greet" in symbols.functions
        assert symbols.functions["greet"].inferred_type == ":function"
        assert "greet" not in symbols.variables

    def test_indented_binding_column(self):
        """Column points at the name, not the line start."""
        symbols = build_symbol_table("loop [1] 'i [\n    total: 1\n]")
        assert symbols.variables["total"].line == 1
        assert symbols.variables["total"].column == 4

    def test_commented_binding_ignored(self):
        """Bindings inside comments are not recorded."""
        symbols = build_symbol_table('; name: "ignored"')
        assert "name" not in symbols

    def test_binding_in_string_ignored(self):
        """A colon inside a string is not a binding."""
        symbols = build_symbol_table('print "a: b"')
        assert not symbols.variables

    def test_multiline_string_ignored(self):
        """Lines inside a verbatim string do not bind."""
        symbols = build_symbol_table("x: {:\nname: 1\n:}\ny: 2")
        assert set(symbols.variables) == {"x", "y"}
        assert symbols.variables["x"].inferred_type == ":string"

    def test_last_binding_wins(self):
        """Rebinding replaces the earlier record."""
        symbols = build_symbol_table('a: 1\na: "s"')
        assert symbols.variables["a"].inferred_type == ":string"
        assert symbols.variables["a"].line == 1

    def test_rebinding_moves_between_tables(self):
        """A variable rebound to a function only appears as a function."""
        symbols = build_symbol_table("f: 1\nf: function [][]")
        assert "f" in symbols.functions
        assert "f" not in symbols.variables

    def test_annotation_is_not_binding(self):
        """'x :integer' is an annotation."""
        symbols = build_symbol_table("x :integer")
        assert "x" not in symbols

    def test_build_is_deterministic(self, program_source):
        """Building twice gives equal tables."""
        builder = SymbolTableBuilder(program_source)
        assert builder.build() == builder.build()

    def test_all_symbols_sorted(self):
        """all_symbols is ordered by position."""
        symbols = build_symbol_table("b: 2\nf: $[x][x]\na: 1")
        assert [s.name for s in symbols.all_symbols()] == ["b", "f", "a"]


class TestCustomTypes:
    """Tests for define :type."""

    def test_define(self):
        """define :name registers a custom type."""
        symbols = build_symbol_table("define :person [name age][]")
        assert symbols.custom_types == {"person"}
        assert "person" in symbols
        assert not symbols.variables

    def test_define_in_string(self):
        """define inside a string is ignored."""
        symbols = build_symbol_table('print "define :ghost"')
        assert not symbols.custom_types


class TestQuasiBindings:
    """Tests for parameters, loop variables and dictionary keys."""

    def test_function_params(self):
        """Parameters are collected and annotations dropped."""
        assert extract_function_params("f: function [a :integer b][a + b]") == ["a", "b"]
        assert extract_function_params("g: $[x y][x]") == ["x", "y"]

    def test_single_param(self):
        """function 'x binds one parameter."""
        assert extract_function_params("f: function 'x [x]") == ["x"]

    def test_loop_variables(self):
        """Loop variables in both forms."""
        assert extract_loop_variables("loop items 'item [") == ["item"]
        assert extract_loop_variables("loop d [k v][") == ["k", "v"]
        assert extract_loop_variables("loop [1 2 3] 'n [") == ["n"]

    def test_dictionary_keys(self):
        """Every label on a line is a key."""
        assert extract_dictionary_keys("d: #[name: 1 age: 2]") == {"d", "name", "age"}

    def test_greet_parameter(self, greet_source):
        """The greet parameter is a quasi-binding."""
        quasi = extract_quasi_bindings(greet_source)
        assert "person" in quasi
        assert "person" in quasi.parameters

    def test_params_in_strings_ignored(self):
        """Brackets inside strings are not parameters."""
        quasi = extract_quasi_bindings('print "function [ghost]"')
        assert "ghost" not in quasi


class TestIdentifiers:
    """Tests for identifier validation."""

    def test_valid(self):
        """Letters, digits, hyphens, underscores and a trailing '?'."""
        for name in ("x", "_tmp", "my-var", "empty?", "a1"):
            assert is_valid_identifier(name)

    def test_invalid(self):
        """Names must not start with a digit or contain other characters."""
        for name in ("7x", "a b", "x?y", "", "-x"):
            assert not is_valid_identifier(name)
