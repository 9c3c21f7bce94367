"""
Tests for the diagnostics engine.
"""

from arturo_lsp.analysis.lint import (
    ArturoLinter,
    LintIssue,
    LintRule,
    Severity,
    UndefinedIdentifierRule,
    lint_text,
)
from arturo_lsp.catalog import get_catalog
from arturo_lsp.config import DiagnosticsSettings


def codes(issues):
    return [i.code for i in issues]


class TestTypeErrors:
    """Tests for E001 binary operation checks."""

    def test_number_plus_string(self, type_error_source):
        """Adding a number variable and a string variable is one error at '+'."""
        issues = lint_text(type_error_source)
        assert len(issues) == 1
        issue = issues[0]
        assert issue.code == "E001"
        assert issue.severity == Severity.ERROR
        assert issue.line == 2
        assert issue.column == 'z: x + y'.index('+')
        assert issue.end_column == len('z: x + y')
        assert "add number and string" in issue.message

    def test_literal_operands(self):
        """Literal operands are typed without a symbol lookup."""
        issues = lint_text('a: "x" - 1')
        assert codes(issues) == ["E001"]
        assert "Cannot subtract string and number" in issues[0].message

    def test_numbers_only(self):
        """Two numbers never produce an error."""
        assert lint_text("a: 1 + 2") == []

    def test_operator_in_string(self):
        """An operator inside a string is not checked."""
        assert lint_text('a: "1 + x"') == []

    def test_label_in_string(self):
        """A 'Label:' inside a string is not a binding."""
        text = 'total: 10\nprint [\n    "Average:" total / 3\n]'
        assert lint_text(text) == []

    def test_operator_in_comment(self):
        """Operators in comments are ignored."""
        assert lint_text('a: 1 ; 2 + "x"') == []


class TestUndefinedIdentifiers:
    """Tests for W001 undefined identifier checks."""

    def test_unknown_word(self):
        """An unknown word is a warning covering the word."""
        issues = lint_text("print foo")
        assert len(issues) == 1
        assert issues[0].code == "W001"
        assert issues[0].message == "'foo' may be undefined"
        assert (issues[0].column, issues[0].end_column) == (6, 9)

    def test_function_parameter(self, greet_source):
        """Function parameters are not diagnosed."""
        assert lint_text(greet_source) == []

    def test_parameter_on_own_line(self):
        """A parameter used outside brackets is still known."""
        text = "greet: function [person][\n    print person\n]"
        assert lint_text(text) == []

    def test_builtins_never_flagged(self):
        """No builtin name is ever reported."""
        catalog = get_catalog()
        text = "\n".join(f"v: {name}" for name in sorted(catalog.builtin_names))
        assert "W001" not in codes(lint_text(text))

    def test_defined_variable(self):
        """Variables bound anywhere in the document are known."""
        assert lint_text("print later\nlater: 1") == []

    def test_prefixed_words(self):
        """Literal, char, color and type prefixes exempt a word."""
        for text in ("print 'foo", "print `foo", "print #foo", "x: :foo"):
            assert lint_text(text) == [], text

    def test_attribute_after_dot(self):
        """Known attributes after '.' are not flagged."""
        assert lint_text("sort.descending [3 1 2]") == []
        issues = lint_text("sort.bogus [1]")
        assert [i.message for i in issues] == ["'bogus' may be undefined"]

    def test_comments_skipped(self):
        """Words in comments are not checked."""
        assert lint_text("; foo bar") == []
        assert lint_text("x: 1 ; foo") == []

    def test_multiline_string_skipped(self):
        """Lines inside a multi-line string are not checked."""
        assert lint_text("x: {:\nfoo bar\n:}") == []

    def test_loop_variable(self):
        """Loop variables are known."""
        assert lint_text("loop [1 2] 'item [\n    print item\n]") == []

    def test_sample_program_clean(self, program_source):
        """A realistic program produces no diagnostics."""
        assert lint_text(program_source) == []


class TestBrackets:
    """Tests for E002 bracket balance."""

    def test_unbalanced(self):
        """Unbalanced brackets are reported on the last line."""
        issues = lint_text("x: [1 2\ny: [3]")
        assert codes(issues) == ["E002"]
        assert issues[0].line == 1
        assert issues[0].message == "Unmatched brackets in file"
        assert (issues[0].column, issues[0].end_column) == (0, len("y: [3]"))

    def test_last_line_without_bracket(self):
        """The check only fires when the last line has a bracket."""
        assert lint_text("x: [1 2\ny: 3") == []

    def test_trailing_newline(self):
        """An empty last line never fires."""
        assert lint_text("x: [1 2\n") == []

    def test_brackets_in_strings(self):
        """Brackets inside strings are not counted."""
        assert lint_text('x: "["\ny: [1]') == []


class TestLinter:
    """Tests for the rule runner."""

    def test_failing_rule_is_isolated(self):
        """A rule that raises does not stop the others."""
        class Broken(LintRule):
            code = "X999"

            def check(self, ctx):
                raise RuntimeError("boom")

        linter = ArturoLinter([Broken(), UndefinedIdentifierRule()])
        assert codes(linter.lint_text("print foo")) == ["W001"]

    def test_max_problems(self):
        """Issues beyond max_problems are dropped."""
        linter = ArturoLinter(max_problems=2)
        assert len(linter.lint_text("print foo1 foo2 foo3 foo4")) == 2

    def test_sorted_by_position(self):
        """Issues come back in document order."""
        issues = lint_text("print zz2\nprint zz1")
        assert [i.line for i in issues] == [0, 1]

    def test_from_settings(self):
        """Disabled rules do not run."""
        linter = ArturoLinter.from_settings(DiagnosticsSettings(undefined_identifiers=False))
        assert linter.lint_text("print foo") == []
        linter = ArturoLinter.from_settings(DiagnosticsSettings(enabled=False))
        assert linter.rules == []

    def test_empty_document(self):
        """Empty text lints cleanly."""
        assert lint_text("") == []


class TestLintIssue:
    """Tests for issue formatting."""

    def test_str(self):
        """String form uses one-based positions."""
        issue = LintIssue(Severity.ERROR, "E001", "bad", line=2, column=5, file="a.art")
        assert str(issue) == "[ERROR] E001 a.art:3:6: bad"

    def test_defaults_and_dict(self):
        """End position defaults to the start."""
        issue = LintIssue(Severity.WARNING, "W001", "msg", line=1, column=4)
        data = issue.to_dict()
        assert data["severity"] == "warning"
        assert data["end_line"] == 1
        assert data["end_column"] == 4
