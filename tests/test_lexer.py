"""
Tests for the lexical context classifier.
"""

import pytest

from arturo_lsp.parser.lexer import (
    NO_CARRY,
    LexicalSpan,
    SpanType,
    classify,
    classify_multiline,
    find_comment_start,
    is_in_block_literal,
    is_in_comment,
    is_in_string,
    scan_document,
    scan_line,
    split_lines,
    strip_comments,
)


class TestSingleLineStrings:
    """Tests for string forms that close on the same line."""

    def test_double_quoted_body(self):
        """Characters inside double quotes are string."""
        assert classify('x: "a;b"', 5) == SpanType.STRING_DOUBLE

    def test_delimiters_belong_to_string(self):
        """Opening and closing quotes are tagged with the string."""
        line = 'x: "ab"'
        assert classify(line, 3) == SpanType.STRING_DOUBLE
        assert classify(line, 6) == SpanType.STRING_DOUBLE

    def test_code_after_string(self):
        """Classification returns to code after a string closes."""
        assert classify('x: "a" y', 7) == SpanType.CODE

    def test_escaped_quote(self):
        """A backslash-escaped quote does not close the string."""
        line = 's: "a\\"b;c" ; d'
        assert find_comment_start(line) == 12

    def test_curly_string(self):
        """Curly braces delimit a string."""
        line = 's: {hello ; there}'
        assert classify(line, 10) == SpanType.STRING_CURLY
        assert find_comment_start(line) is None

    def test_verbatim_string(self):
        """Verbatim strings close at ':}'."""
        line = 'v: {: a ; b :} c'
        assert classify(line, 8) == SpanType.STRING_VERBATIM
        assert classify(line, 15) == SpanType.CODE

    def test_code_block_closes_at_brace(self):
        """A code block string closes at the first '}'."""
        line = 'c: {!html <b>; </b>} x'
        assert classify(line, 13) == SpanType.STRING_CODE_BLOCK
        assert classify(line, 21) == SpanType.CODE

    def test_code_block_colon_terminator(self):
        """A code block also accepts ':}' as its end."""
        line = 'c: {!css a ; b :} y'
        assert classify(line, 11) == SpanType.STRING_CODE_BLOCK
        assert classify(line, 18) == SpanType.CODE

    def test_double_guillemet(self):
        """Double guillemets delimit a string."""
        line = '«« a ; b »» c'
        assert classify(line, 5) == SpanType.STRING_GUILLEMET_DOUBLE
        assert classify(line, 12) == SpanType.CODE

    def test_single_guillemet_runs_to_end(self):
        """A single guillemet string runs to end of line."""
        line = '« hello ; world'
        scan = scan_line(line)
        assert all(tag == SpanType.STRING_GUILLEMET_SINGLE for tag in scan.tags)
        assert scan.comment_start is None
        assert scan.carry_out == NO_CARRY

    def test_lone_closing_guillemet_is_code(self):
        """A stray '»' outside a string is ordinary code."""
        assert find_comment_start('x » ; c') == 4


class TestComments:
    """Tests for line comment detection."""

    def test_comment_after_code(self):
        """';' outside strings starts a comment."""
        assert classify('x: 5 ; note', 5) == SpanType.LINE_COMMENT
        assert is_in_comment('x: 5 ; note', 8)

    def test_semicolon_in_string_is_not_comment(self):
        """';' inside a string does not start a comment."""
        assert find_comment_start('print "a;b"') is None

    @pytest.mark.parametrize("line", [
        'x: "a;b"',
        'x: {a;b}',
        'x: {:a;b:}',
        'x: {!css a;b:}',
        'x: ««a;b»»',
    ])
    def test_semicolon_in_every_string_form(self, line):
        """No string form lets ';' start a comment; one after it does."""
        assert find_comment_start(line) is None
        assert find_comment_start(line + ' ; c') == len(line) + 1

    def test_offset_past_end_reports_end_state(self):
        """Offsets at or past the end report the end-of-line state."""
        assert classify('x: 1 ; c', 100) == SpanType.LINE_COMMENT
        assert classify('x: "abc', 7) == SpanType.STRING_DOUBLE
        assert classify('x: 1', 4) == SpanType.CODE

    def test_strip_comments(self):
        """strip_comments keeps ';' inside strings."""
        text = 'x: 1 ; c\ns: "a;b"'
        assert strip_comments(text) == 'x: 1 \ns: "a;b"'

    def test_strip_matches_truncation_without_strings(self):
        """Without strings, stripping truncates at the first ';'."""
        line = 'a: 1 ; b ; c'
        assert strip_comments(line) == line[:line.index(';')]


class TestBlockLiterals:
    """Tests for bracket tracking."""

    def test_inside_brackets(self):
        """Content between brackets is a block literal."""
        assert is_in_block_literal('[a b]', 1)
        assert classify('[a b]', 0) == SpanType.BLOCK_LITERAL

    def test_depth_clamped_at_zero(self):
        """An unmatched ']' never drives depth negative."""
        scan = scan_line(']x')
        assert scan.tag_at(1) == SpanType.CODE
        assert scan.depth == 0

    def test_brackets_in_strings_ignored(self):
        """Brackets inside strings do not change depth."""
        assert scan_line('"[" x').depth == 0

    def test_block_literal_counts_as_code(self):
        """Block literal content is still code for other features."""
        assert SpanType.BLOCK_LITERAL.is_code
        assert not is_in_string('[a b]', 1)


class TestMultiline:
    """Tests for state carried across lines."""

    def test_verbatim_carries(self):
        """A verbatim string stays open across lines."""
        lines = ['t: {:', 'a ; b', ':}', 'c: 1']
        ctx = classify_multiline(lines, 1, 2)
        assert ctx.in_string
        assert ctx.string_type == SpanType.STRING_VERBATIM
        assert not classify_multiline(lines, 3, 0).in_string

    def test_comment_inside_carried_string(self):
        """';' inside a carried string is not a comment."""
        scans = scan_document(['t: {:', 'a ; b', ':}'])
        assert scans[1].comment_start is None
        assert scans[2].carry_out == NO_CARRY

    def test_double_quote_does_not_carry(self):
        """An unterminated double-quoted string ends at the line."""
        scans = scan_document(['s: "abc', 'x: 1 ; c'])
        assert not scans[1].carry_in.in_string
        assert scans[1].comment_start == 5

    def test_curly_does_not_carry(self):
        """An unterminated curly string ends at the line."""
        scans = scan_document(['s: {abc', 'x ; c'])
        assert scans[1].comment_start == 2

    def test_guillemet_double_carries(self):
        """Double guillemet strings span lines."""
        scans = scan_document(['s: «« one', 'two ; x »» y'])
        assert scans[1].carry_in.string_type == SpanType.STRING_GUILLEMET_DOUBLE
        assert scans[1].comment_start is None
        assert scans[1].tag_at(11) == SpanType.CODE

    def test_out_of_range_line(self):
        """Out-of-range line indices are never in a string."""
        assert classify_multiline(['x'], 5, 0) == NO_CARRY


class TestScanHelpers:
    """Tests for LineScan helpers."""

    def test_spans(self):
        """spans groups consecutive equal tags."""
        spans = scan_line('a "b" c').spans
        assert spans == [
            LexicalSpan(0, 2, SpanType.CODE),
            LexicalSpan(2, 5, SpanType.STRING_DOUBLE),
            LexicalSpan(5, 7, SpanType.CODE),
        ]

    def test_code_text_masks_strings(self):
        """code_text blanks out strings and comments."""
        assert scan_line('a "b" ; c').code_text() == 'a' + ' ' * 8

    def test_comment_only(self):
        """A line with only a comment is comment-only."""
        assert scan_line('   ; note').is_comment_only
        assert not scan_line('x ; note').is_comment_only

    def test_split_lines_strips_cr(self):
        """Carriage returns are dropped."""
        assert split_lines('a\r\nb') == ['a', 'b']
