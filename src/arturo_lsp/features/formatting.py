"""
Arturo Code Formatter

Normalizes Arturo source line by line:
- ``name: value`` label spacing at the start of a line
- Single spaces around binary operators
- Runs of whitespace collapsed inside code
- Indentation by bracket nesting

Blank lines, comment-only lines and lines that start inside a multi-line
string are left alone. String and comment text is never touched.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from lsprotocol import types

from arturo_lsp.parser.lexer import LineScan, scan_document, split_lines

LABEL_RE = re.compile(r'^(\w[\w-]*\??)(\s*):(?!:)(\s*)', re.ASCII)
OPERATOR_RE = re.compile(r'\s*(->|=>|<=|>=|<>|\+\+|[+*/=<>]|(?<=\s)-(?=\s))\s*')
SPACES_RE = re.compile(r'\s{2,}')

OPENERS = "[("
CLOSERS = "])"


@dataclass
class FormatOptions:
    """Configuration for the formatter."""
    indent_size: int = 4
    indent_char: str = " "


class ArturoFormatter:
    """
    Formats Arturo source to a consistent style.

    Usage:
        formatter = ArturoFormatter(FormatOptions(indent_size=2))
        new_text = formatter.format_string(source)
    """

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()

    def _indent(self, depth: int) -> str:
        return self.options.indent_char * (self.options.indent_size * depth)

    @staticmethod
    def _bracket_counts(scan: LineScan):
        """(leading closers, net nesting change) counting code brackets only."""
        leading = 0
        net = 0
        seen_other = False
        for ch, tag in zip(scan.text, scan.tags):
            if ch.isspace() and not seen_other:
                continue
            is_code = tag.is_code
            if is_code and ch in CLOSERS:
                net -= 1
                if not seen_other:
                    leading += 1
                continue
            seen_other = True
            if is_code and ch in OPENERS:
                net += 1
        return leading, net

    @staticmethod
    def _label(match: re.Match) -> str:
        name, before, after = match.groups()
        # "x :integer" is an annotation, not a label
        if before and not after:
            return match.group(0)
        return f"{name}: "

    def _format_code(self, segment: str, at_line_start: bool) -> str:
        if at_line_start:
            segment = LABEL_RE.sub(self._label, segment, count=1)
        segment = OPERATOR_RE.sub(r' \1 ', segment)
        return SPACES_RE.sub(' ', segment)

    def format_line(self, scan: LineScan) -> str:
        """Reformat one line's content without indentation."""
        text = scan.text
        start = len(text) - len(text.lstrip())
        parts: List[str] = []
        for span in scan.spans:
            if span.end <= start:
                continue
            segment = text[max(span.start, start):span.end]
            if span.tag.is_code:
                parts.append(self._format_code(segment, not parts))
            else:
                parts.append(segment)
        line = "".join(parts).lstrip()
        if scan.end_tag.is_code or scan.comment_start is not None:
            line = line.rstrip()
        return line

    def format_lines(self, lines: Sequence[str]) -> List[str]:
        scans = scan_document(lines)
        result: List[str] = []
        depth = 0
        for scan in scans:
            leading, net = self._bracket_counts(scan)
            stripped = scan.text.strip()

            if scan.carry_in.in_string or not stripped or stripped.startswith(';'):
                result.append(scan.text)
            else:
                result.append(self._indent(max(0, depth - leading)) + self.format_line(scan))

            depth = max(0, depth + net)
        return result

    def format_string(self, content: str) -> str:
        return "\n".join(self.format_lines(split_lines(content)))


def format_edits(lines: Sequence[str], indent_size: int = 4) -> List[types.TextEdit]:
    """One TextEdit per line whose formatting changes."""
    formatter = ArturoFormatter(FormatOptions(indent_size=indent_size))
    edits = []
    for index, (old, new) in enumerate(zip(lines, formatter.format_lines(lines))):
        if old != new:
            edits.append(types.TextEdit(
                range=types.Range(
                    start=types.Position(line=index, character=0),
                    end=types.Position(line=index, character=len(old)),
                ),
                new_text=new,
            ))
    return edits
