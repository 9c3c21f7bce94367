"""
Arturo Lexical Context Classifier

Tags every character of a source line as code, comment, one of the string
forms, or block-literal content. Multi-line string forms carry their state
from the end of one line into the start of the next.

Recognised delimiters (only outside an active string):
    {!  ... }      code block (closes at ":}" or a bare "}")
    {:  ... :}     verbatim string
    {   ... }      curly string (no nested brace counting)
    "   ... "      double-quoted string, backslash escapes
    ««  ... »»     guillemet string
    «   ...        single guillemet string, runs to end of line
    ;   ...        line comment
    [   ... ]      block literal
"""

from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import Iterator, List, Optional, Sequence, Tuple


class SpanType(Enum):
    """Lexical context of a character."""
    CODE = auto()
    LINE_COMMENT = auto()             # ; to end of line
    STRING_DOUBLE = auto()            # "text"
    STRING_CURLY = auto()             # {text}
    STRING_VERBATIM = auto()          # {: text :}
    STRING_CODE_BLOCK = auto()        # {!css ... :}
    STRING_GUILLEMET_SINGLE = auto()  # « text
    STRING_GUILLEMET_DOUBLE = auto()  # «« text »»
    BLOCK_LITERAL = auto()            # [pizza spaghetti]

    @property
    def is_string(self) -> bool:
        return self in STRING_TYPES

    @property
    def is_code(self) -> bool:
        return self in (SpanType.CODE, SpanType.BLOCK_LITERAL)

    @property
    def is_multiline(self) -> bool:
        return self in MULTILINE_TYPES


STRING_TYPES = frozenset({
    SpanType.STRING_DOUBLE,
    SpanType.STRING_CURLY,
    SpanType.STRING_VERBATIM,
    SpanType.STRING_CODE_BLOCK,
    SpanType.STRING_GUILLEMET_SINGLE,
    SpanType.STRING_GUILLEMET_DOUBLE,
})

# Only these forms may stay open across a line boundary
MULTILINE_TYPES = frozenset({
    SpanType.STRING_VERBATIM,
    SpanType.STRING_CODE_BLOCK,
    SpanType.STRING_GUILLEMET_DOUBLE,
})


@dataclass(frozen=True)
class LexicalSpan:
    """Half-open range [start, end) on one line sharing a single tag."""
    start: int
    end: int
    tag: SpanType

    def __contains__(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def __repr__(self):
        return f"LexicalSpan({self.tag.name}, {self.start}:{self.end})"


@dataclass(frozen=True)
class MultilineContext:
    """String state at a line boundary."""
    in_string: bool = False
    string_type: Optional[SpanType] = None


NO_CARRY = MultilineContext()


@dataclass(frozen=True)
class LineScan:
    """Result of classifying one line."""
    text: str
    tags: Tuple[SpanType, ...]
    carry_in: MultilineContext
    carry_out: MultilineContext
    end_tag: SpanType
    comment_start: Optional[int]
    depth: int

    def tag_at(self, offset: int) -> SpanType:
        """Tag at offset; offsets at or past the end report the end-of-line state."""
        if offset < 0:
            offset = 0
        if offset >= len(self.tags):
            return self.end_tag
        return self.tags[offset]

    @property
    def spans(self) -> List[LexicalSpan]:
        spans: List[LexicalSpan] = []
        start = 0
        for i in range(1, len(self.tags) + 1):
            if i == len(self.tags) or self.tags[i] != self.tags[start]:
                spans.append(LexicalSpan(start, i, self.tags[start]))
                start = i
        return spans

    @property
    def is_comment_only(self) -> bool:
        """True when the line holds nothing but whitespace before a comment."""
        return (
            self.comment_start is not None
            and not self.carry_in.in_string
            and not self.text[:self.comment_start].strip()
        )

    def code_text(self, fill: str = " ") -> str:
        """The line with every non-code character replaced by ``fill``."""
        return "".join(
            ch if tag.is_code else fill
            for ch, tag in zip(self.text, self.tags)
        )


class LineScanner:
    """
    Single left-to-right state machine over one line.

    Usage:
        scan = LineScanner(line, carry).scan()
    """

    def __init__(self, line: str, carry: Optional[MultilineContext] = None):
        self.line = line
        self.length = len(line)
        self.pos = 0
        self.carry_in = carry or NO_CARRY
        self.active: Optional[SpanType] = None
        if self.carry_in.in_string:
            self.active = self.carry_in.string_type
        # First offset where a verbatim terminator may start
        self.body_start = 0
        self.depth = 0
        self.comment_start: Optional[int] = None
        self.tags: List[SpanType] = []

    def _current(self) -> Optional[str]:
        if self.pos >= self.length:
            return None
        return self.line[self.pos]

    def _peek(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= self.length:
            return None
        return self.line[pos]

    def _emit(self, tag: SpanType, count: int = 1) -> None:
        count = min(count, self.length - self.pos)
        self.tags.extend([tag] * count)
        self.pos += count

    def _open(self, tag: SpanType, width: int) -> None:
        self.active = tag
        self._emit(tag, width)
        self.body_start = self.pos

    def _close(self, width: int = 1) -> None:
        tag = self.active
        self._emit(tag, width)
        self.active = None

    def _code_tag(self) -> SpanType:
        return SpanType.BLOCK_LITERAL if self.depth > 0 else SpanType.CODE

    def scan(self) -> LineScan:
        while self.pos < self.length:
            if self.active is None:
                self._scan_code()
            else:
                self._scan_string()

        if self.comment_start is not None:
            end_tag = SpanType.LINE_COMMENT
        elif self.active is not None:
            end_tag = self.active
        else:
            end_tag = self._code_tag()

        if self.active is not None and self.active.is_multiline:
            carry_out = MultilineContext(True, self.active)
        else:
            carry_out = NO_CARRY

        return LineScan(
            text=self.line,
            tags=tuple(self.tags),
            carry_in=self.carry_in,
            carry_out=carry_out,
            end_tag=end_tag,
            comment_start=self.comment_start,
            depth=self.depth,
        )

    def _scan_code(self) -> None:
        ch = self._current()
        nxt = self._peek()

        if ch == ';':
            self.comment_start = self.pos
            self._emit(SpanType.LINE_COMMENT, self.length - self.pos)
        elif ch == '{':
            if nxt == '!':
                self._open(SpanType.STRING_CODE_BLOCK, 2)
            elif nxt == ':':
                self._open(SpanType.STRING_VERBATIM, 2)
            else:
                self._open(SpanType.STRING_CURLY, 1)
        elif ch == '"':
            self._open(SpanType.STRING_DOUBLE, 1)
        elif ch == '«':
            if nxt == '«':
                self._open(SpanType.STRING_GUILLEMET_DOUBLE, 2)
            else:
                self._open(SpanType.STRING_GUILLEMET_SINGLE, 1)
        elif ch == '[':
            self.depth += 1
            self._emit(SpanType.BLOCK_LITERAL)
        elif ch == ']':
            tag = self._code_tag()
            self.depth = max(0, self.depth - 1)
            self._emit(tag)
        else:
            self._emit(self._code_tag())

    def _scan_string(self) -> None:
        active = self.active
        ch = self._current()

        if active == SpanType.STRING_DOUBLE:
            if ch == '\\':
                self._emit(active, 2)
            elif ch == '"':
                self._close()
            else:
                self._emit(active)
        elif active in (SpanType.STRING_CURLY, SpanType.STRING_CODE_BLOCK):
            # A code block accepts ":}" as well as a bare "}"; both end at "}"
            if ch == '}':
                self._close()
            else:
                self._emit(active)
        elif active == SpanType.STRING_VERBATIM:
            if ch == ':' and self._peek() == '}' and self.pos >= self.body_start:
                self._close(2)
            else:
                self._emit(active)
        elif active == SpanType.STRING_GUILLEMET_DOUBLE:
            if ch == '»' and self._peek() == '»':
                self._close(2)
            else:
                self._emit(active)
        else:
            # Single guillemet string runs to end of line
            self._emit(active, self.length - self.pos)


@lru_cache(maxsize=4096)
def scan_line(line: str, carry: Optional[MultilineContext] = None) -> LineScan:
    """Classify every character of ``line`` given the incoming string state."""
    return LineScanner(line, carry).scan()


def scan_document(lines: Sequence[str]) -> List[LineScan]:
    """Classify a whole document, carrying multi-line string state forward."""
    scans: List[LineScan] = []
    carry = NO_CARRY
    for line in lines:
        scan = scan_line(line, carry)
        scans.append(scan)
        carry = scan.carry_out
    return scans


def iter_scans(text: str) -> Iterator[Tuple[int, LineScan]]:
    """Yield (line_index, scan) pairs for raw document text."""
    for index, scan in enumerate(scan_document(split_lines(text))):
        yield index, scan


def split_lines(text: str) -> List[str]:
    """Split on newlines, dropping carriage returns."""
    return [line.rstrip('\r') for line in text.split('\n')]


def classify(line: str, offset: int) -> SpanType:
    """Tag of the character at ``offset`` in a single, context-free line."""
    return scan_line(line).tag_at(offset)


def classify_multiline(lines: Sequence[str], line_index: int, offset: int) -> MultilineContext:
    """
    String state at ``offset`` on ``line_index``, honouring strings opened
    on earlier lines. Recomputed from the top of the document every call.
    """
    if line_index < 0 or line_index >= len(lines):
        return NO_CARRY
    carry = NO_CARRY
    for line in lines[:line_index]:
        carry = scan_line(line, carry).carry_out
    tag = scan_line(lines[line_index], carry).tag_at(offset)
    if tag.is_string:
        return MultilineContext(True, tag)
    return NO_CARRY


def is_in_string(line: str, offset: int) -> bool:
    return classify(line, offset).is_string


def is_in_comment(line: str, offset: int) -> bool:
    return classify(line, offset) == SpanType.LINE_COMMENT


def is_in_block_literal(line: str, offset: int) -> bool:
    return classify(line, offset) == SpanType.BLOCK_LITERAL


def find_comment_start(line: str, carry: Optional[MultilineContext] = None) -> Optional[int]:
    """Offset of the ';' that starts a comment, ignoring ones inside strings."""
    return scan_line(line, carry).comment_start


def strip_comments(text: str) -> str:
    """Remove line comments from text, leaving ';' inside strings alone."""
    stripped = []
    for _, scan in iter_scans(text):
        if scan.comment_start is None:
            stripped.append(scan.text)
        else:
            stripped.append(scan.text[:scan.comment_start])
    return '\n'.join(stripped)
