"""
Word lookup helpers shared by the query handlers.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis

WORD_BEFORE_RE = re.compile(r'[\w-]+\??$', re.ASCII)
WORD_AFTER_RE = re.compile(r'^[\w-]*\??', re.ASCII)


@dataclass(frozen=True)
class WordSpan:
    """A word on one line with its [start, end) columns."""
    word: str
    line: int
    start: int
    end: int

    @property
    def range(self) -> types.Range:
        return make_range(self.line, self.start, self.end)

    def preceding_char(self, text: str) -> str:
        return text[self.start - 1] if self.start > 0 else ''


def make_range(line: int, start: int, end: int) -> types.Range:
    return types.Range(
        start=types.Position(line=line, character=start),
        end=types.Position(line=line, character=end),
    )


def word_at(text: str, character: int, line: int = 0) -> Optional[WordSpan]:
    """
    Word touching ``character`` (cursor before, inside or just after it).

    Words may contain hyphens and end in '?'. Leading hyphens belong to a
    minus sign, not the word.
    """
    character = max(0, min(character, len(text)))
    before = text[:character]
    after = text[character:]

    before_match = WORD_BEFORE_RE.search(before)
    # "odd?|" : the '?' already closed the word
    if before_match and before_match.group(0).endswith('?'):
        word = before_match.group(0)
    else:
        after_match = WORD_AFTER_RE.match(after)
        word = (before_match.group(0) if before_match else '') + after_match.group(0)
    start = character - (len(before_match.group(0)) if before_match else 0)

    stripped = word.lstrip('-')
    start += len(word) - len(stripped)
    word = stripped
    if not word or word == '?':
        return None
    return WordSpan(word=word, line=line, start=start, end=start + len(word))


def word_at_position(analysis: DocumentAnalysis, position: types.Position) -> Optional[WordSpan]:
    if position.line >= len(analysis.lines):
        return None
    return word_at(analysis.lines[position.line], position.character, position.line)


def find_occurrences(analysis: DocumentAnalysis, word: str) -> List[WordSpan]:
    """
    Every code occurrence of ``word`` as a whole word.

    Occurrences in strings or comments and ones quoted as a literal
    (``'word``) or unit (`` `word ``) are skipped.
    """
    pattern = re.compile(rf'(?<![\w-]){re.escape(word)}(?![\w-]|\?)', re.ASCII)
    spans: List[WordSpan] = []
    for index, scan in enumerate(analysis.scans):
        text = scan.text
        for match in pattern.finditer(text):
            col = match.start()
            if not scan.tag_at(col).is_code:
                continue
            if col > 0 and text[col - 1] in ("'", "`"):
                continue
            spans.append(WordSpan(word=word, line=index, start=col, end=match.end()))
    return spans
