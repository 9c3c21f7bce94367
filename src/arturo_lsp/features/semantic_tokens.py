"""
Semantic tokens (full document), delta-encoded.
"""

import re
from typing import List, Optional, Tuple

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog
from arturo_lsp.parser.lexer import SpanType

# Order matters: the index is the token type id
TOKEN_TYPES = [
    "function",
    "variable",
    "parameter",
    "property",
    "keyword",
    "comment",
    "string",
    "number",
    "operator",
    "type",
]

TOKEN_MODIFIERS = [
    "declaration",
    "readonly",
    "defaultLibrary",
]

_TYPE_INDEX = {name: i for i, name in enumerate(TOKEN_TYPES)}
_MOD_BIT = {name: 1 << i for i, name in enumerate(TOKEN_MODIFIERS)}

LEGEND = types.SemanticTokensLegend(
    token_types=TOKEN_TYPES,
    token_modifiers=TOKEN_MODIFIERS,
)

KEYWORDS = frozenset({
    "if", "loop", "while", "until", "when", "unless", "switch", "case",
    "do", "function", "method", "return", "break", "continue",
})

WORD_RE = re.compile(r'(?<![\w-])\w[\w-]*\??', re.ASCII)
NUMBER_RE = re.compile(r'^\d+$')

# (line, start, length, type index, modifier bits)
RawToken = Tuple[int, int, int, int, int]


def _classify_word(word: str, line: int, col: int, text: str,
                   analysis: DocumentAnalysis) -> Optional[Tuple[str, int]]:
    catalog = get_catalog()
    before = text[col - 1] if col > 0 else ''

    if before == ':':
        if word in catalog.types or word in analysis.symbols.custom_types:
            return "type", _MOD_BIT["readonly"]
        return None
    if before == '.':
        if word in catalog.attributes:
            return "property", 0
        return None
    if word in KEYWORDS:
        return "keyword", 0
    if catalog.is_builtin(word):
        return "function", _MOD_BIT["readonly"] | _MOD_BIT["defaultLibrary"]

    symbol = analysis.symbols.lookup(word)
    if symbol is not None:
        modifiers = _MOD_BIT["declaration"] if (symbol.line, symbol.column) == (line, col) else 0
        return ("function" if symbol.is_function else "variable"), modifiers
    if word in analysis.quasi.parameters:
        return "parameter", 0
    if NUMBER_RE.match(word):
        return "number", 0
    return None


def collect_tokens(analysis: DocumentAnalysis) -> List[RawToken]:
    """Absolute-position tokens in document order."""
    tokens: List[RawToken] = []
    for index, scan in enumerate(analysis.scans):
        text = scan.text
        for span in scan.spans:
            if span.tag == SpanType.LINE_COMMENT:
                tokens.append((index, span.start, span.end - span.start, _TYPE_INDEX["comment"], 0))
            elif span.tag.is_string:
                tokens.append((index, span.start, span.end - span.start, _TYPE_INDEX["string"], 0))

        for match in WORD_RE.finditer(text):
            col = match.start()
            if not scan.tag_at(col).is_code:
                continue
            kind = _classify_word(match.group(0), index, col, text, analysis)
            if kind is None:
                continue
            token_type, modifiers = kind
            tokens.append((index, col, len(match.group(0)), _TYPE_INDEX[token_type], modifiers))

    tokens.sort()
    return tokens


def encode(tokens: List[RawToken]) -> List[int]:
    """Delta-encode sorted tokens into the flat LSP integer array."""
    data: List[int] = []
    prev_line = 0
    prev_start = 0
    for line, start, length, token_type, modifiers in tokens:
        delta_line = line - prev_line
        delta_start = start - prev_start if delta_line == 0 else start
        data.extend([delta_line, delta_start, length, token_type, modifiers])
        prev_line, prev_start = line, start
    return data


def semantic_tokens(analysis: DocumentAnalysis) -> types.SemanticTokens:
    return types.SemanticTokens(data=encode(collect_tokens(analysis)))
