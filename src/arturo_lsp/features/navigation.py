"""
Go to definition, find references and document highlights.
"""

import logging
from typing import List, Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog
from arturo_lsp.features.words import find_occurrences, make_range, word_at_position

logger = logging.getLogger(__name__)


def definition(analysis: DocumentAnalysis, position: types.Position) -> Optional[types.Location]:
    """Location where the word under the cursor was last bound."""
    scan = analysis.scan(position.line)
    if scan is None:
        logger.debug("Definition: line out of range")
        return None
    if not analysis.is_code_at(position.line, position.character):
        logger.debug("Definition: inside comment or string")
        return None

    span = word_at_position(analysis, position)
    if span is None:
        logger.debug("Definition: no word found")
        return None

    logger.debug("Definition: looking for '%s'", span.word)
    symbol = analysis.symbols.lookup(span.word)
    if symbol is None:
        logger.debug("Definition: no definition found for '%s'", span.word)
        return None

    return types.Location(
        uri=analysis.uri,
        range=make_range(symbol.line, symbol.column, symbol.end_column),
    )


def _target_word(analysis: DocumentAnalysis, position: types.Position) -> Optional[str]:
    span = word_at_position(analysis, position)
    if span is None:
        return None
    if get_catalog().is_builtin(span.word):
        return None
    return span.word


def references(analysis: DocumentAnalysis, position: types.Position) -> List[types.Location]:
    word = _target_word(analysis, position)
    if word is None:
        return []
    return [
        types.Location(uri=analysis.uri, range=occurrence.range)
        for occurrence in find_occurrences(analysis, word)
    ]


def highlights(analysis: DocumentAnalysis, position: types.Position) -> List[types.DocumentHighlight]:
    word = _target_word(analysis, position)
    if word is None:
        return []
    return [
        types.DocumentHighlight(range=occurrence.range, kind=types.DocumentHighlightKind.Text)
        for occurrence in find_occurrences(analysis, word)
    ]
