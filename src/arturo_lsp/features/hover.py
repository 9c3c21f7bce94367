"""
Hover: markdown for builtins, attributes, types and user symbols.
"""

import logging
from typing import Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog
from arturo_lsp.features.words import word_at_position

logger = logging.getLogger(__name__)


def _markdown(value: str, word_range: types.Range) -> types.Hover:
    return types.Hover(
        contents=types.MarkupContent(kind=types.MarkupKind.Markdown, value=value),
        range=word_range,
    )


def hover_text(analysis: DocumentAnalysis, position: types.Position) -> Optional[str]:
    """Markdown describing the word under the cursor, or None."""
    if not analysis.is_code_at(position.line, position.character):
        logger.debug("Hover: inside comment or string")
        return None

    span = word_at_position(analysis, position)
    if span is None:
        return None

    catalog = get_catalog()
    word = span.word
    before = span.preceding_char(analysis.lines[position.line])

    if before == '.' and word in catalog.attributes:
        return f"**.{word}** (attribute)\n\nFunction attribute parameter"

    if catalog.is_builtin(word):
        info = catalog.function(word)
        if info is not None:
            return (
                f"**{word}** (builtin)\n\n{info.description}\n\n"
                f"```arturo\n{info.signature}\n```"
            )
        return f"**{word}** (builtin function)"

    if before == ':' and word in catalog.types:
        return f"**:{word}** (type)\n\n{catalog.types[word]}"

    if before == ':' and word in analysis.symbols.custom_types:
        return f"**:{word}** (type)\n\nUser-defined type"

    symbol = analysis.symbols.lookup(word)
    if symbol is not None:
        kind = "function" if symbol.is_function else "variable"
        return f"**{word}** ({kind})\n\nType: `{symbol.inferred_type}`"

    logger.debug("Hover: no info found for '%s'", word)
    return None


def hover(analysis: DocumentAnalysis, position: types.Position) -> Optional[types.Hover]:
    text = hover_text(analysis, position)
    if text is None:
        return None
    span = word_at_position(analysis, position)
    return _markdown(text, span.range)
