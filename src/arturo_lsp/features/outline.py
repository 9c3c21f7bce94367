"""
Document outline and workspace symbol search.
"""

import logging
from typing import Iterable, List

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.features.words import make_range
from arturo_lsp.parser.symbols import Symbol

logger = logging.getLogger(__name__)


def _lsp_kind(symbol: Symbol) -> types.SymbolKind:
    return types.SymbolKind.Function if symbol.is_function else types.SymbolKind.Variable


def document_symbols(analysis: DocumentAnalysis) -> List[types.DocumentSymbol]:
    """Flat outline of functions and variables sorted by line."""
    result = []
    for symbol in analysis.symbols.all_symbols():
        result.append(types.DocumentSymbol(
            name=symbol.name,
            detail=symbol.inferred_type,
            kind=_lsp_kind(symbol),
            range=make_range(symbol.line, 0, len(analysis.line(symbol.line))),
            selection_range=make_range(symbol.line, symbol.column, symbol.end_column),
            children=[],
        ))
    logger.debug(
        "DocumentSymbol: %d functions and %d variables",
        len(analysis.symbols.functions), len(analysis.symbols.variables),
    )
    return result


def workspace_symbols(documents: Iterable[DocumentAnalysis],
                      query: str) -> List[types.WorkspaceSymbol]:
    """Case-insensitive substring search over every open document."""
    query = query.lower()
    result = []
    for analysis in documents:
        container = analysis.uri.rstrip('/').split('/')[-1]
        for symbol in analysis.symbols.all_symbols():
            if query not in symbol.name.lower():
                continue
            result.append(types.WorkspaceSymbol(
                name=symbol.name,
                kind=_lsp_kind(symbol),
                location=types.Location(
                    uri=analysis.uri,
                    range=make_range(symbol.line, symbol.column, symbol.end_column),
                ),
                container_name=container,
            ))
    return result
