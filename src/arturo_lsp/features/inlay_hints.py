"""
Inlay hints: parameter names before builtin call arguments and inferred
types after plain assignments.
"""

import re
from typing import List, Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog

CALL_RE = re.compile(r'(\w+)\s*\[([^\]]+)\]')
ASSIGNMENT_RE = re.compile(r'(\w[\w-]*\??)\s*:\s*([^;\n]+)')
ARGUMENT_RE = re.compile(r'\S+')


def _parameter_hints(analysis: DocumentAnalysis, index: int) -> List[types.InlayHint]:
    catalog = get_catalog()
    scan = analysis.scans[index]
    hints = []
    for match in CALL_RE.finditer(scan.text):
        if not scan.tag_at(match.start()).is_code:
            continue
        info = catalog.function(match.group(1))
        if info is None or not info.params:
            continue
        arguments = ARGUMENT_RE.finditer(match.group(2))
        for param, argument in zip(info.params, arguments):
            hints.append(types.InlayHint(
                position=types.Position(line=index, character=match.start(2) + argument.start()),
                label=f"{param.name}:",
                kind=types.InlayHintKind.Parameter,
                padding_right=True,
            ))
    return hints


def _type_hints(analysis: DocumentAnalysis, index: int) -> List[types.InlayHint]:
    scan = analysis.scans[index]
    hints = []
    for match in ASSIGNMENT_RE.finditer(scan.text):
        name = match.group(1)
        # Inside a call or already annotated
        if '[' in scan.text[:match.start()] or match.group(2).strip().startswith(':'):
            continue
        if not scan.tag_at(match.start()).is_code:
            continue
        symbol = analysis.symbols.variables.get(name)
        if symbol is None or symbol.line != index or symbol.inferred_type == ':any':
            continue
        colon = scan.text.index(':', match.end(1))
        hints.append(types.InlayHint(
            position=types.Position(line=index, character=colon + 1),
            label=symbol.inferred_type,
            kind=types.InlayHintKind.Type,
            padding_left=True,
        ))
    return hints


def inlay_hints(analysis: DocumentAnalysis, hint_range: Optional[types.Range] = None,
                parameter_names: bool = True, type_names: bool = True) -> List[types.InlayHint]:
    first, last = 0, len(analysis.lines) - 1
    if hint_range is not None:
        first = max(first, hint_range.start.line)
        last = min(last, hint_range.end.line)

    hints: List[types.InlayHint] = []
    for index in range(first, last + 1):
        if analysis.lines[index].strip().startswith(';'):
            continue
        if parameter_names:
            hints.extend(_parameter_hints(analysis, index))
        if type_names:
            hints.extend(_type_hints(analysis, index))
    return hints
