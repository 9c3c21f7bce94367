"""
Signature help for builtin calls written as ``name [args``.
"""

import re
from typing import Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog

TRIGGER_CHARACTERS = ["[", " "]
RETRIGGER_CHARACTERS = [","]

# Innermost unclosed "name[" or "name.attr[" before the cursor
OPEN_CALL_RE = re.compile(r'(\w+(?:\.\w+)*)\s*\[([^\[\]]*)$')


def _code_before(analysis: DocumentAnalysis, position: types.Position) -> str:
    """Document text up to the cursor with strings and comments blanked out."""
    last = min(position.line, len(analysis.scans) - 1)
    parts = [scan.code_text() for scan in analysis.scans[:last]]
    parts.append(analysis.scans[last].code_text()[:position.character])
    return "\n".join(parts)


def signature_help(analysis: DocumentAnalysis,
                   position: types.Position) -> Optional[types.SignatureHelp]:
    if not analysis.scans or position.line >= len(analysis.scans):
        return None

    match = OPEN_CALL_RE.search(_code_before(analysis, position))
    if match is None:
        return None

    name = match.group(1).split('.')[0]
    info = get_catalog().function(name)
    if info is None or not info.params:
        return None

    args = match.group(2).split()
    active = min(len(args), len(info.params) - 1)

    signature = types.SignatureInformation(
        label=f"{name} {' '.join(p.name for p in info.params)}",
        documentation=info.description,
        parameters=[
            types.ParameterInformation(label=p.name, documentation=p.type)
            for p in info.params
        ],
    )
    return types.SignatureHelp(
        signatures=[signature],
        active_signature=0,
        active_parameter=active,
    )
