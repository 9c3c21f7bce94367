"""
Prepare rename and rename.

Builtins and type names cannot be renamed. A new name must satisfy the
identifier grammar; one that shadows a builtin is allowed with a warning.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import get_catalog
from arturo_lsp.errors import RenameError
from arturo_lsp.features.words import WordSpan, find_occurrences, word_at_position
from arturo_lsp.parser.symbols import is_valid_identifier


@dataclass
class RenameOutcome:
    edit: types.WorkspaceEdit
    warnings: List[str] = field(default_factory=list)


def _renamable(analysis: DocumentAnalysis, position: types.Position) -> Optional[WordSpan]:
    if not analysis.is_code_at(position.line, position.character):
        return None
    span = word_at_position(analysis, position)
    if span is None:
        return None
    catalog = get_catalog()
    if catalog.is_builtin(span.word):
        return None
    if span.word in catalog.types or span.preceding_char(analysis.lines[span.line]) == ':':
        return None
    return span


def prepare_rename(analysis: DocumentAnalysis,
                   position: types.Position) -> Optional[types.PrepareRenamePlaceholder]:
    span = _renamable(analysis, position)
    if span is None:
        return None
    return types.PrepareRenamePlaceholder(range=span.range, placeholder=span.word)


def rename(analysis: DocumentAnalysis, position: types.Position,
           new_name: str) -> Optional[RenameOutcome]:
    """
    Replace every code occurrence of the word under the cursor.

    Raises:
        RenameError: If ``new_name`` is not a valid identifier.
    """
    if not is_valid_identifier(new_name):
        raise RenameError(
            f'Invalid identifier: "{new_name}". Must start with letter/underscore '
            "and contain only letters, numbers, hyphens, underscores, and "
            "optional '?' at end.",
            new_name=new_name,
        )

    span = _renamable(analysis, position)
    if span is None:
        return None

    warnings = []
    if get_catalog().is_builtin(new_name):
        warnings.append(f'Warning: "{new_name}" conflicts with a built-in function.')

    edits = [
        types.TextEdit(range=occurrence.range, new_text=new_name)
        for occurrence in find_occurrences(analysis, span.word)
    ]
    return RenameOutcome(
        edit=types.WorkspaceEdit(changes={analysis.uri: edits}),
        warnings=warnings,
    )
