"""
Per-document analysis cache.

A Session maps document URIs to their DocumentAnalysis. Every open or change
rebuilds the analysis from the full text; close drops it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from arturo_lsp.analysis.lint import ArturoLinter, LintContext, LintIssue
from arturo_lsp.catalog import get_catalog
from arturo_lsp.parser.lexer import LineScan, MultilineContext, NO_CARRY, scan_document, split_lines
from arturo_lsp.parser.symbols import DocumentSymbols, QuasiBindings, SymbolTableBuilder

logger = logging.getLogger(__name__)


@dataclass
class DocumentAnalysis:
    """Everything derived from one version of a document."""
    uri: str
    text: str
    lines: List[str]
    scans: List[LineScan]
    symbols: DocumentSymbols
    quasi: QuasiBindings
    issues: List[LintIssue]
    version: Optional[int] = None

    @classmethod
    def from_text(cls, uri: str, text: str, linter: Optional[ArturoLinter] = None,
                  version: Optional[int] = None) -> "DocumentAnalysis":
        lines = split_lines(text)
        scans = scan_document(lines)
        builder = SymbolTableBuilder(text, scans)
        symbols = builder.build()
        quasi = builder.quasi_bindings()

        ctx = LintContext(
            lines=lines,
            scans=scans,
            symbols=symbols,
            quasi=quasi,
            catalog=get_catalog(),
            file=uri,
        )
        issues = (linter or ArturoLinter()).lint_context(ctx)

        return cls(
            uri=uri,
            text=text,
            lines=lines,
            scans=scans,
            symbols=symbols,
            quasi=quasi,
            issues=issues,
            version=version,
        )

    def line(self, index: int) -> str:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return ""

    def scan(self, index: int) -> Optional[LineScan]:
        if 0 <= index < len(self.scans):
            return self.scans[index]
        return None

    def context_at(self, line: int, character: int) -> MultilineContext:
        """String state at a position, honouring strings opened on earlier lines."""
        scan = self.scan(line)
        if scan is None:
            return NO_CARRY
        tag = scan.tag_at(character)
        if tag.is_string:
            return MultilineContext(True, tag)
        return NO_CARRY

    def is_code_at(self, line: int, character: int) -> bool:
        """False inside strings and comments."""
        scan = self.scan(line)
        return scan is not None and scan.tag_at(character).is_code


class Session:
    """
    Open documents and the linter used to analyse them.

    Usage:
        session = Session()
        analysis = session.open(uri, text)
    """

    def __init__(self, linter: Optional[ArturoLinter] = None):
        self.linter = linter or ArturoLinter()
        self._documents: Dict[str, DocumentAnalysis] = {}

    def open(self, uri: str, text: str, version: Optional[int] = None) -> DocumentAnalysis:
        analysis = DocumentAnalysis.from_text(uri, text, self.linter, version)
        self._documents[uri] = analysis
        logger.debug(
            "Analysed %s: %d lines, %d issues",
            uri, len(analysis.lines), len(analysis.issues),
        )
        return analysis

    def change(self, uri: str, text: str, version: Optional[int] = None) -> DocumentAnalysis:
        # No incremental update; every change is a full rebuild
        return self.open(uri, text, version)

    def close(self, uri: str) -> None:
        self._documents.pop(uri, None)

    def get(self, uri: str) -> Optional[DocumentAnalysis]:
        return self._documents.get(uri)

    def configure(self, linter: ArturoLinter) -> List[DocumentAnalysis]:
        """Swap the linter and re-analyse every open document."""
        self.linter = linter
        return [
            self.open(a.uri, a.text, a.version)
            for a in list(self._documents.values())
        ]

    def __iter__(self) -> Iterator[DocumentAnalysis]:
        return iter(list(self._documents.values()))

    def __contains__(self, uri: str) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)
