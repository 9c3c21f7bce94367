"""
Document analysis: diagnostics engine and the per-document session cache.
"""

from arturo_lsp.analysis.lint import (
    ArturoLinter,
    LintContext,
    LintIssue,
    LintRule,
    Severity,
    lint_text,
)
from arturo_lsp.analysis.session import DocumentAnalysis, Session

__all__ = [
    "ArturoLinter", "LintContext", "LintIssue", "LintRule", "Severity",
    "lint_text", "DocumentAnalysis", "Session",
]
