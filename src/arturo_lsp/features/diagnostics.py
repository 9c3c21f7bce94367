"""
Conversion of lint issues to LSP diagnostics.
"""

from typing import List

from lsprotocol import types

from arturo_lsp.analysis.lint import SOURCE, LintIssue, Severity

SEVERITY_MAP = {
    Severity.ERROR: types.DiagnosticSeverity.Error,
    Severity.WARNING: types.DiagnosticSeverity.Warning,
    Severity.INFO: types.DiagnosticSeverity.Information,
    Severity.HINT: types.DiagnosticSeverity.Hint,
}


def to_diagnostic(issue: LintIssue) -> types.Diagnostic:
    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=issue.line, character=issue.column),
            end=types.Position(line=issue.end_line, character=issue.end_column),
        ),
        message=issue.message,
        severity=SEVERITY_MAP[issue.severity],
        code=issue.code,
        source=SOURCE,
    )


def to_diagnostics(issues: List[LintIssue]) -> List[types.Diagnostic]:
    return [to_diagnostic(issue) for issue in issues]
