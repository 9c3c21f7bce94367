"""
Arturo Diagnostics Engine

Checks Arturo source for:
- Identifiers that may be undefined (W001)
- Numeric/string mismatches in ``name: lhs OP rhs`` lines (E001)
- Unbalanced brackets at end of file (E002)

Every rule is advisory. A rule that fails on some input is logged and
contributes nothing; the engine itself never raises on document text.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from arturo_lsp.catalog import Catalog, get_catalog
from arturo_lsp.parser.inference import NUMERIC_TYPES, infer_type
from arturo_lsp.parser.lexer import LineScan, SpanType, scan_document, split_lines
from arturo_lsp.parser.literals import is_literal
from arturo_lsp.parser.symbols import (
    DocumentSymbols,
    QuasiBindings,
    SymbolTableBuilder,
    is_valid_identifier,
)

logger = logging.getLogger(__name__)

SOURCE = "arturo-lsp"


class Severity(Enum):
    """Diagnostic severity levels."""
    ERROR = "error"         # Definite mistake, e.g. adding a string to a number
    WARNING = "warning"     # Likely a mistake, e.g. unknown identifier
    INFO = "info"
    HINT = "hint"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
    Severity.HINT: 3,
}


@dataclass
class LintIssue:
    """A single diagnostic. Lines and columns are zero-based."""
    severity: Severity
    code: str               # e.g. "E001", "W001"
    message: str
    line: int
    column: int = 0
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    file: str = "<unknown>"
    context: str = ""       # The offending source line

    def __post_init__(self):
        if self.end_line is None:
            self.end_line = self.line
        if self.end_column is None:
            self.end_column = self.column

    def __str__(self):
        prefix = {
            Severity.ERROR: "[ERROR]",
            Severity.WARNING: "[WARNING]",
            Severity.INFO: "[INFO]",
            Severity.HINT: "[HINT]"
        }[self.severity]

        loc = f"{self.file}:{self.line + 1}:{self.column + 1}"
        msg = f"{prefix} {self.code} {loc}: {self.message}"
        if self.context:
            msg += f"\n    {self.context.strip()}"
        return msg

    def to_dict(self) -> Dict[str, object]:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass
class LintContext:
    """Everything a rule may look at for one document."""
    lines: List[str]
    scans: List[LineScan]
    symbols: DocumentSymbols
    quasi: QuasiBindings
    catalog: Catalog
    file: str = "<unknown>"
    _skipped: Optional[List[bool]] = field(default=None, repr=False)

    @classmethod
    def from_text(cls, text: str, file: str = "<unknown>",
                  catalog: Optional[Catalog] = None) -> "LintContext":
        lines = split_lines(text)
        scans = scan_document(lines)
        builder = SymbolTableBuilder(text, scans)
        return cls(
            lines=lines,
            scans=scans,
            symbols=builder.build(),
            quasi=builder.quasi_bindings(),
            catalog=catalog or get_catalog(),
            file=file,
        )

    def stripped(self, index: int) -> str:
        """Line ``index`` with its comment removed."""
        scan = self.scans[index]
        if scan.comment_start is None:
            return scan.text
        return scan.text[:scan.comment_start]

    def is_skipped(self, index: int) -> bool:
        """Comment-only lines and lines ending inside a multi-line string."""
        if self._skipped is None:
            self._skipped = [
                scan.text.strip().startswith(';') or scan.carry_out.in_string
                for scan in self.scans
            ]
        return self._skipped[index]


# ============================================================================
# LINTER RULES
# ============================================================================

class LintRule:
    """Base class for lint rules."""

    code: str = "X000"
    severity: Severity = Severity.INFO
    description: str = "Base rule"

    def check(self, ctx: LintContext) -> List[LintIssue]:
        """Return the issues this rule finds in the document."""
        return []

    def issue(self, ctx: LintContext, message: str, line: int, column: int,
              end_column: int) -> LintIssue:
        return LintIssue(
            severity=self.severity,
            code=self.code,
            message=message,
            line=line,
            column=column,
            end_column=end_column,
            file=ctx.file,
            context=ctx.lines[line],
        )


class UndefinedIdentifierRule(LintRule):
    """W001: identifier is neither builtin, literal nor bound in the document."""

    code = "W001"
    severity = Severity.WARNING
    description = "Possibly undefined identifier"

    TOKEN_RE = re.compile(r'(?<!\w)\w[\w-]*\??', re.ASCII)
    SKIP_PREFIXES = ("'", "`", "#", ":")

    def check(self, ctx: LintContext) -> List[LintIssue]:
        issues = []
        for index, scan in enumerate(ctx.scans):
            if ctx.is_skipped(index):
                continue
            line = ctx.stripped(index)
            for match in self.TOKEN_RE.finditer(line):
                word = match.group(0)
                if self._is_known(word, ctx):
                    continue
                if self._is_exempt_position(line, match.start(), match.end(), scan, ctx):
                    continue
                issues.append(self.issue(
                    ctx, f"'{word}' may be undefined",
                    index, match.start(), match.end(),
                ))
        return issues

    @staticmethod
    def _is_known(word: str, ctx: LintContext) -> bool:
        return (
            is_literal(word)
            or ctx.catalog.is_builtin(word)
            or word in ctx.symbols
            or word in ctx.quasi
        )

    def _is_exempt_position(self, line: str, start: int, end: int,
                            scan: LineScan, ctx: LintContext) -> bool:
        # Binding site
        if line[end:end + 1] == ':':
            return True
        if scan.tag_at(start) != SpanType.CODE:
            return True
        before = line[start - 1] if start > 0 else ''
        if before in self.SKIP_PREFIXES:
            return True
        if before == '.' and line[start:end] in ctx.catalog.attributes:
            return True
        return False


class BinaryOperationTypeRule(LintRule):
    """E001: arithmetic between a number and a string."""

    code = "E001"
    severity = Severity.ERROR
    description = "Type mismatch in binary operation"

    BINARY_OP_RE = re.compile(r'(\w+)\s*:\s*([^;\n]+?)\s*([+\-*/])\s*([^;\n]+)')
    OPERATOR_VERBS = {'+': 'add', '-': 'subtract', '*': 'multiply', '/': 'divide'}

    def check(self, ctx: LintContext) -> List[LintIssue]:
        issues = []
        for index, scan in enumerate(ctx.scans):
            line = ctx.stripped(index)
            if not line.strip() or ctx.is_skipped(index):
                continue
            match = self._find_operation(line, scan)
            if match is None:
                continue

            left = self._family(match.group(2).strip(), ctx)
            right = self._family(match.group(4).strip(), ctx)
            if {left, right} != {'number', 'string'}:
                continue

            operator = match.group(3)
            message = f"Type error: Cannot {self.OPERATOR_VERBS[operator]} {left} and {right}"
            issues.append(self.issue(
                ctx, message, index, match.start(3), len(ctx.lines[index]),
            ))
        return issues

    def _find_operation(self, line: str, scan: LineScan) -> Optional[re.Match]:
        """First ``name: lhs OP rhs`` whose label, colon and operator are all code."""
        pos = 0
        while True:
            match = self.BINARY_OP_RE.search(line, pos)
            if match is None:
                return None
            colon = line.index(':', match.end(1))
            if all(scan.tag_at(i).is_code for i in (match.start(1), colon, match.start(3))):
                return match
            pos = match.start(1) + 1

    @staticmethod
    def _family(operand: str, ctx: LintContext) -> Optional[str]:
        type_tag = infer_type(operand)
        if type_tag == ':any' and is_valid_identifier(operand):
            symbol = ctx.symbols.variables.get(operand)
            if symbol is not None:
                type_tag = symbol.inferred_type
        if type_tag in NUMERIC_TYPES:
            return 'number'
        if type_tag == ':string':
            return 'string'
        return None


class UnmatchedBracketRule(LintRule):
    """E002: '[' and ']' counts differ at end of file."""

    code = "E002"
    severity = Severity.ERROR
    description = "Unmatched brackets"

    def check(self, ctx: LintContext) -> List[LintIssue]:
        if not ctx.lines:
            return []
        last = len(ctx.lines) - 1
        if ctx.is_skipped(last):
            return []

        balance = 0
        last_has_bracket = False
        for index, scan in enumerate(ctx.scans):
            for ch, tag in zip(scan.text, scan.tags):
                if not tag.is_code:
                    continue
                if ch == '[':
                    balance += 1
                elif ch == ']':
                    balance -= 1
                else:
                    continue
                if index == last:
                    last_has_bracket = True

        # Reported once per file, on the last line, and only when it holds a bracket
        if balance == 0 or not last_has_bracket:
            return []
        return [self.issue(ctx, "Unmatched brackets in file", last, 0, len(ctx.lines[last]))]


DEFAULT_RULES = (
    UnmatchedBracketRule,
    UndefinedIdentifierRule,
    BinaryOperationTypeRule,
)


class ArturoLinter:
    """
    Runs diagnostic rules against Arturo documents.

    Usage:
        linter = ArturoLinter()
        issues = linter.lint_text(source, "main.art")
    """

    def __init__(self, rules: Optional[Sequence[LintRule]] = None,
                 max_problems: int = 1000):
        self.rules = list(rules) if rules is not None else [r() for r in DEFAULT_RULES]
        self.max_problems = max_problems

    @classmethod
    def from_settings(cls, settings) -> "ArturoLinter":
        """Build a linter from a DiagnosticsSettings section."""
        rules: List[LintRule] = []
        if settings.enabled:
            if settings.bracket_balance:
                rules.append(UnmatchedBracketRule())
            if settings.undefined_identifiers:
                rules.append(UndefinedIdentifierRule())
            if settings.type_checks:
                rules.append(BinaryOperationTypeRule())
        return cls(rules, max_problems=settings.max_problems)

    def lint_context(self, ctx: LintContext) -> List[LintIssue]:
        """Run every rule, isolating failures, and return issues in line order."""
        issues: List[LintIssue] = []
        for rule in self.rules:
            try:
                issues.extend(rule.check(ctx))
            except Exception:
                logger.exception("Rule %s failed on %s", rule.code, ctx.file)

        issues.sort(key=lambda i: (i.line, i.column, i.severity.rank))
        if len(issues) > self.max_problems:
            logger.debug("Truncating %d issues to %d", len(issues), self.max_problems)
            issues = issues[:self.max_problems]
        return issues

    def lint_text(self, text: str, file: str = "<unknown>") -> List[LintIssue]:
        return self.lint_context(LintContext.from_text(text, file))


def lint_text(text: str, file: str = "<unknown>") -> List[LintIssue]:
    """Convenience function to lint source text with the default rules."""
    return ArturoLinter().lint_text(text, file)
