"""
Arturo source scanning: lexical context classifier, literal recognizer,
type inference and symbol table builder.
"""

from arturo_lsp.parser.lexer import (
    SpanType,
    LexicalSpan,
    LineScan,
    MultilineContext,
    scan_line,
    scan_document,
    split_lines,
    classify,
    classify_multiline,
    is_in_string,
    is_in_comment,
    is_in_block_literal,
    find_comment_start,
    strip_comments,
)
from arturo_lsp.parser.literals import is_literal
from arturo_lsp.parser.inference import infer_type, NUMERIC_TYPES
from arturo_lsp.parser.symbols import (
    Symbol,
    SymbolKind,
    DocumentSymbols,
    QuasiBindings,
    SymbolTableBuilder,
    build_symbol_table,
    extract_quasi_bindings,
    extract_function_params,
    extract_loop_variables,
    extract_dictionary_keys,
    is_valid_identifier,
)

__all__ = [
    "SpanType", "LexicalSpan", "LineScan", "MultilineContext",
    "scan_line", "scan_document", "split_lines",
    "classify", "classify_multiline",
    "is_in_string", "is_in_comment", "is_in_block_literal",
    "find_comment_start", "strip_comments",
    "is_literal", "infer_type", "NUMERIC_TYPES",
    "Symbol", "SymbolKind", "DocumentSymbols", "QuasiBindings",
    "SymbolTableBuilder", "build_symbol_table", "extract_quasi_bindings",
    "extract_function_params", "extract_loop_variables",
    "extract_dictionary_keys", "is_valid_identifier",
]
