"""
Symbol Table Builder

Derives an approximate symbol table from Arturo source without a parser:
    - variables and functions bound with ``name: value``
    - custom types registered with ``define :name``
    - quasi-bindings (function parameters, loop variables, dictionary keys)
      that only exist to suppress false "undefined" diagnostics

The table is rebuilt from scratch for every version of a document. The last
binding of a name wins; shadowing is not modelled.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set

from arturo_lsp.parser.inference import infer_type, is_function_value
from arturo_lsp.parser.lexer import LineScan, scan_document, split_lines

logger = logging.getLogger(__name__)

IDENTIFIER = r'[A-Za-z_][\w-]*\??'
IDENTIFIER_RE = re.compile(rf'^{IDENTIFIER}$', re.ASCII)

BINDING_RE = re.compile(rf'(?<![\w-])({IDENTIFIER})\s*:\s*(.+)', re.ASCII)
DEFINE_RE = re.compile(r'\bdefine\s+:(\w+)')
FUNCTION_PARAMS_RE = re.compile(r'(?:\bfunction|\bmethod|\$)\s*\[([^\]]*)\]')
FUNCTION_SINGLE_PARAM_RE = re.compile(r'\bfunction\s+\'(\w+)')
TYPE_ANNOTATION_RE = re.compile(r':[a-z]+')
LOOP_VAR_RE = re.compile(r'\bloop\s+(?:\[[^\]]*\]|\S+)\s+\'(\w+)')
LOOP_VAR_BLOCK_RE = re.compile(r'\bloop\s+(?:\[[^\]]*\]|\S+)\s+\[([^\]]*)\]\s*\[')
DICT_KEY_RE = re.compile(r'(\w[\w-]*\??):\s+')


class SymbolKind(Enum):
    VARIABLE = "variable"
    FUNCTION = "function"


@dataclass(frozen=True)
class Symbol:
    """A user binding and where it was last defined."""
    name: str
    line: int
    column: int
    kind: SymbolKind
    inferred_type: str
    definition: str = ""

    @property
    def is_function(self) -> bool:
        return self.kind == SymbolKind.FUNCTION

    @property
    def end_column(self) -> int:
        return self.column + len(self.name)


@dataclass
class DocumentSymbols:
    """Symbol table of one document."""
    variables: Dict[str, Symbol] = field(default_factory=dict)
    functions: Dict[str, Symbol] = field(default_factory=dict)
    custom_types: Set[str] = field(default_factory=set)

    def lookup(self, name: str) -> Optional[Symbol]:
        return self.functions.get(name) or self.variables.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.variables or name in self.functions or name in self.custom_types

    def all_symbols(self) -> List[Symbol]:
        """Every symbol ordered by position."""
        symbols = list(self.variables.values()) + list(self.functions.values())
        return sorted(symbols, key=lambda s: (s.line, s.column))


@dataclass(frozen=True)
class QuasiBindings:
    """Location-less names that are valid only heuristically."""
    parameters: FrozenSet[str] = frozenset()
    loop_variables: FrozenSet[str] = frozenset()
    dictionary_keys: FrozenSet[str] = frozenset()

    def __contains__(self, name: str) -> bool:
        return (
            name in self.parameters
            or name in self.loop_variables
            or name in self.dictionary_keys
        )


def is_valid_identifier(name: str) -> bool:
    """Check ``name`` against the Arturo identifier grammar."""
    return bool(IDENTIFIER_RE.match(name))


def extract_function_params(text: str) -> List[str]:
    """
    Parameter names of the first ``function [a b]`` / ``$[a b]`` on a line.

    Type annotations (``x :integer``) are dropped.
    """
    params: List[str] = []
    match = FUNCTION_PARAMS_RE.search(text)
    if match:
        for word in match.group(1).split():
            clean = TYPE_ANNOTATION_RE.sub('', word).strip()
            if clean and not clean.startswith(':'):
                params.append(clean)
    else:
        single = FUNCTION_SINGLE_PARAM_RE.search(text)
        if single:
            params.append(single.group(1))
    return params


def extract_loop_variables(text: str) -> List[str]:
    """Names bound by ``loop coll 'x`` and ``loop coll [k v][``."""
    names = [m.group(1) for m in LOOP_VAR_RE.finditer(text)]
    for m in LOOP_VAR_BLOCK_RE.finditer(text):
        names.extend(w.lstrip("'") for w in m.group(1).split())
    return names


def extract_dictionary_keys(text: str) -> Set[str]:
    """Every ``key: value`` label on a line."""
    return {m.group(1) for m in DICT_KEY_RE.finditer(text)}


class SymbolTableBuilder:
    """
    Builds DocumentSymbols and QuasiBindings for one document.

    Usage:
        builder = SymbolTableBuilder(text)
        symbols = builder.build()
        quasi = builder.quasi_bindings()
    """

    def __init__(self, text: str, scans: Optional[Sequence[LineScan]] = None):
        self.text = text
        self.scans = list(scans) if scans is not None else scan_document(split_lines(text))

    def _stripped_lines(self) -> Iterable[tuple]:
        for index, scan in enumerate(self.scans):
            if scan.comment_start is None:
                yield index, scan, scan.text
            else:
                yield index, scan, scan.text[:scan.comment_start]

    def build(self) -> DocumentSymbols:
        symbols = DocumentSymbols()

        for index, scan, line in self._stripped_lines():
            if not line.strip():
                continue

            for match in DEFINE_RE.finditer(line):
                if scan.tag_at(match.start()).is_code:
                    symbols.custom_types.add(match.group(1))

            binding = self._find_binding(line, scan)
            if binding is None:
                continue

            name, column, value = binding
            if is_function_value(value):
                kind = SymbolKind.FUNCTION
                table, other = symbols.functions, symbols.variables
            else:
                kind = SymbolKind.VARIABLE
                table, other = symbols.variables, symbols.functions

            other.pop(name, None)
            table[name] = Symbol(
                name=name,
                line=index,
                column=column,
                kind=kind,
                inferred_type=infer_type(value),
                definition=value,
            )

        logger.debug(
            "Built symbol table: %d variables, %d functions, %d types",
            len(symbols.variables), len(symbols.functions), len(symbols.custom_types),
        )
        return symbols

    @staticmethod
    def _find_binding(line: str, scan: LineScan):
        """First ``name: value`` on the line whose name is in code context."""
        pos = 0
        while True:
            match = BINDING_RE.search(line, pos)
            if match is None:
                return None
            start = match.start(1)
            colon = line.index(':', match.end(1))
            after = line[colon + 1:colon + 2]
            # "x :integer" is a type annotation, not a binding
            is_annotation = colon > match.end(1) and after.isalpha()
            if scan.tag_at(start).is_code and scan.tag_at(colon).is_code and not is_annotation:
                value = match.group(2).strip()
                if value:
                    return match.group(1), start, value
            pos = start + 1

    def quasi_bindings(self) -> QuasiBindings:
        params: Set[str] = set()
        loop_vars: Set[str] = set()
        dict_keys: Set[str] = set()

        for scan in self.scans:
            code = scan.code_text()
            if not code.strip():
                continue
            if 'function' in code or 'method' in code or '$' in code:
                params.update(extract_function_params(code))
            loop_vars.update(extract_loop_variables(code))
            dict_keys.update(extract_dictionary_keys(code))

        return QuasiBindings(
            parameters=frozenset(params),
            loop_variables=frozenset(loop_vars),
            dictionary_keys=frozenset(dict_keys),
        )


def build_symbol_table(text: str) -> DocumentSymbols:
    """Build the symbol table of a document."""
    return SymbolTableBuilder(text).build()


def extract_quasi_bindings(text: str) -> QuasiBindings:
    """Collect parameter, loop-variable and dictionary-key names of a document."""
    return SymbolTableBuilder(text).quasi_bindings()
