"""
Completion: context-sensitive item lists.

After '.' attributes, after ':' types, after '`' units, after '#' colors;
anywhere else builtins, types and the document's own symbols.
"""

from typing import List, Optional

from lsprotocol import types

from arturo_lsp.analysis.session import DocumentAnalysis
from arturo_lsp.catalog import Catalog, get_catalog

TRIGGER_CHARACTERS = [".", ":", "`", "#"]


def _item(label: str, kind: types.CompletionItemKind, detail: str,
          documentation: str) -> types.CompletionItem:
    return types.CompletionItem(
        label=label, kind=kind, detail=detail, documentation=documentation,
    )


def attribute_items(catalog: Catalog) -> List[types.CompletionItem]:
    return [
        _item(name, types.CompletionItemKind.Property, "Attribute",
              f"Function attribute: .{name}")
        for name in sorted(catalog.attributes)
    ]


def type_items(catalog: Catalog, analysis: Optional[DocumentAnalysis],
               prefix: str = "") -> List[types.CompletionItem]:
    items = [
        _item(prefix + name, types.CompletionItemKind.Class, "Type", description)
        for name, description in catalog.types.items()
    ]
    if analysis is not None:
        items.extend(
            _item(prefix + name, types.CompletionItemKind.Class, "Custom Type",
                  f"User-defined type: {name}")
            for name in sorted(analysis.symbols.custom_types)
        )
    return items


def unit_items(catalog: Catalog) -> List[types.CompletionItem]:
    return [
        _item(name, types.CompletionItemKind.Unit, "Unit", f"Physical unit: `{name}")
        for name in sorted(catalog.units)
    ]


def color_items(catalog: Catalog) -> List[types.CompletionItem]:
    return [
        _item(name, types.CompletionItemKind.Color, "Color", f"Named color: #{name}")
        for name in sorted(catalog.colors)
    ]


def builtin_items(catalog: Catalog) -> List[types.CompletionItem]:
    items = []
    for name in sorted(catalog.builtin_names | set(catalog.functions)):
        info = catalog.function(name)
        items.append(_item(
            name,
            types.CompletionItemKind.Function,
            info.signature if info else "Builtin function",
            info.description if info else "Arturo builtin function",
        ))
    return items


def symbol_items(analysis: DocumentAnalysis) -> List[types.CompletionItem]:
    items = [
        _item(name, types.CompletionItemKind.Variable, symbol.inferred_type,
              "User-defined variable")
        for name, symbol in analysis.symbols.variables.items()
    ]
    items.extend(
        _item(name, types.CompletionItemKind.Function, symbol.inferred_type,
              "User-defined function")
        for name, symbol in analysis.symbols.functions.items()
    )
    return items


def complete(analysis: Optional[DocumentAnalysis],
             position: types.Position) -> List[types.CompletionItem]:
    """Completion items for the cursor position."""
    catalog = get_catalog()

    if analysis is not None and position.line < len(analysis.lines):
        before = analysis.lines[position.line][:position.character]
        if not analysis.is_code_at(position.line, position.character):
            return []
        if before.endswith('.'):
            return attribute_items(catalog)
        if before.endswith(':'):
            return type_items(catalog, analysis)
        if before.endswith('`'):
            return unit_items(catalog)
        if before.endswith('#'):
            return color_items(catalog)

    items = builtin_items(catalog)
    items.extend(type_items(catalog, analysis, prefix=":"))
    if analysis is not None:
        items.extend(symbol_items(analysis))
    return items
