"""
Literal Recognizer

Decides whether a bare token is a self-evaluating literal (number, logical,
null, version, hex color body, unit, named color or character shorthand)
that never needs a definition.
"""

import re
from typing import Callable, List

from arturo_lsp.catalog import get_catalog

INTEGER_RE = re.compile(r'^-?\d+$')
FLOATING_RE = re.compile(r'^-?\d+\.\d+$')
HEX_RE = re.compile(r'^0x[0-9a-fA-F]+$')
BINARY_RE = re.compile(r'^0b[01]+$')
KEYWORD_RE = re.compile(r'^(true|false|maybe|null)$')
# 1.2.3, 2.0.0-alpha, and the trailing "10-beta" piece of 3.2.10-beta
VERSION_RE = re.compile(r'^\d+(\.\d+)*(-[a-zA-Z][a-zA-Z0-9]*)?$')
HEX_COLOR_RE = re.compile(r'^([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$')
CHAR_RE = re.compile(r'^[a-z]$')


def is_number(token: str) -> bool:
    return bool(
        INTEGER_RE.match(token)
        or FLOATING_RE.match(token)
        or HEX_RE.match(token)
        or BINARY_RE.match(token)
    )


def is_unit(token: str) -> bool:
    return token in get_catalog().units


def is_color_name(token: str) -> bool:
    return token in get_catalog().colors


_PREDICATES: List[Callable[[str], bool]] = [
    is_number,
    lambda t: bool(KEYWORD_RE.match(t)),
    lambda t: bool(VERSION_RE.match(t)),
    lambda t: bool(HEX_COLOR_RE.match(t)),
    is_unit,
    is_color_name,
    lambda t: bool(CHAR_RE.match(t)),
]


def is_literal(token: str) -> bool:
    """True if ``token`` is a literal that is exempt from definition checks."""
    if not token:
        return False
    return any(predicate(token) for predicate in _PREDICATES)
