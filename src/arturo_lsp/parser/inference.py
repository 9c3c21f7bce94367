"""
Value type inference.

Maps the text of a bound value to an Arturo type tag. Rules are tried top
to bottom and the first match wins; "#[" is checked before "[".
"""

import re
from typing import Callable, List, Tuple

ANY = ':any'
NUMERIC_TYPES = frozenset({':integer', ':floating', ':complex', ':rational'})
STRING_TYPES = frozenset({':string', ':char'})

FUNCTION_MARKER_RE = re.compile(r'^(function\b|method\b|\$)')
COLOR_RE = re.compile(r'^#([0-9a-fA-F]{6}|[a-z]+)$')

_RULES: List[Tuple[str, Callable[[str], bool]]] = [
    (':integer', lambda v: bool(re.match(r'^-?\d+$', v))),
    (':floating', lambda v: bool(re.match(r'^-?\d+\.\d+$', v))),
    (':rational', lambda v: bool(re.match(r'^\d+:\d+$', v))),
    (':logical', lambda v: v in ('true', 'false', 'maybe')),
    (':null', lambda v: v == 'null'),
    (':string', lambda v: v.startswith(('"', '{', '«'))),
    (':char', lambda v: bool(re.match(r'^`.$', v))),
    (':dictionary', lambda v: v.startswith('#[')),
    (':block', lambda v: v.startswith('[')),
    (':type', lambda v: v.startswith(':')),
    (':literal', lambda v: v.startswith("'")),
    (':method', lambda v: bool(re.match(r'^method\b', v))),
    (':function', lambda v: bool(FUNCTION_MARKER_RE.match(v))),
    (':color', lambda v: bool(COLOR_RE.match(v))),
    (':range', lambda v: '..' in v),
]


def infer_type(value: str) -> str:
    """Infer the type tag (e.g. ":integer") of a value's source text."""
    value = value.strip()
    for type_tag, rule in _RULES:
        if rule(value):
            return type_tag
    return ANY


def is_function_value(value: str) -> bool:
    """True if the value starts with a function, method or closure marker."""
    return bool(FUNCTION_MARKER_RE.match(value.strip()))


def type_family(type_tag: str) -> str:
    """Collapse a type tag to "number", "string" or the bare tag name."""
    if type_tag in NUMERIC_TYPES:
        return 'number'
    if type_tag in STRING_TYPES:
        return 'string'
    return type_tag.lstrip(':')
