"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest
from lsprotocol import types

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arturo_lsp.analysis.session import DocumentAnalysis


# =============================================================================
# SAMPLE SOURCES
# =============================================================================

TYPE_ERROR_SOURCE = 'x: 5\ny: "hi"\nz: x + y'

GREET_SOURCE = '''greet: function [person][
    print ["Hello" person]
]
greet "Ann"'''

PROGRAM_SOURCE = '''; sample program
total: 0
items: [1 2 3]
loop items 'item [
    total: total + item
]
double: $[n][n * 2]
define :person [name age][]
print double total ; done
'''


@pytest.fixture
def type_error_source():
    return TYPE_ERROR_SOURCE


@pytest.fixture
def greet_source():
    return GREET_SOURCE


@pytest.fixture
def program_source():
    return PROGRAM_SOURCE


# =============================================================================
# ANALYSIS FIXTURES
# =============================================================================

@pytest.fixture
def analyse():
    """Factory building a DocumentAnalysis from text."""
    def _analyse(text: str, uri: str = "file:///work/main.art") -> DocumentAnalysis:
        return DocumentAnalysis.from_text(uri, text)
    return _analyse


@pytest.fixture
def pos():
    """Factory for LSP positions."""
    def _pos(line: int, character: int) -> types.Position:
        return types.Position(line=line, character=character)
    return _pos


@pytest.fixture
def source_file(tmp_path):
    """Factory writing a source file into a temp directory."""
    def _write(text: str, name: str = "main.art") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
