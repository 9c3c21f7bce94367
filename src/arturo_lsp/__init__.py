"""
arturo-lsp - Arturo Language Server

Editor intelligence for the Arturo scripting language built on a
string-aware lexical classifier and an approximate symbol table.
"""

__version__ = "0.1.0"
__author__ = "arturo-lsp contributors"

from arturo_lsp.parser import build_symbol_table, classify, scan_document
