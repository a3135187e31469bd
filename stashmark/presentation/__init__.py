"""
Presentation — Output helpers for the stashmark CLI

- Symbols: Unicode/ASCII marker sets and encoding-safe printing
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print, SHA_DISPLAY_LENGTH

__all__ = [
    "SymbolSet", "UNICODE", "ASCII", "get_symbols", "safe_print", "SHA_DISPLAY_LENGTH",
]
