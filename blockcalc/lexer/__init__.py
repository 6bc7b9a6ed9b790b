"""
blockcalc Lexer Package

Implements the lexical analyzer (tokenizer) for the blockcalc language.

Key Features:
- Lazy token stream ending in a single EOF token
- `//` line comments and `/* */` block comments
- 32-bit signed integer literals with overflow detection
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import (
    Diagnostic, BlockcalcError, LexerError, UnexpectedCharacterError,
    IntegerOverflowError, UnterminatedCommentError,
)

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "tokenize_string",
    "tokenize_file",
    "Diagnostic",
    "BlockcalcError",
    "LexerError",
    "UnexpectedCharacterError",
    "IntegerOverflowError",
    "UnterminatedCommentError",
]
