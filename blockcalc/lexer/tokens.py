"""
Token definitions for the blockcalc lexer.

The language is tiny: four arithmetic operators, parentheses, braces,
semicolons, decimal integer literals and the `print` keyword.

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of all token types in blockcalc."""

    # Special tokens
    EOF = auto()                    # End of input

    # Literals
    INTEGER = auto()                # 42

    # Keywords
    PRINT = auto()                  # print

    # Arithmetic operators
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Punctuation and delimiters
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and for pointing a caret at the offending
    column when diagnostics are rendered.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Contains the token type, lexeme (raw text), semantic value (the int for
    INTEGER, None otherwise) and source location.
    """
    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and str(self.value) != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")


# Lookup tables used by the lexer

KEYWORDS = {
    "print": TokenType.PRINT,
}

OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
}

# Human readable spellings, used in "expected one of" messages
TOKEN_DESCRIPTIONS = {
    TokenType.EOF: "end of input",
    TokenType.INTEGER: "integer",
    TokenType.PRINT: "'print'",
    **{token_type: f"'{symbol}'" for symbol, token_type in OPERATORS.items()},
}

# 32-bit signed integer bounds
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def describe(token_type: TokenType) -> str:
    """Return the human readable spelling of a token type."""
    return TOKEN_DESCRIPTIONS[token_type]
