"""
Error handling for the blockcalc lexer.

Also home of the `Diagnostic` record and the `BlockcalcError` base class
shared by the parser and evaluator error hierarchies.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation, INT32_MAX


@dataclass
class Diagnostic:
    """Structured description of a single error."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}"
        if self.code:
            result += f"[{self.code}]"
        result += f": {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class BlockcalcError(Exception):
    """
    Base class for every error raised while lexing, parsing or evaluating.

    Carries a `Diagnostic` so the driver can render any stage's failure the
    same way.
    """

    code: Optional[str] = None

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=self.code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerError(BlockcalcError):
    """Exception raised when the lexer encounters a fatal error."""


class UnexpectedCharacterError(LexerError):
    """A character that starts no token."""

    code = "L001"

    def __init__(self, char: str, location: SourceLocation):
        if char.isprintable():
            help_text = f"The character '{char}' is not valid in blockcalc source code."
        else:
            help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."
        super().__init__(
            f"Unexpected character: '{char}'",
            location,
            help_text=help_text,
            suggestions=_suggest_for_character(char),
        )
        self.char = char


class IntegerOverflowError(LexerError):
    """An integer literal that does not fit in 32 signed bits."""

    code = "L002"

    def __init__(self, lexeme: str, location: SourceLocation):
        super().__init__(
            f"Integer literal too large: '{lexeme}'",
            location,
            help_text=f"Integer literals must not exceed {INT32_MAX}.",
        )
        self.lexeme = lexeme


class UnterminatedCommentError(LexerError):
    """A block comment whose closing `*/` never appears."""

    code = "L003"

    def __init__(self, location: SourceLocation):
        super().__init__(
            "Unterminated block comment",
            location,
            help_text="Block comments opened with '/*' must be closed with '*/'.",
            suggestions=["Add a closing '*/'", "Block comments do not nest"],
        )


def _suggest_for_character(char: str) -> List[str]:
    """Suggest what the author may have meant for a stray character."""
    alternatives = {
        '×': ["Use '*' for multiplication"],
        '÷': ["Use '/' for division"],
        '−': ["Use '-' for subtraction or negation"],
        '%': ["The remainder operator is not supported"],
        '[': ["Use '(' for grouping or '{' for a block"],
        ']': ["Use ')' for grouping or '}' for a block"],
    }
    if char in alternatives:
        return alternatives[char]
    if char.isalpha() or char == '_':
        return ["'print' is the only keyword; variables are not supported"]
    return []
