"""
Error handling for the blockcalc parser.

The parser never recovers: the first syntax error is raised and parsing
stops. Each error records what was found and which tokens would have been
accepted at that position.

Author: xwest
"""

from typing import List, Optional, Sequence

from ..lexer.tokens import Token, TokenType, SourceLocation, describe
from ..lexer.errors import BlockcalcError


class ParseError(BlockcalcError):
    """Exception raised when the parser encounters a fatal syntax error."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation],
        token: Optional[Token] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message, location, help_text=help_text, suggestions=suggestions)
        self.token = token


class UnexpectedTokenError(ParseError):
    """A token that no production accepts at this position."""

    code = "P001"

    def __init__(self, found: Token, expected_one_of: Sequence[TokenType]):
        self.found = found
        self.expected_one_of = list(expected_one_of)
        expected_str = _join_expected(self.expected_one_of)
        super().__init__(
            f"Unexpected token {describe(found.type)}, expected {expected_str}",
            found.location,
            token=found,
            help_text=f"The parser expected {expected_str} at this position.",
            suggestions=_suggest_missing(self.expected_one_of),
        )


class UnexpectedEndOfInputError(ParseError):
    """Input ended in the middle of a production (unclosed `(` or `{`)."""

    code = "P002"

    def __init__(self, expected_one_of: Sequence[TokenType], location: SourceLocation):
        self.expected_one_of = list(expected_one_of)
        expected_str = _join_expected(self.expected_one_of)
        super().__init__(
            f"Unexpected end of input, expected {expected_str}",
            location,
            help_text=f"The input ended while the parser still expected {expected_str}.",
            suggestions=_suggest_missing(self.expected_one_of) or ["Check for incomplete statements"],
        )


class NestingTooDeepError(ParseError):
    """Parentheses, `print(` and braces nested beyond the configured limit."""

    code = "P003"

    def __init__(self, max_depth: int, location: SourceLocation, token: Optional[Token] = None):
        self.max_depth = max_depth
        super().__init__(
            f"Expression nesting exceeds the maximum depth of {max_depth}",
            location,
            token=token,
            help_text="Reduce the nesting of parentheses and blocks, or raise the depth limit.",
        )


def _join_expected(expected: Sequence[TokenType]) -> str:
    names = [describe(token_type) for token_type in expected]
    if len(names) == 1:
        return names[0]
    return "one of " + ", ".join(names)


def _suggest_missing(expected: Sequence[TokenType]) -> List[str]:
    """Suggest what token might be missing."""
    token_suggestions = {
        TokenType.SEMICOLON: "Add a semicolon ';' to end the statement",
        TokenType.RIGHT_PAREN: "Add a closing parenthesis ')'",
        TokenType.RIGHT_BRACE: "Add a closing brace '}'",
        TokenType.LEFT_PAREN: "'print' must be followed by '('",
    }
    return [token_suggestions[token_type] for token_type in expected if token_type in token_suggestions]
