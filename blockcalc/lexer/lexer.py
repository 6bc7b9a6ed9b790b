"""
blockcalc Lexer - turns source text into tokens

Whitespace, `// line` comments and `/* block */` comments never produce
tokens. The token stream is produced lazily and always ends with a single
EOF token so the parser never has to check for running off the end.

xwest
"""

import logging
import re
from typing import Iterator, List

from .tokens import Token, TokenType, SourceLocation, KEYWORDS, OPERATORS, INT32_MAX
from .errors import (
    UnexpectedCharacterError, IntegerOverflowError, UnterminatedCommentError
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    blockcalc lexical analyzer.

    Fails fast: the first malformed lexeme raises a `LexerError` from the
    token generator.
    """

    WHITESPACE = " \t\r\n"

    decimal_pattern = re.compile(r'[0-9]+')
    word_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self._reset()

    def _reset(self):
        self.pos = 0
        self.line = 1
        self.column = 1

    def tokens(self) -> Iterator[Token]:
        """
        Lazily yield the tokens of the source, ending with EOF.

        Each call starts over from the beginning of the input and scans with
        its own cursor, so several streams over one source can be live at
        once.
        """
        return Lexer(self.source, self.filename)._scan()

    def _scan(self) -> Iterator[Token]:
        count = 0

        while True:
            self._skip_whitespace_and_comments()

            if self.pos >= len(self.source):
                break

            yield self._next_token()
            count += 1

        logger.debug("lexed %d tokens from %s", count, self.filename)
        yield Token(TokenType.EOF, "", None, self._location())

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including EOF token
        """
        return list(self.tokens())

    def _next_token(self) -> Token:
        """Read one token starting at the current (non-blank) position."""
        location = self._location()
        current_char = self.source[self.pos]

        number_match = self.decimal_pattern.match(self.source, self.pos)
        if number_match:
            lexeme = number_match.group(0)
            # Check the length first; int() refuses very long digit strings
            digits = lexeme.lstrip('0')
            if len(digits) > len(str(INT32_MAX)) or int(digits or '0') > INT32_MAX:
                raise IntegerOverflowError(lexeme, location)
            value = int(digits or '0')
            self._advance_by(len(lexeme))
            return Token(TokenType.INTEGER, lexeme, value, location)

        word_match = self.word_pattern.match(self.source, self.pos)
        if word_match:
            lexeme = word_match.group(0)
            if lexeme not in KEYWORDS:
                raise UnexpectedCharacterError(current_char, location)
            self._advance_by(len(lexeme))
            return Token(KEYWORDS[lexeme], lexeme, None, location)

        if current_char in OPERATORS:
            self._advance()
            return Token(OPERATORS[current_char], current_char, None, location)

        raise UnexpectedCharacterError(current_char, location)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments."""
        while self.pos < len(self.source):
            if self.source[self.pos] in self.WHITESPACE:
                self._advance()
                continue

            # Line comments run up to (not including) the newline
            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            if self.source.startswith('/*', self.pos):
                start = self._location()
                end = self.source.find('*/', self.pos + 2)
                if end == -1:
                    raise UnterminatedCommentError(start)
                self._advance_by(end + 2 - self.pos)
                continue

            break

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
