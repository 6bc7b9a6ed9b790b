"""
blockcalc recursive descent parser

Precedence climbing over three levels (additive, multiplicative, unary)
down to primaries. Every expression-level method takes a `blocks_allowed`
flag that says whether a bare `{ ... }` may be read as a primary at that
position:

- statement position and the trailing expression of a block parse with
  blocks disallowed, so a leading `{` is always a block statement;
- only the leftmost primary of an expression inherits the flag; right
  operands and everything inside `( )` and `print( )` allow blocks again.

So `{1} -1;` is a block statement followed by the statement `-1;`, while
`({1}) - 1` subtracts from a block expression.

Author: xwest
"""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    SourceSpan, Program, Block, Statement, ExpressionStatement, BlockStatement,
    Expression, IntegerLiteral, BinaryOp, Negation, PrintCall, Grouping, BlockExpression,
)
from .errors import (
    UnexpectedTokenError, UnexpectedEndOfInputError, NestingTooDeepError
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100

ADDITIVE_OPERATORS = (TokenType.PLUS, TokenType.MINUS)
MULTIPLICATIVE_OPERATORS = (TokenType.MULTIPLY, TokenType.DIVIDE)
TERM_STARTS = (TokenType.INTEGER, TokenType.LEFT_PAREN, TokenType.PRINT)


class Parser:
    """
    blockcalc parser.

    Pulls tokens one at a time from any iterable (a list or the lexer's lazy
    generator) with a single token of lookahead. Each instance parses one
    input; it fails on the first error and does not recover.
    """

    def __init__(self, tokens: Iterable[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Args:
            tokens: Tokens from the lexer, normally ending with EOF
            max_depth: Maximum nesting of `(`, `print(` and `{`
        """
        self._stream: Iterator[Token] = iter(tokens)
        self.max_depth = max_depth
        self.depth = 0
        self._deepest = 0
        self._deepest_opener: Optional[Token] = None
        self._last_location = SourceLocation("<unknown>", 1, 1, 0)
        self._previous_token: Optional[Token] = None
        self._current = self._pull()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> Program:
        """
        Parse a whole program: statements and an optional trailing
        expression up to the end of input.

        Raises:
            ParseError: On the first syntax error
            LexerError: If the underlying token stream fails
        """
        start = self._peek().location
        with self._host_stack_guard():
            statements, trailing = self._parse_block_body(TokenType.EOF)
        program = Program(statements, trailing, SourceSpan(start, self._peek().location))

        logger.debug("parsed program: %d statements, trailing expression: %s",
                     len(statements), trailing is not None)
        return program

    def parse_expression(self) -> Expression:
        """Parse a single top-level expression (blocks allowed) up to EOF."""
        with self._host_stack_guard():
            expression = self._parse_expression(blocks_allowed=True)
        if not self._check(TokenType.EOF):
            self._fail(ADDITIVE_OPERATORS + MULTIPLICATIVE_OPERATORS + (TokenType.EOF,))
        return expression

    # ------------------------------------------------------------------
    # Blocks and statements
    # ------------------------------------------------------------------

    def _parse_block(self) -> Block:
        """Parse `{ statements... trailing? }`."""
        start_token = self._consume(TokenType.LEFT_BRACE)
        with self._nested(start_token):
            statements, trailing = self._parse_block_body(TokenType.RIGHT_BRACE)
        end_token = self._consume(TokenType.RIGHT_BRACE)
        return Block(statements, trailing, SourceSpan(start_token.location, end_token.location))

    def _parse_block_body(self, closing: TokenType) -> Tuple[List[Statement], Optional[Expression]]:
        """
        Parse statements up to (not including) `closing`.

        An expression directly followed by `closing` instead of `;` becomes
        the trailing expression.
        """
        statements: List[Statement] = []
        trailing: Optional[Expression] = None

        while not self._check(closing):
            if self._check(TokenType.LEFT_BRACE):
                statements.append(self._parse_block_statement())
                continue

            if not (self._check(TokenType.MINUS) or self._peek().type in TERM_STARTS):
                self._fail((closing, TokenType.LEFT_BRACE, TokenType.MINUS) + TERM_STARTS)

            expression = self._parse_expression(blocks_allowed=False)

            if self._check(TokenType.SEMICOLON):
                end_token = self._advance()
                span = SourceSpan(expression.span.start, end_token.location)
                statements.append(ExpressionStatement(expression, span))
            elif self._check(closing):
                trailing = expression
            else:
                self._fail((TokenType.SEMICOLON, closing))

        return statements, trailing

    def _parse_block_statement(self) -> BlockStatement:
        """Parse a block in statement position; the `;` after it is optional."""
        block = self._parse_block()
        has_semicolon = self._match(TokenType.SEMICOLON)
        end = self._previous_token.location
        return BlockStatement(block, has_semicolon, SourceSpan(block.span.start, end))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self, blocks_allowed: bool) -> Expression:
        """Additive level: `Factor(b) (('+' | '-') Factor(true))*`."""
        left = self._parse_factor(blocks_allowed)

        while self._peek().type in ADDITIVE_OPERATORS:
            operator_token = self._advance()
            right = self._parse_factor(blocks_allowed=True)
            left = BinaryOp(left, operator_token.lexeme, right, SourceSpan(left.span.start, right.span.end))

        return left

    def _parse_factor(self, blocks_allowed: bool) -> Expression:
        """Multiplicative level: `Unary(b) (('*' | '/') Unary(true))*`."""
        left = self._parse_unary(blocks_allowed)

        while self._peek().type in MULTIPLICATIVE_OPERATORS:
            operator_token = self._advance()
            right = self._parse_unary(blocks_allowed=True)
            left = BinaryOp(left, operator_token.lexeme, right, SourceSpan(left.span.start, right.span.end))

        return left

    def _parse_unary(self, blocks_allowed: bool) -> Expression:
        """Unary level: `Term(b)` or `'-' Term(true)`."""
        if self._check(TokenType.MINUS):
            operator_token = self._advance()
            operand = self._parse_term(blocks_allowed=True)
            return Negation(operand, SourceSpan(operator_token.location, operand.span.end))

        if not self._starts_term(blocks_allowed):
            self._fail(self._term_starts(blocks_allowed, with_minus=True))

        return self._parse_term(blocks_allowed)

    def _parse_term(self, blocks_allowed: bool) -> Expression:
        """Primaries: integer, `( Expr )`, `print( Expr )`, and blocks when allowed."""
        token = self._peek()

        if token.type == TokenType.INTEGER:
            self._advance()
            return IntegerLiteral(token.value, SourceSpan(token.location, token.location))

        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            with self._nested(token):
                inner = self._parse_expression(blocks_allowed=True)
            end_token = self._consume(TokenType.RIGHT_PAREN)
            return Grouping(inner, SourceSpan(token.location, end_token.location))

        if token.type == TokenType.PRINT:
            self._advance()
            self._consume(TokenType.LEFT_PAREN)
            with self._nested(token):
                argument = self._parse_expression(blocks_allowed=True)
            end_token = self._consume(TokenType.RIGHT_PAREN)
            return PrintCall(argument, SourceSpan(token.location, end_token.location))

        if token.type == TokenType.LEFT_BRACE and blocks_allowed:
            block = self._parse_block()
            return BlockExpression(block, block.span)

        self._fail(self._term_starts(blocks_allowed, with_minus=False))

    def _starts_term(self, blocks_allowed: bool) -> bool:
        token_type = self._peek().type
        return token_type in TERM_STARTS or (blocks_allowed and token_type == TokenType.LEFT_BRACE)

    @staticmethod
    def _term_starts(blocks_allowed: bool, with_minus: bool) -> Tuple[TokenType, ...]:
        starts = TERM_STARTS
        if with_minus:
            starts = starts + (TokenType.MINUS,)
        if blocks_allowed:
            starts = starts + (TokenType.LEFT_BRACE,)
        return starts

    # ------------------------------------------------------------------
    # Utility methods
    # ------------------------------------------------------------------

    @contextmanager
    def _nested(self, opener: Token):
        """Track delimiter nesting; too deep is a ParseError, not a crash."""
        self.depth += 1
        if self.depth > self.max_depth:
            raise NestingTooDeepError(self.max_depth, opener.location, opener)
        if self.depth > self._deepest:
            self._deepest, self._deepest_opener = self.depth, opener
        try:
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def _host_stack_guard(self):
        """
        Report running out of Python stack before `max_depth` is reached
        as nesting that is too deep, at the innermost opener seen.
        """
        try:
            yield
        except RecursionError:
            opener = self._deepest_opener
            location = opener.location if opener is not None else self._peek().location
            logger.debug("host stack exhausted at nesting depth %d", self._deepest)
            raise NestingTooDeepError(max(self._deepest - 1, 0), location, opener) from None

    def _pull(self) -> Token:
        """Next token from the stream; a missing EOF is synthesized."""
        token = next(self._stream, None)
        if token is None:
            return Token(TokenType.EOF, "", None, self._last_location)
        self._last_location = token.location
        return token

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        return self._current.type == token_type

    def _advance(self) -> Token:
        """Consume and return current token. EOF is never consumed."""
        token = self._current
        if token.type != TokenType.EOF:
            self._current = self._pull()
        self._previous_token = token
        return token

    def _peek(self) -> Token:
        """Return current token without consuming."""
        return self._current

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        self._fail((token_type,))

    def _fail(self, expected: Sequence[TokenType]):
        """Raise the error describing the current token against `expected`."""
        token = self._peek()
        if token.type == TokenType.EOF:
            raise UnexpectedEndOfInputError(expected, token.location)
        raise UnexpectedTokenError(token, expected)


def parse_string(source: str, filename: str = "<string>", max_depth: int = DEFAULT_MAX_DEPTH) -> Program:
    """
    Convenience function to parse a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import Lexer

    return Parser(Lexer(source, filename).tokens(), max_depth=max_depth).parse()


def parse_file(filepath: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Program:
    """
    Convenience function to parse a source file.

    Raises:
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return parse_string(source, filepath, max_depth=max_depth)
