"""
blockcalc Parser Package

Implements the recursive descent parser for blockcalc and its AST.

Key Features:
- Precedence climbing for `+ - * /` and unary minus
- Context-sensitive block parsing (`blocks_allowed`) so that a `{ ... }`
  in statement position is always a statement
- Structurally comparable AST nodes with source spans
- Fail-fast diagnostics with the set of expected tokens

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, DEFAULT_MAX_DEPTH, parse_string, parse_file
from .errors import ParseError, UnexpectedTokenError, UnexpectedEndOfInputError, NestingTooDeepError

__all__ = [
    # Core parser
    "Parser", "DEFAULT_MAX_DEPTH", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan",
    "Program", "Block", "Statement", "ExpressionStatement", "BlockStatement",
    "Expression", "IntegerLiteral", "BinaryOp", "Negation", "PrintCall",
    "Grouping", "BlockExpression", "format_ast",

    # Error handling
    "ParseError", "UnexpectedTokenError", "UnexpectedEndOfInputError", "NestingTooDeepError",
]
