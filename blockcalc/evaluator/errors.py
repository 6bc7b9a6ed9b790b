"""
Evaluation error handling for blockcalc.

Arithmetic is on 32-bit signed integers; leaving that range or dividing by
zero is reported as an error instead of wrapping.

Author: xwest
"""

from typing import Optional

from ..lexer.errors import BlockcalcError
from ..parser.ast_nodes import ASTNode


class EvaluationError(BlockcalcError):
    """Exception raised when evaluation of an AST fails."""

    def __init__(self, message: str, node: Optional[ASTNode] = None, help_text: Optional[str] = None):
        location = node.span.start if node is not None and node.span is not None else None
        super().__init__(message, location, help_text=help_text)
        self.node = node


class DivisionByZeroError(EvaluationError):
    code = "E001"

    def __init__(self, node: Optional[ASTNode] = None):
        super().__init__(
            "Division by zero",
            node,
            help_text="The right operand of '/' evaluated to 0.",
        )


class ArithmeticOverflowError(EvaluationError):
    code = "E002"

    def __init__(self, expression: str, node: Optional[ASTNode] = None):
        super().__init__(
            f"Arithmetic overflow in {expression}",
            node,
            help_text="Results must fit in a 32-bit signed integer.",
        )
        self.expression = expression
