"""
blockcalc tree-walking evaluator.

Walks the AST left to right, depth first, so `print` side effects happen in
source order. Values are Python ints kept inside the 32-bit signed range.

Author: xwest
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..lexer.tokens import INT32_MIN, INT32_MAX
from ..parser.ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, Block, ExpressionStatement, BlockStatement,
    IntegerLiteral, BinaryOp, Negation, PrintCall, Grouping, BlockExpression,
)
from .errors import EvaluationError, DivisionByZeroError, ArithmeticOverflowError

logger = logging.getLogger(__name__)


class Evaluator(ASTVisitor):
    """
    Computes the value of programs, blocks, statements and expressions.

    Every value passed to `print` is handed to `output` as it is produced;
    without an `output` callable they are collected in `printed`.
    An instance holds no state besides that output, so it can evaluate any
    number of trees.
    """

    def __init__(self, output: Optional[Callable[[int], Any]] = None):
        self.printed: List[int] = []
        self._output = output if output is not None else self.printed.append

        self._handlers: Dict[ASTNodeType, Callable[[Any], int]] = {
            ASTNodeType.PROGRAM: self._eval_block,
            ASTNodeType.BLOCK: self._eval_block,
            ASTNodeType.EXPRESSION_STMT: self._eval_expression_statement,
            ASTNodeType.BLOCK_STATEMENT: self._eval_block_statement,
            ASTNodeType.INTEGER_LITERAL: self._eval_integer_literal,
            ASTNodeType.BINARY_OP: self._eval_binary_op,
            ASTNodeType.NEGATION: self._eval_negation,
            ASTNodeType.PRINT_CALL: self._eval_print_call,
            ASTNodeType.GROUPING: self._eval_grouping,
            ASTNodeType.BLOCK_EXPRESSION: self._eval_block_expression,
        }

    def evaluate(self, node: ASTNode) -> int:
        """
        Evaluate any node and return its value.

        Raises:
            EvaluationError: On division by zero, 32-bit overflow, or a tree
                nested too deeply for the Python stack
        """
        try:
            value = node.accept(self)
        except RecursionError:
            raise EvaluationError(
                "Expression nesting too deep to evaluate",
                node,
                help_text="Reduce the nesting of parentheses and blocks.",
            ) from None
        logger.debug("evaluated %s to %d", node.node_type.value, value)
        return value

    def visit(self, node: ASTNode) -> int:
        return self._handlers[node.node_type](node)

    # Blocks and statements

    def _eval_block(self, block: Block) -> int:
        """Trailing expression's value, else the last statement's, else 0."""
        value = 0
        for statement in block.statements:
            value = self.visit(statement)
        if block.trailing is not None:
            value = self.visit(block.trailing)
        return value

    def _eval_expression_statement(self, statement: ExpressionStatement) -> int:
        return self.visit(statement.expression)

    def _eval_block_statement(self, statement: BlockStatement) -> int:
        return self._eval_block(statement.block)

    # Expressions

    def _eval_integer_literal(self, literal: IntegerLiteral) -> int:
        return literal.value

    def _eval_binary_op(self, node: BinaryOp) -> int:
        # Walk the left spine iteratively so long chains like 1+1+...+1 do
        # not consume one stack frame per operator.
        spine: List[BinaryOp] = []
        current: ASTNode = node
        while isinstance(current, BinaryOp):
            spine.append(current)
            current = current.left

        value = self.visit(current)
        for binary in reversed(spine):
            right = self.visit(binary.right)
            value = self._apply(binary, value, right)
        return value

    def _apply(self, node: BinaryOp, left: int, right: int) -> int:
        operator = node.operator
        if operator == "+":
            result = left + right
        elif operator == "-":
            result = left - right
        elif operator == "*":
            result = left * right
        elif operator == "/":
            if right == 0:
                raise DivisionByZeroError(node)
            # Truncate toward zero, not toward negative infinity
            result = abs(left) // abs(right)
            if (left < 0) != (right < 0):
                result = -result
        else:
            raise ValueError(f"unknown binary operator {operator!r}")

        return self._check_range(result, f"{left} {operator} {right}", node)

    def _eval_negation(self, node: Negation) -> int:
        operand = self.visit(node.operand)
        return self._check_range(-operand, f"-({operand})", node)

    def _eval_print_call(self, node: PrintCall) -> int:
        value = self.visit(node.argument)
        self._output(value)
        return value

    def _eval_grouping(self, node: Grouping) -> int:
        return self.visit(node.expression)

    def _eval_block_expression(self, node: BlockExpression) -> int:
        return self._eval_block(node.block)

    @staticmethod
    def _check_range(value: int, expression: str, node: ASTNode) -> int:
        if not INT32_MIN <= value <= INT32_MAX:
            raise ArithmeticOverflowError(expression, node)
        return value


def evaluate(node: ASTNode, output: Optional[Callable[[int], Any]] = None) -> int:
    """Evaluate `node` with a fresh evaluator."""
    return Evaluator(output).evaluate(node)
