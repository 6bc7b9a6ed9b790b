"""
Abstract Syntax Tree node definitions for blockcalc.

Every node owns its children outright (the tree has no parent links and no
sharing) and compares structurally: two nodes are equal when they have the
same kind and equal fields, regardless of where in the source they came
from. That makes "same parse" checks independent of whitespace and comments.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any, Tuple
from dataclasses import dataclass
from enum import Enum

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    BLOCK = "Block"

    # Statements
    EXPRESSION_STMT = "ExpressionStatement"
    BLOCK_STATEMENT = "BlockStatement"

    # Expressions
    INTEGER_LITERAL = "IntegerLiteral"
    BINARY_OP = "BinaryOp"
    NEGATION = "Negation"
    PRINT_CALL = "PrintCall"
    GROUPING = "Grouping"
    BLOCK_EXPRESSION = "BlockExpression"


@dataclass
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit(self, node: 'ASTNode') -> Any:
        """Visit a generic AST node."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    # Names of the attributes that make up the node's structure
    fields: Tuple[str, ...] = ()

    def __init__(self, node_type: ASTNodeType, span: Optional[SourceSpan]):
        self.node_type = node_type
        self.span = span

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        args = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.fields)
        return f"{self.__class__.__name__}({args})"

    def __eq__(self, other) -> bool:
        """
        Structural equality; spans are ignored.

        Compares with an explicit worklist so long operator chains do not
        use one stack frame per node.
        """
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if isinstance(left, list) and isinstance(right, list):
                if len(left) != len(right):
                    return False
                pending.extend(zip(left, right))
            elif isinstance(left, ASTNode):
                if not isinstance(right, ASTNode) or left.node_type != right.node_type:
                    return False
                pending.extend((getattr(left, name), getattr(right, name)) for name in left.fields)
            elif isinstance(right, (ASTNode, list)) or left != right:
                return False
        return True

    def __hash__(self) -> int:
        # Only this node's own scalar fields; children are left to __eq__
        return hash((self.node_type,) + tuple(
            value for value in (getattr(self, name) for name in self.fields)
            if not isinstance(value, (ASTNode, list))
        ))


# ============================================================================
# Blocks
# ============================================================================

class Block(ASTNode):
    """
    `{ statements... trailing? }`

    The trailing expression, when present, was parsed with blocks
    disallowed, so it never starts with `{`.
    """
    statements: List['Statement']
    trailing: Optional['Expression']
    fields = ("statements", "trailing")

    def __init__(self, statements: List['Statement'], trailing: Optional['Expression'] = None,
                 span: Optional[SourceSpan] = None, node_type: ASTNodeType = ASTNodeType.BLOCK):
        super().__init__(node_type, span)
        self.statements = statements
        self.trailing = trailing

    def children(self) -> List[ASTNode]:
        children: List[ASTNode] = list(self.statements)
        if self.trailing is not None:
            children.append(self.trailing)
        return children


class Program(Block):
    """Root node: the implicit block formed by the whole input."""

    def __init__(self, statements: List['Statement'], trailing: Optional['Expression'] = None,
                 span: Optional[SourceSpan] = None):
        super().__init__(statements, trailing, span, node_type=ASTNodeType.PROGRAM)


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""
    pass


class ExpressionStatement(Statement):
    """An expression terminated by `;`."""
    expression: 'Expression'
    fields = ("expression",)

    def __init__(self, expression: 'Expression', span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.EXPRESSION_STMT, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]


class BlockStatement(Statement):
    """A block in statement position, optionally followed by `;`."""
    block: Block
    has_semicolon: bool
    fields = ("block", "has_semicolon")

    def __init__(self, block: Block, has_semicolon: bool = False, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.BLOCK_STATEMENT, span)
        self.block = block
        self.has_semicolon = has_semicolon

    def children(self) -> List[ASTNode]:
        return [self.block]


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions."""
    pass


class IntegerLiteral(Expression):
    """32-bit signed integer literal."""
    value: int
    fields = ("value",)

    def __init__(self, value: int, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.INTEGER_LITERAL, span)
        self.value = value

    def children(self) -> List[ASTNode]:
        return []


class BinaryOp(Expression):
    """Binary operation expression: one of `+ - * /`."""
    left: Expression
    operator: str
    right: Expression
    fields = ("left", "operator", "right")

    def __init__(self, left: Expression, operator: str, right: Expression,
                 span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.BINARY_OP, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class Negation(Expression):
    """Unary minus."""
    operand: Expression
    fields = ("operand",)

    def __init__(self, operand: Expression, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.NEGATION, span)
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]


class PrintCall(Expression):
    """`print(argument)`: emits the argument's value and evaluates to it."""
    argument: Expression
    fields = ("argument",)

    def __init__(self, argument: Expression, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.PRINT_CALL, span)
        self.argument = argument

    def children(self) -> List[ASTNode]:
        return [self.argument]


class Grouping(Expression):
    """Parenthesized expression. Transparent to evaluation."""
    expression: Expression
    fields = ("expression",)

    def __init__(self, expression: Expression, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.GROUPING, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]


class BlockExpression(Expression):
    """A block used where an expression is allowed; its value propagates."""
    block: Block
    fields = ("block",)

    def __init__(self, block: Block, span: Optional[SourceSpan] = None):
        super().__init__(ASTNodeType.BLOCK_EXPRESSION, span)
        self.block = block

    def children(self) -> List[ASTNode]:
        return [self.block]


# ============================================================================
# Rendering
# ============================================================================

def format_ast(node: ASTNode, indent: str = "  ") -> str:
    """
    Render a tree as indented text, one node per line.

    Example for `{1} -1;`::

        Program
          BlockStatement
            Block
              trailing:
                IntegerLiteral 1
          ExpressionStatement
            Negation
              IntegerLiteral 1
    """
    lines: List[str] = []
    # Explicit stack of (node or literal line, depth); deep left-leaning
    # chains would otherwise need one stack frame per operator.
    stack: List[Tuple[Any, int]] = [(node, 0)]

    while stack:
        item, depth = stack.pop()
        prefix = indent * depth
        if isinstance(item, str):
            lines.append(prefix + item)
            continue

        lines.append(prefix + _label(item))

        # Pushed in reverse so they pop in source order
        if isinstance(item, Block):
            if item.trailing is not None:
                stack.append((item.trailing, depth + 2))
                stack.append(("trailing:", depth + 1))
            stack.extend((statement, depth + 1) for statement in reversed(item.statements))
        else:
            stack.extend((child, depth + 1) for child in reversed(item.children()))

    return "\n".join(lines)


def _label(node: ASTNode) -> str:
    label = node.node_type.value
    if isinstance(node, IntegerLiteral):
        label += f" {node.value}"
    elif isinstance(node, BinaryOp):
        label += f" '{node.operator}'"
    elif isinstance(node, BlockStatement) and node.has_semicolon:
        label += " ;"
    return label
