"""
blockcalc Evaluator Package

Tree-walking evaluation of parsed programs over 32-bit signed integers,
with ordered `print` side effects.

Author: xwest
"""

from .evaluator import Evaluator, evaluate
from .errors import EvaluationError, DivisionByZeroError, ArithmeticOverflowError

__all__ = [
    "Evaluator",
    "evaluate",
    "EvaluationError",
    "DivisionByZeroError",
    "ArithmeticOverflowError",
]
