"""
Tests for the blockcalc evaluator.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from blockcalc.parser.parser import parse_string
from blockcalc.parser.ast_nodes import (
    Block, ExpressionStatement, BlockStatement, IntegerLiteral, BinaryOp, PrintCall, Grouping
)
from blockcalc.evaluator.evaluator import Evaluator, evaluate
from blockcalc.evaluator.errors import EvaluationError, DivisionByZeroError, ArithmeticOverflowError


class EvaluatorTestCase(unittest.TestCase):

    def run_program(self, source):
        """Evaluate `source`, returning (value, printed)."""
        evaluator = Evaluator()
        value = evaluator.evaluate(parse_string(source))
        return value, evaluator.printed

    def value_of(self, source):
        return self.run_program(source)[0]


class TestArithmetic(EvaluatorTestCase):

    def test_precedence_and_grouping(self):
        cases = {
            "2 + 3 * 4": 14,
            "(2 + 3) * 4": 20,
            "-2 * -3": 6,
            "10 - 4 - 3": 3,
            "100 / 10 / 5": 2,
            "-(3 - 5)": 2,
            "7": 7,
        }
        for source, expected in cases.items():
            with self.subTest(source=source):
                self.assertEqual(self.value_of(source), expected)

    def test_division_truncates_toward_zero(self):
        cases = {"7 / 2": 3, "-7 / 2": -3, "7 / -2": -3, "-7 / -2": 3, "1 / 3": 0}
        for source, expected in cases.items():
            with self.subTest(source=source):
                self.assertEqual(self.value_of(source), expected)

    def test_division_by_zero(self):
        for source in ["1/0;", "print(1/0)", "{ 5 / (2 - 2) }", "1 + 0 / 0"]:
            with self.subTest(source=source):
                with self.assertRaises(DivisionByZeroError) as ctx:
                    self.value_of(source)
                self.assertEqual(ctx.exception.diagnostic.code, "E001")

    def test_division_by_zero_stops_before_print(self):
        evaluator = Evaluator()
        with self.assertRaises(DivisionByZeroError):
            evaluator.evaluate(parse_string("print(1); print(1/0); print(3);"))
        self.assertEqual(evaluator.printed, [1])

    def test_extremes_of_the_range(self):
        self.assertEqual(self.value_of("2147483647"), 2147483647)
        self.assertEqual(self.value_of("-2147483647 - 1"), -2147483648)

    def test_overflow_is_reported(self):
        for source in ["2147483647 + 1", "-2147483647 - 2", "65536 * 65536", "(-2147483647 - 1) / -1",
                       "-(-2147483647 - 1)"]:
            with self.subTest(source=source):
                with self.assertRaises(ArithmeticOverflowError):
                    self.value_of(source)

    def test_long_chains_do_not_recurse(self):
        source = " + ".join(["1"] * 5000)
        self.assertEqual(self.value_of(source), 5000)


class TestBlocks(EvaluatorTestCase):

    def test_block_values(self):
        cases = {
            "{ 1; 2; 3 }": 3,
            "{ 1; 2; }": 2,
            "{ }": 0,
            "{ 5 }": 5,
            "{ 1; {2} }": 2,
            "{ {1}; }": 1,
        }
        for source, expected in cases.items():
            with self.subTest(source=source):
                self.assertEqual(self.value_of(source), expected)

    def test_statement_block_then_negation(self):
        # Block statement, then the statement -1; the program's value is -1
        self.assertEqual(self.value_of("{1} -1;"), -1)
        self.assertEqual(self.value_of("{1} - 1"), -1)

    def test_block_operand(self):
        self.assertEqual(self.value_of("({1}) - 1"), 0)
        self.assertEqual(self.value_of("1 + {2}"), 3)
        self.assertEqual(self.value_of("{ 2 * {3; 4} }"), 8)

    def test_empty_program_is_zero(self):
        self.assertEqual(self.value_of(""), 0)


class TestPrint(EvaluatorTestCase):

    def test_print_order_and_result(self):
        value, printed = self.run_program("print(1); print(2);")
        self.assertEqual(printed, [1, 2])
        self.assertEqual(value, 2)

    def test_print_returns_its_argument(self):
        value, printed = self.run_program("print(print(3) * 2) + 1")
        self.assertEqual(printed, [3, 6])
        self.assertEqual(value, 7)

    def test_left_to_right_depth_first(self):
        _, printed = self.run_program("print(1) + print({ print(2); 3 }) * print(4)")
        self.assertEqual(printed, [1, 2, 3, 4])

    def test_blocks_run_statements_in_order(self):
        value, printed = self.run_program("{ print(1); { print(2); }; print(3) } + 1")
        self.assertEqual(printed, [1, 2, 3])
        self.assertEqual(value, 4)

    def test_output_callback(self):
        seen = []
        value = evaluate(parse_string("print(5); 6"), output=seen.append)
        self.assertEqual((seen, value), ([5], 6))


class TestNodes(unittest.TestCase):
    """Evaluating hand-built trees and individual nodes."""

    def test_statements_have_values(self):
        evaluator = Evaluator()
        self.assertEqual(evaluator.evaluate(ExpressionStatement(IntegerLiteral(4))), 4)
        self.assertEqual(evaluator.evaluate(BlockStatement(Block([], IntegerLiteral(9)))), 9)

    def test_error_without_span(self):
        node = BinaryOp(IntegerLiteral(1), "/", IntegerLiteral(0))
        with self.assertRaises(EvaluationError) as ctx:
            Evaluator().evaluate(node)
        self.assertIsNone(ctx.exception.location)
        self.assertIs(ctx.exception.node, node)

    def test_error_location_points_at_operator_expression(self):
        with self.assertRaises(DivisionByZeroError) as ctx:
            evaluate(parse_string("1;\n  8 / 0;"))
        location = ctx.exception.location
        self.assertEqual((location.line, location.column), (2, 3))

    def test_evaluator_is_reusable(self):
        evaluator = Evaluator()
        program = parse_string("print(2); 3")
        self.assertEqual(evaluator.evaluate(program), 3)
        self.assertEqual(evaluator.evaluate(program), 3)
        self.assertEqual(evaluator.printed, [2, 2])

    def test_tree_deeper_than_the_host_stack(self):
        node = IntegerLiteral(1)
        for _ in range(5000):
            node = Grouping(node)
        with self.assertRaises(EvaluationError) as ctx:
            Evaluator().evaluate(node)
        self.assertIn("too deep", ctx.exception.message)

    def test_print_node(self):
        evaluator = Evaluator()
        self.assertEqual(evaluator.evaluate(PrintCall(IntegerLiteral(-3))), -3)
        self.assertEqual(evaluator.printed, [-3])


if __name__ == '__main__':
    unittest.main()
