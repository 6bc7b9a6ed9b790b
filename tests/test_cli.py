"""
Tests for the command line front end and the interactive shell.

Author: xwest
"""

import contextlib
import io
import logging
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from blockcalc.cli import main, build_arg_parser, configure, EXIT_OK, EXIT_SOURCE_ERROR, EXIT_IO_ERROR
from blockcalc.config import Configuration, ColorConfig, LogLevel
from blockcalc.repl import Shell


class FakeTerminal(io.StringIO):
    """A StringIO that claims to be a terminal."""

    def isatty(self):
        return True


class CLITestCase(unittest.TestCase):

    def run_cli(self, argv, stdin_text=""):
        stdin = io.StringIO(stdin_text)
        stdout = io.StringIO()
        stderr = io.StringIO()
        status = main(argv, stdin=stdin, stdout=stdout, stderr=stderr)
        return status, stdout.getvalue(), stderr.getvalue()

    def tearDown(self):
        # main() installs a handler on the package logger
        logger = logging.getLogger("blockcalc")
        for handler in list(logger.handlers):
            if getattr(handler, "_blockcalc_handler", False):
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


class TestMain(CLITestCase):

    def test_expression(self):
        status, out, err = self.run_cli(["-e", "print(1); print(2); 3"])
        self.assertEqual(status, EXIT_OK)
        self.assertEqual(out, "1\n2\n3\n")
        self.assertEqual(err, "")

    def test_block_statement_program(self):
        status, out, _ = self.run_cli(["-e", "{1} -1;"])
        self.assertEqual((status, out), (EXIT_OK, "-1\n"))

    def test_reads_stdin_when_not_a_terminal(self):
        status, out, _ = self.run_cli([], stdin_text="{ 2; 3 } * 2\n")
        self.assertEqual((status, out), (EXIT_OK, "6\n"))

    def test_dash_reads_stdin(self):
        status, out, _ = self.run_cli(["-"], stdin_text="print(4)")
        self.assertEqual((status, out), (EXIT_OK, "4\n4\n"))

    def test_file(self):
        with tempfile.NamedTemporaryFile('w', suffix='.bc', delete=False, encoding='utf-8') as f:
            f.write("/* sum */\n1 + 2 + 3\n")
            path = f.name
        try:
            status, out, _ = self.run_cli([path])
        finally:
            os.unlink(path)
        self.assertEqual((status, out), (EXIT_OK, "6\n"))

    def test_missing_file(self):
        status, out, err = self.run_cli([os.path.join(tempfile.gettempdir(), "no-such-dir", "missing.bc")])
        self.assertEqual(status, EXIT_IO_ERROR)
        self.assertEqual(out, "")
        self.assertIn("cannot read", err)

    def test_file_that_is_not_utf8(self):
        with tempfile.NamedTemporaryFile('wb', suffix='.bc', delete=False) as f:
            f.write(b"1 + \xff\xfe;")
            path = f.name
        try:
            status, out, err = self.run_cli([path])
        finally:
            os.unlink(path)
        self.assertEqual(status, EXIT_IO_ERROR)
        self.assertEqual(out, "")
        self.assertIn("cannot read", err)
        self.assertIn("not valid UTF-8", err)

    def test_long_chain_ast(self):
        source = " + ".join(["1"] * 5000)
        status, out, _ = self.run_cli(["--ast", "-e", source])
        self.assertEqual(status, EXIT_OK)
        self.assertEqual(out.count("IntegerLiteral 1"), 5000)

    def test_nesting_beyond_the_host_stack_is_reported(self):
        source = "(" * 5000 + "1" + ")" * 5000
        status, out, err = self.run_cli(["--color", "never", "--max-depth", "100000", "-e", source])
        self.assertEqual(status, EXIT_SOURCE_ERROR)
        self.assertEqual(out, "")
        self.assertIn("error[P003]", err)

    def test_ast(self):
        status, out, _ = self.run_cli(["--ast", "-e", "({1}) - 1"])
        self.assertEqual(status, EXIT_OK)
        self.assertTrue(out.startswith("Program\n"))
        self.assertIn("BinaryOp '-'", out)

    def test_ast_does_not_evaluate(self):
        status, out, _ = self.run_cli(["--ast", "-e", "print(1 / 0)"])
        self.assertEqual(status, EXIT_OK)
        self.assertIn("PrintCall", out)

    def test_source_error(self):
        status, out, err = self.run_cli(["--color", "never", "-e", "1 + 2);"])
        self.assertEqual(status, EXIT_SOURCE_ERROR)
        self.assertEqual(out, "")
        self.assertIn("error[P001]", err)
        self.assertIn("  --> <expr>:1:6", err)
        self.assertIn("  1 | 1 + 2);", err)

    def test_values_printed_before_an_error_are_kept(self):
        status, out, err = self.run_cli(["-e", "print(1); 1 / 0;"])
        self.assertEqual(status, EXIT_SOURCE_ERROR)
        self.assertEqual(out, "1\n")
        self.assertIn("Division by zero", err)

    def test_max_depth(self):
        status, _, err = self.run_cli(["--max-depth", "1", "-e", "((1))"])
        self.assertEqual(status, EXIT_SOURCE_ERROR)
        self.assertIn("P003", err)

    def test_forced_color(self):
        _, _, err = self.run_cli(["--color", "always", "-e", "@"])
        self.assertIn("\x1b[", err)

    def test_verbose_logs_failures(self):
        _, _, err = self.run_cli(["-v", "-e", "1 +"])
        self.assertIn("parsing <expr> failed", err)

    def test_usage_errors(self):
        for argv in (["file.bc", "-e", "1"], ["--max-depth", "0", "-e", "1"], ["-q", "-v", "-e", "1"]):
            with self.subTest(argv=argv):
                with contextlib.redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit) as ctx:
                        self.run_cli(argv)
                self.assertEqual(ctx.exception.code, 2)


class TestConfigure(unittest.TestCase):

    def test_flags_map_onto_configuration(self):
        parser = build_arg_parser()
        config = configure(parser.parse_args(["--color", "always", "-vv", "--max-depth", "7"]))
        self.assertEqual(config.color_config, ColorConfig.YES)
        self.assertEqual(config.log_level, LogLevel.DEBUG)
        self.assertEqual(config.max_depth, 7)

        config = configure(parser.parse_args(["-q"]))
        self.assertEqual(config.log_level, LogLevel.QUIET)
        self.assertEqual(config.color_config, ColorConfig.IF_TTY)


class TestShell(CLITestCase):

    def run_shell(self, text):
        stdout = io.StringIO()
        Shell(Configuration().never_use_colors(), stdin=io.StringIO(text), stdout=stdout).cmdloop()
        return stdout.getvalue()

    def test_each_line_is_evaluated(self):
        out = self.run_shell("1 + 2\nprint(5); 6\n")
        self.assertIn("3\n", out)
        self.assertIn("5\n6\n", out)

    def test_errors_do_not_end_the_session(self):
        out = self.run_shell("(1 +\n7 * 6\n")
        self.assertIn("error[P002]", out)
        self.assertIn("<stdin:1>", out)
        self.assertIn("42\n", out)

    def test_lines_are_independent(self):
        # An unclosed block on one line is not continued on the next
        out = self.run_shell("{ 1;\n}\n")
        self.assertIn("<stdin:1>", out)
        self.assertIn("<stdin:2>", out)

    def test_exit_and_help(self):
        out = self.run_shell("help\nexit\n9\n")
        self.assertIn("blocks evaluate to their last value", out)
        # Nothing after `exit` runs
        self.assertNotIn("9\n", out)

    def test_main_starts_shell_on_a_terminal(self):
        stdout = io.StringIO()
        status = main([], stdin=FakeTerminal("2 * 21\n"), stdout=stdout, stderr=io.StringIO())
        self.assertEqual(status, EXIT_OK)
        self.assertIn("blockcalc interactive shell", stdout.getvalue())
        self.assertIn("42\n", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
