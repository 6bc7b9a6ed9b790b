"""
Command line front end: `blockcalc [file] [-e SOURCE] [--ast] ...`

Prints one line per `print` call as it happens, then the program value.
Errors are rendered to stderr and the exit status is non-zero.

Author: xwest
"""

import argparse
import sys
from typing import IO, List, Optional

from . import __version__
from .config import Configuration, ColorConfig
from .driver import parse_source, run_source, render_error
from .lexer import BlockcalcError
from .parser import DEFAULT_MAX_DEPTH, format_ast
from .repl import Shell

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_IO_ERROR = 74  # EX_IOERR from sysexits.h


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockcalc",
        description="Evaluate blockcalc programs: integer arithmetic, print(), and blocks as expressions.",
        epilog="With no file and no -e, starts an interactive shell when stdin is a terminal "
               "and reads the program from stdin otherwise.",
    )
    parser.add_argument("file", nargs="?", help="program file to run ('-' reads stdin)")
    parser.add_argument("-e", "--expr", dest="source", metavar="SOURCE", help="run SOURCE instead of a file")
    parser.add_argument("--ast", action="store_true", help="print the parsed tree instead of evaluating")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help=f"maximum nesting of parentheses and blocks (default: {DEFAULT_MAX_DEPTH})")
    parser.add_argument("--color", choices=[c.value for c in ColorConfig], default=ColorConfig.IF_TTY.value,
                        help="color diagnostics (default: auto)")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log errors")
    verbosity.add_argument("-v", "--verbose", action="count", default=0,
                           help="log more (-v for progress, -vv for debug)")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure(args: argparse.Namespace) -> Configuration:
    """Translate parsed arguments into a Configuration."""
    config = Configuration().set_max_depth(args.max_depth)

    color = ColorConfig(args.color)
    if color is ColorConfig.YES:
        config.always_use_colors()
    elif color is ColorConfig.NO:
        config.never_use_colors()

    if args.quiet:
        config.log_quiet()
    elif args.verbose == 1:
        config.log_verbose()
    elif args.verbose >= 2:
        config.log_debug()

    return config


def main(argv: Optional[List[str]] = None, stdin: Optional[IO] = None,
         stdout: Optional[IO] = None, stderr: Optional[IO] = None) -> int:
    """Run the CLI and return the process exit status."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    if args.file is not None and args.source is not None:
        arg_parser.error("give either a file or -e SOURCE, not both")
    if args.max_depth < 1:
        arg_parser.error("--max-depth must be at least 1")

    config = configure(args)
    config.apply_logging(stderr)

    if args.source is not None:
        source, filename = args.source, "<expr>"
    elif args.file == "-" or (args.file is None and not _is_tty(stdin)):
        try:
            source, filename = stdin.read(), "<stdin>"
        except UnicodeDecodeError as e:
            stderr.write(f"blockcalc: cannot read <stdin>: not valid UTF-8 ({e.reason} at byte {e.start})\n")
            return EXIT_IO_ERROR
    elif args.file is not None:
        try:
            with open(args.file, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as e:
            stderr.write(f"blockcalc: cannot read {args.file}: {e.strerror}\n")
            return EXIT_IO_ERROR
        except UnicodeDecodeError as e:
            stderr.write(f"blockcalc: cannot read {args.file}: not valid UTF-8 ({e.reason} at byte {e.start})\n")
            return EXIT_IO_ERROR
        filename = args.file
    else:
        Shell(config, stdin=stdin, stdout=stdout).cmdloop()
        return EXIT_OK

    config.set_filename(filename)
    try:
        if args.ast:
            stdout.write(format_ast(parse_source(source, config=config)) + "\n")
        else:
            result = run_source(source, config=config, output=lambda value: stdout.write(f"{value}\n"))
            stdout.write(f"{result.value}\n")
    except BlockcalcError as e:
        stderr.write(render_error(e, source, config.should_use_colors(stderr)))
        return EXIT_SOURCE_ERROR

    return EXIT_OK


def _is_tty(stream: IO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


if __name__ == "__main__":
    sys.exit(main())
