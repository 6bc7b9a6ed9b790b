"""
Lex -> parse -> evaluate over one unit of source text.

The driver owns the print output of a run and is the only place errors from
the three stages are caught, so that they can be rendered for a human.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from termcolor import colored

from .config import Configuration
from .lexer import Lexer, BlockcalcError
from .parser import Parser, Program
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

ERROR_COLOR = "red"


@dataclass
class RunResult:
    """Outcome of a successful run."""
    value: int
    printed: List[int] = field(default_factory=list)


def parse_source(source: str, filename: Optional[str] = None,
                 config: Optional[Configuration] = None) -> Program:
    """Lex and parse `source` without evaluating it."""
    config = config if config is not None else Configuration()
    filename = filename if filename is not None else config.filename

    tokens = Lexer(source, filename).tokens()
    try:
        return Parser(tokens, max_depth=config.max_depth).parse()
    except BlockcalcError as e:
        logger.info("parsing %s failed: %s", filename, e.message)
        raise


def run_source(source: str, filename: Optional[str] = None,
               config: Optional[Configuration] = None,
               output: Optional[Callable[[int], Any]] = None) -> RunResult:
    """
    Run one program.

    Args:
        source: Program text
        filename: Name used in diagnostics (defaults to `config.filename`)
        config: Run configuration
        output: Called with each printed value as soon as it is printed

    Returns:
        The program value and every printed value, in order

    Raises:
        BlockcalcError: The first lexing, parsing or evaluation error
    """
    filename = filename if filename is not None else (config or Configuration()).filename
    program = parse_source(source, filename, config)

    printed: List[int] = []

    def emit(value: int):
        printed.append(value)
        if output is not None:
            output(value)

    try:
        value = Evaluator(emit).evaluate(program)
    except BlockcalcError as e:
        logger.info("evaluating %s failed: %s", filename, e.message)
        raise

    logger.debug("%s: %d value(s) printed, result %d", filename, len(printed), value)
    return RunResult(value, printed)


def run_file(filepath: str, config: Optional[Configuration] = None) -> RunResult:
    """
    Run a program stored in a file.

    Raises:
        BlockcalcError: If the program fails
        IOError: If file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return run_source(source, filepath, config)


def format_output(result: RunResult) -> str:
    """One line per printed value, then the program value."""
    lines = [str(value) for value in result.printed]
    lines.append(str(result.value))
    return "".join(line + "\n" for line in lines)


def render_error(error: BlockcalcError, source: str, use_colors: bool = False) -> str:
    """
    Render a diagnostic with the offending source line and a caret under
    the error column, e.g.::

        error[P002]: Unexpected end of input, expected ')'
          --> <expr>:1:7
           |
         1 | (1 + 2
           |       ^
          help: The input ended while the parser still expected ')'.
    """
    def paint(text: str, color: Optional[str] = None, bold: bool = False) -> str:
        if not use_colors:
            return text
        return colored(text, color, attrs=["bold"] if bold else None, force_color=True)

    diagnostic = error.diagnostic
    header = "error"
    if diagnostic.code:
        header += f"[{diagnostic.code}]"
    result = paint(header, ERROR_COLOR, bold=True) + paint(f": {diagnostic.message}", bold=True) + "\n"

    location = diagnostic.location
    if location is not None:
        result += f"  --> {location}\n"
        lines = source.split("\n")
        if 1 <= location.line <= len(lines):
            line_text = lines[location.line - 1]
            gutter = " " * len(str(location.line))
            result += f"  {gutter} |\n"
            result += f"  {location.line} | {line_text}\n"
            result += f"  {gutter} | " + " " * (location.column - 1) + paint("^", ERROR_COLOR, bold=True) + "\n"

    if diagnostic.help_text:
        result += f"  help: {diagnostic.help_text}\n"
    if diagnostic.suggestions:
        for suggestion in diagnostic.suggestions:
            result += f"    - {suggestion}\n"

    return result
