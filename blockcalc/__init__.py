"""
blockcalc

Parser and evaluator for a small expression language in which `{ ... }`
blocks are expressions: integer arithmetic, parentheses, unary minus,
`print(...)`, comments, and blocks whose value is their last expression.

Architecture:
    blockcalc/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST
    ├── evaluator/       # Tree-walking evaluation
    ├── config.py        # Run configuration
    ├── driver.py        # lex -> parse -> evaluate, error rendering
    ├── cli.py           # Command line front end
    └── repl.py          # Interactive shell

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__email__ = "dev@neuralscript.org"
__license__ = "MIT"

from .lexer import Lexer, BlockcalcError
from .parser import Parser
from .evaluator import Evaluator
from .config import Configuration
from .driver import run_source, run_file, RunResult

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Evaluator",
    "Configuration",
    "BlockcalcError",

    # Driver
    "run_source",
    "run_file",
    "RunResult",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
