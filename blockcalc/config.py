"""
Run configuration for blockcalc.

`Configuration` is a small fluent builder; every setter returns the
configuration so calls can be chained::

    config = Configuration().never_use_colors().log_debug().set_max_depth(32)

Author: xwest
"""

import logging
import sys
from enum import Enum
from typing import IO, Optional

from .parser.parser import DEFAULT_MAX_DEPTH


class ColorConfig(Enum):
    """When diagnostics are colored."""
    YES = "always"
    NO = "never"
    IF_TTY = "auto"


class LogLevel(Enum):
    """Verbosity of the `blockcalc` logger, mapped onto `logging` levels."""
    QUIET = logging.ERROR
    INFO = logging.WARNING
    VERBOSE = logging.INFO
    DEBUG = logging.DEBUG


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class Configuration:
    """Settings shared by the driver, the CLI and the REPL."""

    def __init__(self):
        self.color_config = ColorConfig.IF_TTY
        self.log_level = LogLevel.INFO
        self.max_depth = DEFAULT_MAX_DEPTH
        self.filename = "<string>"

    # Colors

    def always_use_colors(self) -> 'Configuration':
        """Always color diagnostics, even if output is not a TTY."""
        self.color_config = ColorConfig.YES
        return self

    def never_use_colors(self) -> 'Configuration':
        self.color_config = ColorConfig.NO
        return self

    def use_colors_if_tty(self) -> 'Configuration':
        """Color diagnostics only when the stream is a TTY. This is the default."""
        self.color_config = ColorConfig.IF_TTY
        return self

    def should_use_colors(self, stream: Optional[IO] = None) -> bool:
        if self.color_config is ColorConfig.YES:
            return True
        if self.color_config is ColorConfig.NO:
            return False
        stream = stream if stream is not None else sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    # Logging

    def log_quiet(self) -> 'Configuration':
        self.log_level = LogLevel.QUIET
        return self

    def log_info(self) -> 'Configuration':
        self.log_level = LogLevel.INFO
        return self

    def log_verbose(self) -> 'Configuration':
        self.log_level = LogLevel.VERBOSE
        return self

    def log_debug(self) -> 'Configuration':
        self.log_level = LogLevel.DEBUG
        return self

    def apply_logging(self, stream: Optional[IO] = None) -> logging.Logger:
        """
        Point the `blockcalc` logger at `stream` (stderr by default) with the
        configured level. Replaces any handler installed by a previous call.
        """
        logger = logging.getLogger("blockcalc")
        for handler in list(logger.handlers):
            if getattr(handler, "_blockcalc_handler", False):
                logger.removeHandler(handler)

        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._blockcalc_handler = True
        logger.addHandler(handler)
        logger.setLevel(self.log_level.value)
        logger.propagate = False
        return logger

    # Parsing limits and naming

    def set_max_depth(self, max_depth: int) -> 'Configuration':
        """Maximum nesting of parentheses, `print(` and blocks."""
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.max_depth = max_depth
        return self

    def set_filename(self, filename: str) -> 'Configuration':
        """Name used for the source in diagnostics."""
        self.filename = filename
        return self
