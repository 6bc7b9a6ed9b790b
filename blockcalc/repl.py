"""Interactive mode for blockcalc. Uses cmd as backend."""

import cmd
import sys

from .config import Configuration
from .driver import run_source, render_error
from .lexer import BlockcalcError


class Shell(cmd.Cmd):
    """blockcalc shell. Every line is run as a program of its own."""
    intro = "blockcalc interactive shell\nType 'help' for more information, 'exit' to quit."
    prompt = "> "

    def __init__(self, config: Configuration = None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.config = config if config is not None else Configuration()
        self.line_num = 0

        # cmd only uses input() when talking to the real terminal
        if kwargs.get("stdin") not in (None, sys.stdin):
            self.use_rawinput = False

    def default(self, line):
        """Runs one line of blockcalc."""
        self.line_num += 1
        filename = f"<stdin:{self.line_num}>"

        try:
            result = run_source(line, filename, self.config,
                                output=lambda value: self.stdout.write(f"{value}\n"))
        except BlockcalcError as e:
            self.stdout.write(render_error(e, line, self.config.should_use_colors(self.stdout)))
            return

        self.stdout.write(f"{result.value}\n")

    def do_help(self, arg):
        """Shows example input instead of per-command docs."""
        self.stdout.write(
            "Each line is evaluated on its own and its value is printed.\n\n"
            "  1 + 2 * 3           arithmetic on 32-bit integers\n"
            "  print(4); 5         print() shows a value and returns it\n"
            "  { 1; 2; 3 } * 2     blocks evaluate to their last value\n"
            "  {1} -1;             a leading block is a statement of its own\n"
            "  // ...  /* ... */   comments\n"
        )

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
