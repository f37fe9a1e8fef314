"""Interactive read-eval-print loop for qlisp."""
from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO

from qlisp import config
from qlisp.interpreter import Interpreter
from qlisp.logging_config import setup_logging
from qlisp.types.errors import QLispSyntaxError

logger = logging.getLogger(__name__)

try:
    import readline
except ImportError:  # no readline on Windows
    readline = None


class Repl:
    """Reads one line at a time, evaluates it and prints the result."""

    def __init__(
        self,
        interp: Optional[Interpreter] = None,
        output: Optional[TextIO] = None,
        read_line: Callable[[str], str] = input,
    ):
        self.interp = interp or Interpreter()
        self.output = output or sys.stdout
        self.read_line = read_line
        self.prompt = config.get_prompt()

    def banner(self) -> None:
        print(f"qlisp version {config.VERSION}", file=self.output)
        print("Press Ctrl+C to exit\n", file=self.output)

    def process(self, line: str) -> str:
        """Evaluate one input line and return the text to print."""
        try:
            return self.interp.eval_to_string(line)
        except QLispSyntaxError as e:
            logger.info("syntax error: %s", e)
            return f"<stdin>:{e}"
        except RecursionError:
            logger.warning("input nested too deeply: %.40s", line)
            return "<stdin>: expression nested too deeply"

    def run(self) -> None:
        self.banner()
        while True:
            try:
                line = self.read_line(self.prompt)
            except (KeyboardInterrupt, EOFError):
                print(file=self.output)
                break
            print(self.process(line), file=self.output)


def _load_history() -> None:
    if readline is None:
        return
    path = config.get_history_file()
    try:
        readline.read_history_file(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not read history from %s: %s", path, e)


def _save_history() -> None:
    if readline is None:
        return
    path = config.get_history_file()
    try:
        readline.write_history_file(path)
    except OSError as e:
        logger.warning("Could not write history to %s: %s", path, e)


def main() -> None:
    setup_logging(config.get_log_level(), config.get_log_file())
    _load_history()
    try:
        Repl().run()
    finally:
        _save_history()


if __name__ == "__main__":
    main()
