"""
Terminal output helpers for the frameforge CLI.

Status lines go to stdout, errors to stderr. Colors are only emitted when
the target stream is a terminal.
"""

import sys
from typing import Iterable, TextIO


class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'


def colorize(text: str, color: str, stream: TextIO = None) -> str:
    """Wrap text in color codes when stream (default stdout) is a TTY."""
    stream = stream if stream is not None else sys.stdout
    if getattr(stream, 'isatty', lambda: False)():
        return f"{color}{text}{Colors.RESET}"
    return text


BANNER = r"""
   ____                      ____
  / __/______ ___ _  ___    / __/__  _______ ____
 / _// __/ _ `/  ' \/ -_)  / _// _ \/ __/ _ `/ -_)
/_/ /_/  \_,_/_/_/_/\__/  /_/  \___/_/  \_, /\__/
                                       /___/"""


def print_banner(version: str):
    print(colorize(BANNER, Colors.CYAN))
    print(f"    backend dispatch for collection creation, v{version}\n")


DIAGRAM = """
dispatch(kind, operation, ...)
  |
  +- active = <kind>.backend.library, else the kind's default
  +- operation defined on active?      yes -> call it, return result
  +- fallback set and allow-fallback?  no  -> OperationNotImplementedError
  +- dispatch on fallback (chains follow the same rules)
  +- active.move_from_fallback(result)  failure -> FallbackConversionError
  +- warn-fallback?                    yes -> one FallbackWarning per call

See `frameforge info backends` for the registered fallback chains.
"""


def print_diagram():
    print(DIAGRAM)


def _status(symbol: str, color: str, message: str, stream: TextIO):
    print(f"{colorize(symbol, color, stream)} {message}", file=stream)


def print_success(message: str):
    _status('✓', Colors.GREEN, message, sys.stdout)


def print_warning(message: str):
    _status('⚠', Colors.YELLOW, message, sys.stdout)


def print_error(message: str):
    _status('✗', Colors.RED, message, sys.stderr)


def print_section(title: str):
    print(f"\n{colorize(title, Colors.BOLD)}")
    print("─" * len(title))


def print_field(name: str, value: str, width: int = 16):
    """One indented ``name  value`` line of a kind or backend listing."""
    print(f"    {name:<{width}} {value}")


def format_chain(labels: Iterable[str]) -> str:
    """Render a fallback chain as ``sparse -> pandas``."""
    return ' -> '.join(labels)


def format_flag(value: bool) -> str:
    return 'on' if value else 'off'
