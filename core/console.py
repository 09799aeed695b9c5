"""Terminal output helpers - ANSI colors and the status printers.

Pure functions over strings; nothing here holds state.
"""

import sys

COLORS = {
    "reset": "\033[0m",
    "bright": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}


def colorize(text: str, color: str) -> str:
    """Wrap text in the ANSI sequence for color (a COLORS key)."""
    return f"{COLORS[color]}{text}{COLORS['reset']}"


def print_header(msg: str) -> None:
    print(f"\n{colorize(msg, 'cyan')}")


def print_status(msg: str) -> None:
    print(f"  {colorize('✓', 'green')} {msg}")


def print_step(msg: str) -> None:
    print(f"  {colorize('→', 'cyan')} {msg}")


def print_warning(msg: str) -> None:
    print(f"  {colorize('⚠', 'yellow')} {msg}")


def print_error(msg: str) -> None:
    print(f"\033[31m[devsetup error]\033[0m {msg}", file=sys.stderr)
