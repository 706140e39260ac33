import sys
from typing import Optional

import colorama

colorama.init()

COLOR_SUCCESS = colorama.Fore.GREEN
COLOR_WARNING = colorama.Fore.YELLOW
COLOR_ERROR = colorama.Fore.RED
COLOR_INFO = colorama.Fore.CYAN
COLOR_DEBUG = colorama.Style.DIM
COLOR_RESET = colorama.Style.RESET_ALL

IS_TTY = sys.stdout.isatty()


def _is_quiet(quiet_arg: Optional[bool]) -> bool:
    """Helper to determine if output should be suppressed."""
    return quiet_arg is True


def _print_colored(message: str, color: str, file=None, quiet: Optional[bool] = False):
    """Internal function to print a message with a specified color."""
    if _is_quiet(quiet):
        return

    if file is None:
        file = sys.stdout
    if IS_TTY:
        print(f"{color}{message}{COLOR_RESET}", file=file)
    else:
        print(message, file=file)


def print_success(message: str, quiet: Optional[bool] = False):
    """Prints a message in the 'success' color (green)."""
    _print_colored(message, COLOR_SUCCESS, quiet=quiet)


def print_warning(message: str, quiet: Optional[bool] = False):
    """Prints a message in the 'warning' color (yellow)."""
    _print_colored(message, COLOR_WARNING, quiet=quiet)


def print_error(message: str, quiet: Optional[bool] = False):
    """Prints a message in the 'error' color (red) to stderr."""
    _print_colored(message, COLOR_ERROR, file=sys.stderr, quiet=quiet)


def print_info(message: str, quiet: Optional[bool] = False):
    """Prints a message in the 'info' color (cyan)."""
    _print_colored(message, COLOR_INFO, quiet=quiet)


def print_debug(message: str, debug: bool = False):
    """Prints a dimmed diagnostic message to stderr, only when `debug` is set."""
    if debug:
        _print_colored(f"[debug] {message}", COLOR_DEBUG, file=sys.stderr)


def print_document(content: str, title: str, quiet: Optional[bool] = False):
    """Prints a document, framed by a header naming it unless quiet."""
    if _is_quiet(quiet):
        print(content, end="")
        return

    header = f"--- {title} ---"
    if IS_TTY:
        print(f"\n{COLOR_INFO}{header}{COLOR_RESET}")
        print(content, end="")
        print(f"{COLOR_INFO}{'-' * len(header)}{COLOR_RESET}")
    else:
        print(f"\n{header}")
        print(content, end="")
        print("-" * len(header))
