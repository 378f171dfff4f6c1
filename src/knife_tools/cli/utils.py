"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from knife_tools.exceptions import KnifeToolsError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_console", "get_error_console"]

# Module-level consoles, created lazily
_console: Console | None = None
_error_console: Console | None = None


def get_console() -> Console:
    """Rich console on stdout for listings."""
    global _console
    if _console is None:
        from rich.console import Console

        _console = Console()
    return _console


def get_error_console() -> Console:
    """Rich console on stderr for usage text and errors."""
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """Report a failed invocation on stderr.

    A KnifeToolsError (a broken manifest, a plugin file that raised) is
    rendered with its context and suggestions in color when stderr is a
    terminal, and as plain text when stderr is a pipe or log file.

    Args:
        e: The exception to print
        verbose: Print the traceback instead (``--debug``)
        use_rich: Force or disable rich rendering (None checks stderr)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, KnifeToolsError):
        # Rendered via KnifeToolsError.__rich_console__
        console.print(e)
    else:
        print(format_error(e, verbose=False), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """Plain-text form of an error, prefixed with "Error:"."""
    if verbose:
        return traceback.format_exc()

    if isinstance(e, KnifeToolsError):
        return f"Error: {e}"

    return f"Error: {type(e).__name__}: {e}"
