"""
Console Management - Centralized Rich console configuration.

This module provides the shared Rich console used by the CLI for tables,
panels and error output.
"""

from typing import Optional

from rich.console import Console
from rich.theme import Theme


# Styles referenced by markup across the CLI
ANISOURCE_THEME = Theme({
    "title": "bold blue",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "cyan",
    "muted": "dim",
    "url": "underline cyan",
})

# Global console instance
_console: Optional[Console] = None


def setup_console(
    force_terminal: Optional[bool] = None,
    width: Optional[int] = None,
) -> Console:
    """
    Set up and configure the global Rich console.

    Args:
        force_terminal: Force terminal mode detection
        width: Console width override

    Returns:
        Configured Rich Console instance
    """
    global _console

    console_kwargs = {
        "theme": ANISOURCE_THEME,
        "stderr": False,
        "force_terminal": force_terminal,
        "color_system": "auto",
    }
    if width is not None:
        console_kwargs["width"] = width

    _console = Console(**console_kwargs)
    return _console


def get_console() -> Console:
    """
    Get the global Rich console instance.

    Creates a default console if none exists.
    """
    global _console

    if _console is None:
        _console = setup_console()

    return _console


__all__ = ["ANISOURCE_THEME", "setup_console", "get_console"]
