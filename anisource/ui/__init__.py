"""
UI Layer - Rich console and error display for the CLI.
"""

from anisource.ui.console import get_console, setup_console
from anisource.ui.error_handler import ErrorHandler, display_warning, handle_error

__all__ = [
    # Console Management
    "get_console",
    "setup_console",
    # Error Handling
    "ErrorHandler",
    "handle_error",
    "display_warning",
]
