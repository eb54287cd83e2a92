"""
Error Handler - Rich error panels with context and suggestions.

This module provides consistent error display for the CLI, with a panel
layout per error family and actionable suggestions.
"""

import traceback
from typing import List, Optional

from rich.panel import Panel

from anisource.core.exceptions import (
    AniSourceError,
    ConfigurationError,
    NetworkError,
    ProviderError,
)
from anisource.ui.console import get_console


class ErrorHandler:
    """Handles error display with consistent formatting and helpful context."""

    def handle_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """
        Handle and display an error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Additional context about where the error occurred
            show_traceback: Whether to show the full traceback
        """
        if isinstance(error, ConfigurationError):
            lines = [f"[error]{error.message}[/error]"]
            if error.config_path:
                lines.append(f"\n[muted]Configuration file:[/muted] [info]{error.config_path}[/info]")
            title = "⚙️  Configuration Error"
            suggestions = [
                "Check sources.json syntax and value types",
                "Delete the file to regenerate defaults",
            ]
        elif isinstance(error, ProviderError):
            lines = [f"[error]{error.message}[/error]"]
            if error.provider_name:
                lines.append(f"\n[muted]Provider:[/muted] [info]{error.provider_name}[/info]")
            title = "🔌 Provider Error"
            suggestions = [
                "Run [info]anisource providers[/info] to list available providers",
                "Re-run with [info]--debug[/info] to see each extraction attempt",
            ]
        elif isinstance(error, NetworkError):
            lines = [f"[error]{error.message}[/error]"]
            if error.url:
                lines.append(f"\n[muted]URL:[/muted] [url]{error.url}[/url]")
            if error.status_code:
                lines.append(f"[muted]Status:[/muted] {error.status_code}")
            title = "🌐 Network Error"
            suggestions = [
                "Check your internet connection",
                "Configure mirror domains in [info]fallback_urls[/info]",
            ]
        elif isinstance(error, AniSourceError):
            lines = [f"[error]{error.message}[/error]"]
            title = "❌ Error"
            suggestions = []
        else:
            lines = [f"[error]{type(error).__name__}: {error}[/error]"]
            title = "💥 Unexpected Error"
            suggestions = ["Re-run with [info]--debug[/info] for a traceback"]

        self._display(title, lines, suggestions, context, error, show_traceback)

    def _display(
        self,
        title: str,
        lines: List[str],
        suggestions: List[str],
        context: Optional[str],
        error: Exception,
        show_traceback: bool,
    ) -> None:
        if context:
            lines.append(f"\n[muted]Context:[/muted] {context}")

        if suggestions:
            lines.append("\n\n[info]💡 Suggestions:[/info]")
            lines.extend(f"• {suggestion}" for suggestion in suggestions)

        details = getattr(error, 'details', None)
        if show_traceback:
            if details:
                lines.append(f"\n\n[muted]Details:[/muted]\n{details}")
            lines.append("\n[muted]Traceback:[/muted]\n" + "".join(traceback.format_exception(error)))

        get_console().print(Panel(
            "\n".join(lines),
            title=title,
            border_style="error",
            padding=(1, 2)
        ))

    def display_warning(self, message: str, title: str = "⚠️  Warning") -> None:
        """Display a warning message."""
        get_console().print(Panel(
            f"[warning]{message}[/warning]",
            title=f"[warning]{title}[/warning]",
            border_style="warning",
            padding=(1, 2)
        ))


# Global error handler instance
_error_handler = ErrorHandler()


def handle_error(
    error: Exception,
    context: Optional[str] = None,
    show_traceback: bool = False
) -> None:
    """Handle and display an error using the global error handler."""
    _error_handler.handle_error(error, context, show_traceback)


def display_warning(message: str, title: str = "⚠️  Warning") -> None:
    """Display a warning message using the global error handler."""
    _error_handler.display_warning(message, title)


__all__ = [
    "ErrorHandler",
    "handle_error",
    "display_warning",
]
