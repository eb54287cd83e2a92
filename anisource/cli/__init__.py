"""
CLI Layer - Command-line interface for exercising providers.
"""

from anisource.cli.main import app

__all__ = ["app"]
