"""
Command-line interface for visionary.

This package contains CLI implementations using Click.
"""

from visionary.cli.commands import cli, generate, main, ui

__all__ = ["cli", "generate", "main", "ui"]
