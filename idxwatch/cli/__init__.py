"""CLI commands for idxwatch.

This package provides the command-line interface for idxwatch,
including the live view, one-shot quotes and market status.
"""

from idxwatch.cli.main import cli, main

__all__ = ["cli", "main"]
