"""CLI commands for pipsuite.

This package provides the command-line interface: position sizing,
journal management and performance analytics commands.
"""

from pipsuite.cli.main import cli, main

__all__ = ["cli", "main"]
