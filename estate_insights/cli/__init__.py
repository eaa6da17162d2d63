"""Command line interface for estate_insights."""

from .cli import CLIError, main, parse_args

__all__ = ["CLIError", "main", "parse_args"]
