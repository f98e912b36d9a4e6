"""CLI entry points for the succinct benchmark harness."""

from .app import build_parser, console_main, main

__all__ = ["build_parser", "console_main", "main"]
