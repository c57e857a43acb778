"""Command-line interface for descentfit."""

from descentfit.cli.main import main

__all__ = ["main"]
