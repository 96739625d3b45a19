"""Command-line entry points."""

from gentools.cli.main import clipboard_main, commit_main

__all__ = ["commit_main", "clipboard_main"]
