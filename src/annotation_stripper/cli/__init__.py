"""
CLI module for annotation stripping.

Provides the command-line tool for filtering and rewriting Java sources.
"""

from annotation_stripper.cli.strip import main as strip_main

__all__ = ["strip_main"]
