"""Command-line interface module for kdl-document.

This module provides the ``kdl-document`` tool that turns JSON-lines event
files into KDL text, s-expressions or canonical event streams.
"""

from .main import main

__all__ = ["main"]
