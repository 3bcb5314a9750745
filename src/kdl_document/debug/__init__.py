"""Diagnostic rendering of document trees.

Key Components:
    print_document: S-expression rendering of a whole document
    SExpressionPrinter: Incremental printer used by print_document
"""

from .printer import SExpressionPrinter, print_document, print_node

__all__ = [
    "SExpressionPrinter",
    "print_document",
    "print_node",
]
