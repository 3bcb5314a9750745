"""Tree flattening: Document to event sink.

Key Components:
    TreeEmitter: Pre-order flattener with canonical property order
    flatten_to: One-shot helper around TreeEmitter
"""

from .flattener import TreeEmitter, flatten_to

__all__ = [
    "TreeEmitter",
    "flatten_to",
]
