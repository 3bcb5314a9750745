"""Document tree for KDL documents.

Key Components:
    Node, Document, KV: The tree structures
    get, get_or_default, get_child_value, set_value: Keyed value access
    TreeBuilder: Assembles a Document from an event source
"""

from .accessors import get, get_child_value, get_or_default, set_value
from .builder import TreeBuilder
from .node import KV, Document, EmitterHints, Node

__all__ = [
    "KV",
    "Document",
    "EmitterHints",
    "Node",
    "TreeBuilder",
    "get",
    "get_child_value",
    "get_or_default",
    "set_value",
]
