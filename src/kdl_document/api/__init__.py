"""Public API for building, flattening and emitting KDL documents.

Key Components:
    parse_events, loads, load_file: Event source to Document
    flatten, dump, dumps: Document to events or canonical KDL text
    KDLProcessor: Reusable, configured processor with usage statistics
"""

from .processor import (
    KDLProcessor,
    dump,
    dumps,
    flatten,
    load_file,
    loads,
    parse_events,
)

__all__ = [
    "KDLProcessor",
    "dump",
    "dumps",
    "flatten",
    "load_file",
    "loads",
    "parse_events",
]
