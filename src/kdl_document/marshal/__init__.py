"""Marshal/unmarshal protocol between host records and document trees.

Key Components:
    Marshaller, DocumentMarshaller: Record to tree conversion
    Unmarshaller, DocumentUnmarshaller: Tree to record population
    marshal_all, unmarshal_all, marshal_document, unmarshal_document
"""

from .protocol import (
    DocumentMarshaller,
    DocumentUnmarshaller,
    Marshaller,
    Unmarshaller,
    marshal_all,
    marshal_document,
    marshal_nodes,
    unmarshal_all,
    unmarshal_document,
)

__all__ = [
    "DocumentMarshaller",
    "DocumentUnmarshaller",
    "Marshaller",
    "Unmarshaller",
    "marshal_all",
    "marshal_document",
    "marshal_nodes",
    "unmarshal_all",
    "unmarshal_document",
]
