"""Marshalling between host records and document trees.

Records opt in by implementing one of the protocols below; nothing is
discovered by reflection. Batch operations are all-or-nothing: the first
failing record aborts the batch and nothing is appended or returned.
"""

from typing import Iterable, List, Protocol, Sequence, Type, TypeVar, runtime_checkable

from kdl_document.shared import MarshalError
from kdl_document.tree import Document, Node

U = TypeVar("U", bound="Unmarshaller")
D = TypeVar("D", bound="DocumentUnmarshaller")


@runtime_checkable
class Marshaller(Protocol):
    """A record that can convert itself into a node."""

    def marshal_kdl(self) -> Node: ...


@runtime_checkable
class DocumentMarshaller(Protocol):
    """A record that can convert itself into a whole document."""

    def marshal_kdl_document(self) -> Document: ...


@runtime_checkable
class Unmarshaller(Protocol):
    """A record that can populate itself from a node."""

    def unmarshal_kdl(self, node: Node) -> None: ...


@runtime_checkable
class DocumentUnmarshaller(Protocol):
    """A record that can populate itself from a whole document."""

    def unmarshal_kdl_document(self, document: Document) -> None: ...


def marshal_nodes(records: Iterable[Marshaller]) -> List[Node]:
    """Marshal every record, raising the first record's error unchanged.

    Returns:
        The converted nodes, in record order
    """
    nodes = []
    for record in records:
        node = record.marshal_kdl()
        if not isinstance(node, Node):
            raise TypeError(
                f"{type(record).__name__}.marshal_kdl returned "
                f"{type(node).__name__}, expected Node"
            )
        nodes.append(node)
    return nodes


def marshal_all(document: Document, records: Iterable[Marshaller]) -> Document:
    """Marshal ``records`` and append them to ``document`` as top-level nodes.

    Returns:
        ``document``, for chaining
    """
    return document.marshal_nodes(*records)


def unmarshal_all(cls: Type[U], nodes: Sequence[Node]) -> List[U]:
    """Instantiate ``cls`` once per node and populate it with ``unmarshal_kdl``.

    Raises:
        MarshalError: On the first failure, chained to the original error and
            carrying the failing node's ``index``. No partial result is returned.
    """
    items: List[U] = []
    for index, node in enumerate(nodes):
        item = cls()
        try:
            item.unmarshal_kdl(node)
        except Exception as e:
            raise MarshalError(
                f"unmarshalling node {index} ({node.name}) into {cls.__name__}: {e}",
                index=index,
            ) from e
        items.append(item)
    return items


def marshal_document(record: DocumentMarshaller) -> Document:
    """Convert a record into a document via ``marshal_kdl_document``."""
    document = record.marshal_kdl_document()
    if not isinstance(document, Document):
        raise TypeError(
            f"{type(record).__name__}.marshal_kdl_document returned "
            f"{type(document).__name__}, expected Document"
        )
    return document


def unmarshal_document(cls: Type[D], document: Document) -> D:
    """Instantiate ``cls`` and populate it from ``document``.

    Raises:
        MarshalError: Chained to the original error.
    """
    item = cls()
    try:
        item.unmarshal_kdl_document(document)
    except Exception as e:
        raise MarshalError(f"unmarshalling document into {cls.__name__}: {e}") from e
    return item
