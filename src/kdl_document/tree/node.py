"""Document tree structures: nodes, documents and key/value views.

A :class:`Node` exclusively owns its children; the reference back to its
parent is a weak reference used for traversal only, so the ownership graph
stays a tree.
"""

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional

from kdl_document.values import Value, new_value

if TYPE_CHECKING:
    from kdl_document.marshal.protocol import Marshaller


@dataclass
class EmitterHints:
    """Per-node hints for the emitter."""

    # Write an empty ``{ }`` block even when the node has no children
    emit_empty_children: bool = False


@dataclass(frozen=True)
class KV:
    """A child node's name paired with its sole argument."""

    key: str
    value: Value


@dataclass(eq=False)
class Node:
    """A single KDL node.

    Builder operations (``add_argument``, ``add_property``, ``add_child``,
    ...) return the node itself so calls can be chained.
    """

    name: str
    type_annotation: Optional[str] = None
    arguments: List[Value] = field(default_factory=list)
    properties: Dict[str, Value] = field(default_factory=dict)
    property_order: List[str] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    hints: EmitterHints = field(default_factory=EmitterHints)

    def __post_init__(self) -> None:
        """Validate the node and adopt any children passed in."""
        if not isinstance(self.name, str):
            raise TypeError("Node name must be a str")

        self._parent: Optional["weakref.ReferenceType[Node]"] = None

        unknown = [key for key in self.property_order if key not in self.properties]
        if unknown:
            raise ValueError(f"property_order names keys without a property: {unknown}")
        if len(set(self.property_order)) != len(self.property_order):
            raise ValueError("property_order must not contain duplicate keys")
        for key in self.properties:
            if key not in self.property_order:
                self.property_order.append(key)
        for child in self.children:
            child._parent = weakref.ref(self)

    @classmethod
    def kv(cls, name: str, value: Any) -> "Node":
        """Create a node with a single argument, wrapping raw Python values."""
        return cls(name).add_argument(new_value(value))

    @property
    def parent(self) -> Optional["Node"]:
        """The parent node, or ``None`` for top-level nodes."""
        if self._parent is None:
            return None
        return self._parent()

    def add_argument(self, value: Value) -> "Node":
        """Append a positional argument."""
        self.arguments.append(value)
        return self

    def add_property(self, key: str, value: Value) -> "Node":
        """Set a property; a new key is appended to ``property_order``.

        Re-setting an existing key replaces its value but keeps its position.
        """
        if key not in self.properties:
            self.property_order.append(key)
        self.properties[key] = value
        return self

    def add_child(self, child: "Node") -> "Node":
        """Append a child node and establish the parent relationship."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")

        child._parent = weakref.ref(self)
        self.children.append(child)
        return self

    def add_children(self, *children: "Node") -> "Node":
        """Append several child nodes."""
        for child in children:
            self.add_child(child)
        return self

    def add_children_from(self, fn: Callable[["Document"], Any]) -> "Node":
        """Call ``fn`` with a fresh document and adopt its nodes as children."""
        document = Document()
        fn(document)
        return self.add_children(*document.nodes)

    def add_kv(self, name: str, value: Any) -> "Node":
        """Append a single-argument child ``name value``."""
        return self.add_child(Node.kv(name, value))

    def new_child(self, name: str) -> "Node":
        """Create, append and return a new child node."""
        child = Node(name)
        self.add_child(child)
        return child

    def marshal_children(self, *records: "Marshaller") -> "Node":
        """Marshal ``records`` and append the results as children.

        Nothing is appended if any record fails to marshal.
        """
        from kdl_document.marshal.protocol import marshal_nodes

        return self.add_children(*marshal_nodes(records))

    def get_child(self, name: str) -> Optional["Node"]:
        """Return the first direct child named ``name``, or ``None``."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def get_children(self, name: str) -> List["Node"]:
        """Return every direct child named ``name``."""
        return [child for child in self.children if child.name == name]

    def get_kvs(self) -> List[KV]:
        """Return the children that have exactly one argument as key/value pairs."""
        return [
            KV(child.name, child.arguments[0])
            for child in self.children
            if len(child.arguments) == 1
        ]

    def iter_descendants(self) -> Iterator["Node"]:
        """Iterate over all descendants in pre-order."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def get_depth(self) -> int:
        """Depth of this node in the tree (top-level = 0)."""
        parent = self.parent
        if parent is None:
            return 0
        return parent.get_depth() + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to a plain structural dictionary.

        Values are rendered with :meth:`type_string`, so annotations and kinds
        take part in comparisons. Properties follow ``property_order``.
        """
        result: Dict[str, Any] = {"name": self.name}
        if self.type_annotation is not None:
            result["type"] = self.type_annotation
        result["arguments"] = [arg.type_string() for arg in self.arguments]
        result["properties"] = {
            key: self.properties[key].type_string() for key in self.property_order
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class Document:
    """An ordered collection of top-level nodes."""

    nodes: List[Node] = field(default_factory=list)

    def add_node(self, node: Node) -> "Document":
        """Append a top-level node."""
        if not isinstance(node, Node):
            raise TypeError("Document nodes must be Node instances")
        self.nodes.append(node)
        return self

    def marshal_nodes(self, *records: "Marshaller") -> "Document":
        """Marshal ``records`` and append the results as top-level nodes.

        Nothing is appended if any record fails to marshal.
        """
        from kdl_document.marshal.protocol import marshal_nodes

        self.nodes.extend(marshal_nodes(records))
        return self

    def iter_nodes(self) -> Iterator[Node]:
        """Iterate over every node in document order."""
        for node in self.nodes:
            yield node
            yield from node.iter_descendants()

    @property
    def node_count(self) -> int:
        """Total number of nodes at all depths."""
        return sum(1 for _ in self.iter_nodes())

    def to_dict(self) -> Dict[str, Any]:
        """Convert the document to a plain structural dictionary."""
        return {"nodes": [node.to_dict() for node in self.nodes]}
