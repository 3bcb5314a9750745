"""Tests for the document tree structures."""

import gc

import pytest

from kdl_document.tree import KV, Document, EmitterHints, Node
from kdl_document.values import Integer, Null, String


class TestNode:
    """Test Node construction and builder operations."""

    def test_node_creation_defaults(self):
        """Test a new node is empty."""
        node = Node("host")

        assert node.name == "host"
        assert node.type_annotation is None
        assert node.arguments == []
        assert node.properties == {}
        assert node.property_order == []
        assert node.children == []
        assert node.parent is None
        assert node.hints == EmitterHints()

    def test_node_name_must_be_str(self):
        """Test non-string names are rejected."""
        with pytest.raises(TypeError, match="Node name must be a str"):
            Node(5)

    def test_constructor_syncs_property_order(self):
        """Test properties passed in are recorded in property_order."""
        node = Node("n", properties={"b": Integer(1), "a": Integer(2)})
        assert node.property_order == ["b", "a"]

    def test_constructor_rejects_unknown_order_keys(self):
        """Test property_order may only name existing properties."""
        with pytest.raises(ValueError, match="keys without a property"):
            Node("a", property_order=["x"])

    def test_constructor_rejects_duplicate_order_keys(self):
        """Test property_order may not repeat a key."""
        with pytest.raises(ValueError, match="duplicate keys"):
            Node("a", properties={"x": Integer(1)}, property_order=["x", "x"])

    def test_constructor_keeps_given_order(self):
        """Test a partial property_order is kept and completed."""
        node = Node(
            "a",
            properties={"x": Integer(1), "y": Integer(2), "z": Integer(3)},
            property_order=["z"],
        )
        assert node.property_order == ["z", "x", "y"]

    def test_constructor_adopts_children(self):
        """Test children passed in get their parent set."""
        child = Node("child")
        parent = Node("parent", children=[child])
        assert child.parent is parent

    def test_builder_operations_chain(self):
        """Test builder operations return the node."""
        node = Node("host").add_argument(String("example1")).add_property("port", Integer(22))

        assert node.arguments == [String("example1")]
        assert node.properties == {"port": Integer(22)}

    def test_duplicate_property_last_write_wins(self):
        """Test re-setting a property keeps its first position."""
        node = Node("n")
        node.add_property("x", Integer(1))
        node.add_property("y", Integer(3))
        node.add_property("x", Integer(2))

        assert node.properties["x"] == Integer(2)
        assert node.property_order == ["x", "y"]

    def test_add_child_establishes_parent_relationship(self):
        """Test adding a child sets its parent."""
        parent = Node("parent")
        child = Node("child")

        parent.add_child(child)

        assert parent.children == [child]
        assert child.parent is parent
        assert child.get_depth() == 1
        assert parent.get_depth() == 0

    def test_add_child_rejects_non_nodes(self):
        """Test only nodes can be children."""
        with pytest.raises(TypeError, match="Child must be a Node instance"):
            Node("parent").add_child("child")

    def test_parent_reference_does_not_own(self):
        """Test the parent back-reference does not keep the parent alive."""
        child = Node("child")
        Node("parent").add_child(child)
        gc.collect()

        assert child.parent is None

    def test_kv_helpers(self):
        """Test single-argument child helpers."""
        node = Node("host").add_kv("user", "root").add_kv("port", 22)
        node.add_child(Node("flags").add_argument(Integer(1)).add_argument(Integer(2)))

        assert Node.kv("user", "root").arguments == [String("root")]
        assert node.get_kvs() == [KV("user", String("root")), KV("port", Integer(22))]

    def test_new_child(self):
        """Test new_child appends and returns the child."""
        parent = Node("parent")
        child = parent.new_child("child")

        assert parent.children == [child]
        assert child.parent is parent

    def test_add_children_from(self):
        """Test adopting the nodes of a scratch document."""
        def fill(document):
            document.add_node(Node("a"))
            document.add_node(Node("b"))

        parent = Node("parent").add_children_from(fill)

        assert [child.name for child in parent.children] == ["a", "b"]
        assert all(child.parent is parent for child in parent.children)

    def test_get_child_and_children(self):
        """Test child lookup by name."""
        parent = Node("p").add_children(Node("a"), Node("b"), Node("a"))

        assert parent.get_child("a") is parent.children[0]
        assert parent.get_child("missing") is None
        assert parent.get_children("a") == [parent.children[0], parent.children[2]]

    def test_iter_descendants_pre_order(self):
        """Test descendants are visited in pre-order."""
        root = Node("root").add_children(
            Node("a").add_child(Node("a1")),
            Node("b"),
        )
        assert [node.name for node in root.iter_descendants()] == ["a", "a1", "b"]

    def test_to_dict(self):
        """Test the structural dictionary rendering."""
        node = Node("host", type_annotation="server")
        node.add_argument(String("example1"))
        node.add_property("port", Integer(22))
        node.add_child(Node("user").add_argument(Null()))

        assert node.to_dict() == {
            "name": "host",
            "type": "server",
            "arguments": ['string("example1")'],
            "properties": {"port": "integer(22)"},
            "children": [{"name": "user", "arguments": ["null"], "properties": {}}],
        }


class TestDocument:
    """Test Document operations."""

    def test_add_node_has_no_parent(self):
        """Test top-level nodes have no parent."""
        document = Document().add_node(Node("a"))
        assert document.nodes[0].parent is None

    def test_add_node_rejects_non_nodes(self):
        """Test only nodes can be added."""
        with pytest.raises(TypeError):
            Document().add_node("a")

    def test_iter_nodes_and_count(self):
        """Test iteration covers every depth."""
        document = Document()
        document.add_node(Node("a").add_child(Node("a1")))
        document.add_node(Node("b"))

        assert [node.name for node in document.iter_nodes()] == ["a", "a1", "b"]
        assert document.node_count == 3

    def test_to_dict(self):
        """Test the document dictionary rendering."""
        document = Document().add_node(Node("a"))
        assert document.to_dict() == {
            "nodes": [{"name": "a", "arguments": [], "properties": {}}]
        }
