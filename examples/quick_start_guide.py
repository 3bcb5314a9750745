#!/usr/bin/env python3
"""
Quick Start Guide for kdl-document.

Builds a small host inventory from records, renders it as KDL text and as an
s-expression, round-trips it through the event stream and reads the records
back.
"""

from dataclasses import dataclass

from kdl_document import (
    Document,
    KDLConfig,
    KDLProcessor,
    Node,
    String,
    as_int,
    as_string,
    get,
    get_child_value,
    unmarshal_all,
)
from kdl_document.debug import print_document
from kdl_document.events import dumps_events


@dataclass
class Host:
    """One ``host`` node of the inventory."""

    name: str = ""
    user: str = ""
    hostname: str = ""
    port: int = 0

    def marshal_kdl(self) -> Node:
        node = Node("host").add_argument(String(self.name))
        node.add_kv("user", self.user)
        node.add_kv("hostname", self.hostname)
        node.add_kv("port", self.port)
        return node

    def unmarshal_kdl(self, node: Node) -> None:
        self.name = get(node, 0, as_string)
        self.user = get_child_value(node, "user", as_string)
        self.hostname = get_child_value(node, "hostname", as_string)
        self.port = get_child_value(node, "port", as_int)


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - kdl-document")
    print("=" * 30)

    # Step 1: Marshal records into a document
    print("\nStep 1: Marshalling records")
    print("-" * 30)

    document = Document().marshal_nodes(
        Host("example1", "root", "example.com", 22),
        Host("example2", "http", "example.org", 2022),
    )
    print(f"Created document with {document.node_count} nodes")

    # Step 2: Emit canonical KDL text
    print("\nStep 2: Canonical KDL")
    print("-" * 30)

    processor = KDLProcessor()
    print(processor.emit(document), end="")

    print("\nSame document as KDL v1:")
    print(KDLProcessor(KDLConfig.kdl_v1()).emit(document), end="")

    # Step 3: Debug rendering
    print("\nStep 3: S-expression")
    print("-" * 30)
    print(print_document(document))

    # Step 4: Round trip through the event stream
    print("\nStep 4: Event round trip")
    print("-" * 30)

    event_text = dumps_events(processor.flatten(document))
    rebuilt = processor.build(event_text)
    print(f"{len(event_text.splitlines())} events, rebuilt {rebuilt.node_count} nodes")

    # Step 5: Unmarshal the records again
    print("\nStep 5: Unmarshalling")
    print("-" * 30)

    for host in unmarshal_all(Host, rebuilt.nodes):
        print(f"host {host.name}: {host.user}@{host.hostname}:{host.port}")

    stats = processor.statistics
    print(f"\n{stats['successful_operations']}/{stats['total_operations']} operations succeeded")


if __name__ == "__main__":
    quick_start_example()
