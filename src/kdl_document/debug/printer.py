"""S-expression rendering of document trees for debugging and test fixtures.

Example output::

    (document
      (node "host"
        (type "server")
        (argument (string "example1"))
        (property "port" (integer 22))))

Properties are listed in ``property_order`` (insertion order), unlike the
canonical emitter which sorts them.
"""

from typing import List

from kdl_document.tree import Document, Node
from kdl_document.values import (
    BigFloat,
    BigInt,
    Boolean,
    Float,
    Integer,
    Null,
    String,
    Value,
)


class SExpressionPrinter:
    """Accumulates an indented s-expression rendering."""

    INDENT = "  "

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._indent = 0
        self._at_line_start = False

    def getvalue(self) -> str:
        return "".join(self._parts)

    def _write(self, text: str) -> None:
        lines = text.split("\n")
        for i, line in enumerate(lines):
            if self._at_line_start:
                self._parts.append(self.INDENT * self._indent)
                self._at_line_start = False
            self._parts.append(line)
            if i < len(lines) - 1:
                self._parts.append("\n")
                self._at_line_start = True

    def print_document(self, document: Document) -> None:
        self._write("(document")
        self._indent += 1
        for node in document.nodes:
            self.print_node(node)
        self._indent -= 1
        self._write(")")

    def print_node(self, node: Node) -> None:
        self._write(f'\n(node "{node.name}"')
        self._indent += 1
        if node.type_annotation is not None:
            self._write(f'\n(type "{node.type_annotation}")')
        for argument in node.arguments:
            self._write("\n(argument ")
            self.print_value(argument)
            self._write(")")
        for key in node.property_order:
            self._write(f'\n(property "{key}" ')
            self.print_value(node.properties[key])
            self._write(")")
        for child in node.children:
            self.print_node(child)
        self._indent -= 1
        self._write(")")

    def print_value(self, value: Value) -> None:
        if isinstance(value, String):
            self._write(f'(string "{value.value}"')
        elif isinstance(value, Integer):
            self._write(f"(integer {value.value}")
        elif isinstance(value, Float):
            self._write(f"(float {value.value:f}")
        elif isinstance(value, BigInt):
            self._write(f"(bigint {value.value}")
        elif isinstance(value, BigFloat):
            self._write(f"(bigfloat {value.value}")
        elif isinstance(value, Boolean):
            self._write(f"(boolean {value}")
        elif isinstance(value, Null):
            self._write("(null")
        else:
            self._write(f"(unknown {type(value).__name__}")

        annotation = getattr(value, "type_annotation", None)
        if annotation is not None:
            self._indent += 1
            self._write(f'\n(type "{annotation}")')
            self._indent -= 1
        self._write(")")


def print_document(document: Document) -> str:
    """Render ``document`` as an s-expression string."""
    printer = SExpressionPrinter()
    printer.print_document(document)
    return printer.getvalue()


def print_node(node: Node) -> str:
    """Render a single node (and its descendants) as an s-expression string."""
    printer = SExpressionPrinter()
    printer.print_node(node)
    return printer.getvalue().lstrip("\n")
