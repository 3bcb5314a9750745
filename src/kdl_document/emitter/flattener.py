"""Flattening of document trees into event sinks.

Nodes are written in pre-order. Arguments keep their order; properties are
written in lexicographic key order, which makes emission canonical regardless
of how the tree was assembled.
"""

from typing import Any, Callable, Optional

from kdl_document.events import EventSink
from kdl_document.shared import (
    EmitError,
    EmitterConfig,
    KDLError,
    ProcessingMetrics,
    get_logger,
)
from kdl_document.tree import Document, Node


class TreeEmitter:
    """Pushes documents and nodes into an :class:`EventSink`."""

    def __init__(
        self,
        sink: EventSink,
        config: Optional[EmitterConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree emitter.

        Args:
            sink: Receiver of the flattened events
            config: Emitter configuration, shared with text sinks
            correlation_id: Optional correlation ID for request tracking
        """
        self.sink = sink
        self.config = config or EmitterConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_emitter")
        self.metrics = ProcessingMetrics()

    def emit_document(self, document: Document) -> None:
        """Emit every top-level node followed by the end of the document.

        Raises:
            EmitError: If the sink fails; nothing further is emitted
        """
        self.metrics = ProcessingMetrics()
        self.logger.info(
            "Starting document emission",
            extra={"node_count": len(document.nodes)}
        )

        try:
            for node in document.nodes:
                self._emit_node(node, 0)
            self._call(self.sink.end_document)
        except KDLError as e:
            self.metrics.finish()
            self.logger.error(
                f"Document emission failed: {e}",
                extra={"error_type": type(e).__name__, **self.metrics.to_dict()}
            )
            raise

        self.metrics.finish()
        self.logger.info("Document emission completed", extra=self.metrics.to_dict())

    def emit_node(self, node: Node) -> None:
        """Emit a single node and its descendants, without ending the document."""
        self._emit_node(node, 0)

    def _emit_node(self, node: Node, depth: int) -> None:
        self.metrics.record_depth(depth)
        self._call(self.sink.start_node, node.name, node.type_annotation)

        for argument in node.arguments:
            self._call(self.sink.argument, argument)

        # property_order is left untouched
        for key in sorted(node.properties):
            self._call(self.sink.property, key, node.properties[key])

        if node.children or node.hints.emit_empty_children:
            self._call(self.sink.start_children)
            for child in node.children:
                self._emit_node(child, depth + 1)
            self._call(self.sink.finish_children)

        self._call(self.sink.end_node)
        self.metrics.nodes_processed += 1

    def _call(self, method: Callable[..., None], *args: Any) -> None:
        """Invoke a sink method, wrapping foreign failures in :class:`EmitError`."""
        try:
            method(*args)
        except KDLError:
            raise
        except Exception as e:
            raise EmitError(f"event sink failed in {method.__name__}: {e}") from e
        self.metrics.events_processed += 1


def flatten_to(sink: EventSink, document: Document,
               config: Optional[EmitterConfig] = None) -> None:
    """Emit ``document`` into ``sink`` with a one-off :class:`TreeEmitter`."""
    TreeEmitter(sink, config).emit_document(document)
