"""Tree building from event streams.

The builder consumes a single-pass event source and assembles a
:class:`~kdl_document.tree.node.Document`. It follows the grammar::

    document := node* EOF
    node     := START_NODE (ARGUMENT | PROPERTY)* node* END_NODE

Any deviation aborts the build with :class:`StructuralError`; a
``PARSE_ERROR`` event aborts it with :class:`ParseError`. No partial tree is
ever returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from kdl_document.events import Event, EventCursor, EventKind
from kdl_document.shared import (
    BuilderConfig,
    KDLError,
    ProcessingMetrics,
    StructuralError,
    get_logger,
)
from kdl_document.values import Null, Value

from .node import Document, Node


@dataclass
class _OpenNode:
    """A node whose ``END_NODE`` has not been seen yet."""

    node: Node
    # Once a child has started, arguments and properties are no longer accepted
    in_children: bool = False
    children: List[Node] = field(default_factory=list)


def _describe(event: Optional[Event]) -> str:
    if event is None:
        return "end of event stream"
    return event.kind.value


class TreeBuilder:
    """Builds document trees from event sources.

    A builder may be reused for several documents, but not concurrently;
    ``metrics`` describes the most recent build.
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Builder configuration (defaults to ``BuilderConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or BuilderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self.metrics = ProcessingMetrics()

        self._cursor: Optional[EventCursor] = None
        self._tracing = False

    def build(self, source: Iterable[Event]) -> Document:
        """Build a document from an event source.

        Args:
            source: Any iterable of events, consumed lazily

        Returns:
            The assembled document

        Raises:
            StructuralError: If the events violate the document grammar
            ParseError: If the source reports a parse error
        """
        self.metrics = ProcessingMetrics()
        self._cursor = EventCursor(source)
        self._tracing = (
            self.config.trace_events and self.logger.is_enabled_for(logging.DEBUG)
        )

        self.logger.info(
            "Starting tree building",
            extra={"max_depth": self.config.max_depth}
        )

        try:
            document = self._build_document()
        except KDLError as e:
            self._sync_metrics()
            self.logger.error(
                f"Tree building failed: {e}",
                extra={"error_type": type(e).__name__, **self.metrics.to_dict()}
            )
            raise
        finally:
            self._cursor = None

        self.logger.info("Tree building completed", extra=self.metrics.to_dict())
        return document

    def _sync_metrics(self) -> None:
        if self._cursor is not None:
            self.metrics.events_processed = self._cursor.pulled
        self.metrics.finish()

    def _build_document(self) -> Document:
        document = Document()
        stack: List[_OpenNode] = []

        self._next()
        while True:
            event = self._current()

            if not stack:
                if event is not None and event.kind is EventKind.START_NODE:
                    stack.append(self._open_node(depth=0))
                    continue
                self._accept(EventKind.EOF)
                break

            frame = stack[-1]
            kind = event.kind if event is not None else None

            if kind is EventKind.ARGUMENT and not frame.in_children:
                frame.node.add_argument(self._value_of(self._accept(kind)))
            elif kind is EventKind.PROPERTY and not frame.in_children:
                accepted = self._accept(kind)
                frame.node.add_property(accepted.name, self._value_of(accepted))
            elif kind is EventKind.START_NODE:
                frame.in_children = True
                stack.append(self._open_node(depth=len(stack)))
            else:
                self._accept(EventKind.END_NODE)
                stack.pop()
                node = frame.node
                node.add_children(*frame.children)
                if stack:
                    stack[-1].children.append(node)
                else:
                    document.add_node(node)
                self.metrics.nodes_processed += 1

        self._sync_metrics()
        return document

    def _open_node(self, depth: int) -> _OpenNode:
        if depth >= self.config.max_depth:
            raise StructuralError(
                f"maximum nesting depth {self.config.max_depth} exceeded"
            )
        event = self._accept(EventKind.START_NODE)
        self.metrics.record_depth(depth)
        return _OpenNode(Node(event.name, type_annotation=self._type_annotation(event)))

    @staticmethod
    def _type_annotation(event: Event) -> Optional[str]:
        if event.value is None:
            return None
        if isinstance(event.value, Null):
            return event.value.type_annotation
        raise StructuralError("invalid type annotation")

    @staticmethod
    def _value_of(event: Event) -> Value:
        if event.value is None:
            raise StructuralError(f"{event.kind.value} event without a value")
        return event.value

    def _active_cursor(self) -> EventCursor:
        if self._cursor is None:
            raise StructuralError("no build in progress")
        return self._cursor

    def _current(self) -> Optional[Event]:
        return self._active_cursor().current

    def _next(self) -> Optional[Event]:
        cursor = self._active_cursor()
        event = cursor.advance()
        if self._tracing:
            self.logger.debug(f"next: {event}", extra={"event_index": cursor.pulled})
        return event

    def _accept(self, kind: EventKind) -> Event:
        """Require the current event to be of ``kind`` and move past it."""
        event = self._current()
        if event is None or event.kind is not kind:
            raise StructuralError(f"expected {kind.value}, got {_describe(event)}")
        if self._tracing:
            self.logger.debug(f"accept: {event}")
        if kind is not EventKind.EOF:
            self._next()
        return event
