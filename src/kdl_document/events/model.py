"""Event model for streaming KDL documents.

An event source is any iterable of :class:`Event`. The grammar it must follow
is::

    document := node* EOF
    node     := START_NODE (ARGUMENT | PROPERTY)* node* END_NODE

``PARSE_ERROR`` may appear anywhere and is terminal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from kdl_document.shared.errors import ParseError
from kdl_document.values import Null, Value


class EventKind(Enum):
    """Kinds of events produced by an event source."""

    START_NODE = "start_node"
    ARGUMENT = "argument"
    PROPERTY = "property"
    END_NODE = "end_node"
    EOF = "eof"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Event:
    """A single grammar event.

    ``name`` carries the node name for ``START_NODE`` and the key for
    ``PROPERTY``. ``value`` carries the argument or property value; on
    ``START_NODE`` an annotated :class:`~kdl_document.values.Null` carries the
    node's type annotation. For ``PARSE_ERROR`` ``name`` holds the message.
    """

    kind: EventKind
    name: str = ""
    value: Optional[Value] = None

    def __str__(self) -> str:
        value = self.value.type_string() if self.value is not None else None
        return f"Event{{kind: {self.kind.value}, name: {self.name!r}, value: {value}}}"

    @classmethod
    def start_node(cls, name: str, type_annotation: Optional[str] = None) -> "Event":
        value = Null(type_annotation) if type_annotation is not None else None
        return cls(EventKind.START_NODE, name, value)

    @classmethod
    def argument(cls, value: Value) -> "Event":
        return cls(EventKind.ARGUMENT, "", value)

    @classmethod
    def property(cls, name: str, value: Value) -> "Event":
        return cls(EventKind.PROPERTY, name, value)

    @classmethod
    def end_node(cls) -> "Event":
        return cls(EventKind.END_NODE)

    @classmethod
    def eof(cls) -> "Event":
        return cls(EventKind.EOF)

    @classmethod
    def parse_error(cls, message: str) -> "Event":
        return cls(EventKind.PARSE_ERROR, message)


class EventCursor:
    """Single-event lookahead over an event source.

    Once ``EOF`` has been seen the cursor keeps returning it. A
    ``PARSE_ERROR`` event is turned into a :class:`ParseError` and every later
    pull fails as well. An underlying iterator that runs dry without ``EOF``
    leaves the cursor at ``None``.
    """

    def __init__(self, source: Iterable[Event]) -> None:
        self._iterator: Iterator[Event] = iter(source)
        self.current: Optional[Event] = None
        self.pulled = 0
        self._failed = False

    def advance(self) -> Optional[Event]:
        """Pull the next event and make it current."""
        if self._failed:
            raise ParseError("parse error already reached")
        if self.current is not None and self.current.kind is EventKind.EOF:
            return self.current

        event = next(self._iterator, None)
        if event is not None:
            self.pulled += 1
            if event.kind is EventKind.PARSE_ERROR:
                self._failed = True
                self.current = None
                raise ParseError(event.name or "event source reported a parse error")
        self.current = event
        return event
