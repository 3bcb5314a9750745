"""Event streams for KDL documents.

Key Components:
    Event, EventKind: Grammar events shared by sources and sinks
    EventCursor: Single-event lookahead over an event source
    RecordingSink, KdlTextSink: Concrete event sinks
    read_events, write_events: JSON-lines event codec
"""

from .codec import (
    EventDecodeError,
    dumps_events,
    event_from_dict,
    event_to_dict,
    loads_events,
    read_events,
    value_from_dict,
    value_to_dict,
    write_events,
)
from .model import Event, EventCursor, EventKind
from .sink import (
    EventSink,
    KdlTextSink,
    RecordingSink,
    format_identifier,
    format_number_text,
    quote_string,
)

__all__ = [
    "Event",
    "EventCursor",
    "EventDecodeError",
    "EventKind",
    "EventSink",
    "KdlTextSink",
    "RecordingSink",
    "dumps_events",
    "event_from_dict",
    "event_to_dict",
    "format_identifier",
    "format_number_text",
    "loads_events",
    "quote_string",
    "read_events",
    "value_from_dict",
    "value_to_dict",
    "write_events",
]
