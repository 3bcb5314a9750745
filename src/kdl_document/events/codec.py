"""JSON-lines encoding of event streams.

Each line holds one event object::

    {"event": "start_node", "name": "host", "value": {"type": "null", "annotation": "t"}}
    {"event": "argument", "value": {"type": "string", "value": "example1"}}
    {"event": "end_node"}
    {"event": "eof"}

Big numbers are encoded as strings and number literals are decoded exactly,
falling back to :class:`BigInt` or :class:`BigFloat` when a 64-bit type
would truncate them. Decoding is lazy and acts as an event source: malformed
input yields a terminal ``PARSE_ERROR`` event rather than raising, exactly
like a text tokenizer reporting a syntax error.
"""

import json
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Iterator, Optional, TextIO

from kdl_document.shared.errors import RangeError
from kdl_document.values import (
    BigFloat,
    BigInt,
    Boolean,
    Float,
    Integer,
    Null,
    String,
    Value,
    ValueKind,
    new_float,
    new_integer,
)

from .model import Event, EventKind


class EventDecodeError(ValueError):
    """Raised when a JSON object does not describe a valid event."""


def value_to_dict(value: Value) -> Dict[str, Any]:
    """Encode a value as a JSON-compatible dictionary."""
    result: Dict[str, Any] = {"type": value.kind.value}
    if isinstance(value, (String, Integer, Boolean)):
        result["value"] = value.value
    elif isinstance(value, Float):
        # JSON has no inf/nan literals
        result["value"] = value.value if math.isfinite(value.value) else repr(value.value)
    elif isinstance(value, (BigInt, BigFloat)):
        result["value"] = str(value.value)
    elif not isinstance(value, Null):
        raise TypeError(f"unsupported value variant: {type(value).__name__}")
    if value.type_annotation is not None:
        result["annotation"] = value.type_annotation
    return result


def value_from_dict(data: Dict[str, Any]) -> Value:
    """Decode a value dictionary produced by :func:`value_to_dict`."""
    if not isinstance(data, dict):
        raise EventDecodeError("value must be an object")
    try:
        kind = ValueKind(data.get("type"))
    except ValueError:
        raise EventDecodeError(f"unknown value type: {data.get('type')!r}") from None

    annotation = data.get("annotation")
    if annotation is not None and not isinstance(annotation, str):
        raise EventDecodeError("type annotation must be a string")
    raw = data.get("value")
    try:
        if kind is ValueKind.NULL:
            return Null(annotation)
        if kind is ValueKind.STRING:
            return String(raw, annotation)
        if kind is ValueKind.BOOLEAN:
            return Boolean(raw, annotation)
        if kind is ValueKind.INTEGER:
            return new_integer(_integral(raw), annotation)
        if kind is ValueKind.BIG_INT:
            return BigInt(_integral(raw), annotation)
        if kind is ValueKind.FLOAT:
            if isinstance(raw, float):
                return Float(raw, annotation)
            # Narrowed only when a 64-bit float holds the literal exactly
            return new_float(_decimal(raw), annotation)
        return BigFloat(_decimal(raw), annotation)
    except (TypeError, ValueError, InvalidOperation, RangeError) as e:
        raise EventDecodeError(f"invalid {kind.value} value {raw!r}: {e}") from e


def _integral(raw: Any) -> int:
    if isinstance(raw, bool):
        raise TypeError("expected an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        return int(raw)
    raise TypeError(f"expected an integer, got {type(raw).__name__}")


def _decimal(raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise TypeError("expected a number")
    if isinstance(raw, (Decimal, int, str)):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))
    raise TypeError(f"expected a number, got {type(raw).__name__}")


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Encode an event as a JSON-compatible dictionary."""
    result: Dict[str, Any] = {"event": event.kind.value}
    if event.name:
        result["name"] = event.name
    if event.value is not None:
        result["value"] = value_to_dict(event.value)
    return result


def event_from_dict(data: Dict[str, Any]) -> Event:
    """Decode an event dictionary produced by :func:`event_to_dict`."""
    if not isinstance(data, dict):
        raise EventDecodeError("event must be an object")
    try:
        kind = EventKind(data.get("event"))
    except ValueError:
        raise EventDecodeError(f"unknown event kind: {data.get('event')!r}") from None

    name = data.get("name", "")
    if not isinstance(name, str):
        raise EventDecodeError("event name must be a string")

    value: Optional[Value] = None
    if data.get("value") is not None:
        value = value_from_dict(data["value"])
    return Event(kind, name, value)


def dumps_events(events: Iterable[Event]) -> str:
    """Encode events as JSON lines."""
    return "".join(json.dumps(event_to_dict(event)) + "\n" for event in events)


def write_events(events: Iterable[Event], stream: TextIO) -> int:
    """Write events to ``stream`` as JSON lines, returning the number written."""
    count = 0
    for event in events:
        stream.write(json.dumps(event_to_dict(event)))
        stream.write("\n")
        count += 1
    return count


def read_events(lines: Iterable[str]) -> Iterator[Event]:
    """Lazily decode JSON lines into events.

    Blank lines are skipped. The first undecodable line produces a
    ``PARSE_ERROR`` event naming the line number, after which decoding stops.
    """
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            event = event_from_dict(json.loads(line, parse_float=Decimal))
        except (json.JSONDecodeError, EventDecodeError) as e:
            yield Event.parse_error(f"line {line_number}: {e}")
            return
        yield event
        if event.kind is EventKind.PARSE_ERROR:
            return


def loads_events(text: str) -> Iterator[Event]:
    """Decode JSON lines held in a string."""
    return read_events(text.splitlines())