"""Event sinks: push interfaces that receive a flattened document.

:class:`RecordingSink` captures the :class:`Event` sequence so it can be fed
back into a tree builder. :class:`KdlTextSink` writes canonical KDL text.
"""

import math
import re
from typing import List, Optional, Protocol, TextIO

from kdl_document.shared.config import EmitterConfig, KdlVersion
from kdl_document.shared.errors import EmitError
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

from .model import Event


class EventSink(Protocol):
    """Receiver for a flattened document.

    ``start_children``/``finish_children`` bracket a node's child block; they
    are only called when the block is written.
    """

    def start_node(self, name: str, type_annotation: Optional[str] = None) -> None: ...

    def argument(self, value: Value) -> None: ...

    def property(self, name: str, value: Value) -> None: ...

    def start_children(self) -> None: ...

    def finish_children(self) -> None: ...

    def end_node(self) -> None: ...

    def end_document(self) -> None: ...


class RecordingSink:
    """Sink that records the event sequence, terminated by ``EOF``."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def start_node(self, name: str, type_annotation: Optional[str] = None) -> None:
        self.events.append(Event.start_node(name, type_annotation))

    def argument(self, value: Value) -> None:
        self.events.append(Event.argument(value))

    def property(self, name: str, value: Value) -> None:
        self.events.append(Event.property(name, value))

    def start_children(self) -> None:
        pass

    def finish_children(self) -> None:
        pass

    def end_node(self) -> None:
        self.events.append(Event.end_node())

    def end_document(self) -> None:
        self.events.append(Event.eof())


# Identifier characters that never need quoting in either KDL version
_BARE_IDENTIFIER = re.compile(r'^[^\s\\/(){}<>;\[\]=,"#0-9][^\s\\/(){}<>;\[\]=,"#]*$')
_NUMBER_LIKE = re.compile(r"^[+-]?\.?[0-9]")
_KEYWORDS = frozenset({"true", "false", "null", "inf", "-inf", "nan"})

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def quote_string(text: str) -> str:
    """Render ``text`` as a quoted, escaped KDL string."""
    parts = ['"']
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def format_identifier(text: str) -> str:
    """Render ``text`` bare when it is a valid identifier, quoted otherwise."""
    if (
        _BARE_IDENTIFIER.match(text)
        and not _NUMBER_LIKE.match(text)
        and text not in _KEYWORDS
    ):
        return text
    return quote_string(text)


def format_number_text(text: str, capital_e: bool = True, exponent_plus: bool = True) -> str:
    """Normalize a finite decimal literal.

    The result always carries a decimal point or an exponent, and the
    exponent marker and sign follow ``capital_e``/``exponent_plus``.
    """
    mantissa, marker, exponent = text.lower().partition("e")
    if not marker:
        if "." not in mantissa:
            mantissa += ".0"
        return mantissa

    sign = "-" if exponent.startswith("-") else ("+" if exponent_plus else "")
    digits = exponent.lstrip("+-").lstrip("0") or "0"
    return f"{mantissa}{'E' if capital_e else 'e'}{sign}{digits}"


class KdlTextSink:
    """Sink that writes canonical KDL text to ``stream``.

    Nodes are written one per line, children indented by
    ``EmitterConfig.indent`` spaces inside ``{``/``}``. Values use KDL v2
    keywords (``#true``, ``#null``, ``#inf``) or KDL v1 literals according to
    ``EmitterConfig.version``.
    """

    def __init__(self, stream: TextIO, config: Optional[EmitterConfig] = None) -> None:
        self.stream = stream
        self.config = config or EmitterConfig()
        self._depth = 0
        self._line: Optional[List[str]] = None
        self.nodes_written = 0

    def start_node(self, name: str, type_annotation: Optional[str] = None) -> None:
        if self._line is not None:
            raise EmitError("child node started before start_children")
        prefix = self._annotation(type_annotation)
        self._line = [" " * (self.config.indent * self._depth) + prefix + format_identifier(name)]

    def argument(self, value: Value) -> None:
        self._current_line("argument").append(self.format_value(value))

    def property(self, name: str, value: Value) -> None:
        self._current_line("property").append(
            f"{format_identifier(name)}={self.format_value(value)}"
        )

    def start_children(self) -> None:
        line = self._current_line("start_children")
        self.stream.write(" ".join(line) + " {\n")
        self._line = None
        self._depth += 1

    def finish_children(self) -> None:
        if self._line is not None or self._depth == 0:
            raise EmitError("finish_children without an open child block")
        self._depth -= 1
        self.stream.write(" " * (self.config.indent * self._depth) + "}\n")

    def end_node(self) -> None:
        if self._line is not None:
            self.stream.write(" ".join(self._line) + "\n")
            self._line = None
        self.nodes_written += 1

    def end_document(self) -> None:
        if self._line is not None or self._depth != 0:
            raise EmitError("document ended inside an open node")

    def format_value(self, value: Value) -> str:
        """Render a single value, including its type annotation."""
        return self._annotation(value.type_annotation) + self._format_bare_value(value)

    def _format_bare_value(self, value: Value) -> str:
        v1 = self.config.version is KdlVersion.V1
        if isinstance(value, String):
            return quote_string(value.value)
        if isinstance(value, Boolean):
            literal = "true" if value.value else "false"
            return literal if v1 else "#" + literal
        if isinstance(value, Null):
            return "null" if v1 else "#null"
        if isinstance(value, (Integer, BigInt)):
            return str(value.value)
        if isinstance(value, Float):
            if not math.isfinite(value.value):
                return self._non_finite(value.value)
            return self._format_number(repr(value.value))
        if isinstance(value, BigFloat):
            if not value.value.is_finite():
                return self._non_finite(float(value.value))
            return self._format_number(str(value.value))
        raise EmitError(f"unsupported value variant: {type(value).__name__}")

    def _format_number(self, text: str) -> str:
        return format_number_text(text, self.config.capital_e, self.config.exponent_plus)

    def _non_finite(self, number: float) -> str:
        if self.config.version is KdlVersion.V1:
            raise EmitError(f"KDL v1 cannot represent {number}")
        if math.isnan(number):
            return "#nan"
        return "#inf" if number > 0 else "#-inf"

    def _annotation(self, annotation: Optional[str]) -> str:
        if annotation is None:
            return ""
        return f"({format_identifier(annotation)})"

    def _current_line(self, operation: str) -> List[str]:
        if self._line is None:
            raise EmitError(f"{operation} outside of a node header")
        return self._line

