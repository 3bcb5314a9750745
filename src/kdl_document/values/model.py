"""Value model for KDL documents.

A KDL value is one of a closed set of variants: :class:`String`,
:class:`Integer`, :class:`Float`, :class:`BigInt`, :class:`BigFloat`,
:class:`Boolean` or :class:`Null`. Every variant may carry an optional type
annotation, which is orthogonal to its kind. Values are frozen; use
:meth:`with_type_annotation` to derive an annotated copy.

Numbers that do not fit the 64-bit machine types are represented by
:class:`BigInt` and :class:`BigFloat` instead of being truncated.
"""

import json
import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union

from kdl_document.shared.errors import RangeError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Significant decimal digits a 64-bit float can round-trip
MAX_FLOAT_DIGITS = 17

_DECIMAL_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


class ValueKind(Enum):
    """Discriminator for the value variants."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BIG_INT = "bigint"
    BIG_FLOAT = "bigfloat"
    BOOLEAN = "boolean"
    NULL = "null"


def format_type_annotation(annotation: Optional[str]) -> str:
    """Render an annotation prefix such as ``(u8)``; empty when absent."""
    if annotation is None:
        return ""
    if annotation == "":
        return '("")'
    return f"({annotation})"


class _ValueMixin:
    """Behavior shared by every value variant."""

    kind: ValueKind
    type_annotation: Optional[str]

    def raw_value(self) -> Any:
        """Return the host-native form of the value."""
        return getattr(self, "value", None)

    def with_type_annotation(self, annotation: Optional[str]) -> "Value":
        """Return a copy of this value carrying ``annotation``."""
        return replace(self, type_annotation=annotation)

    def as_display_string(self) -> str:
        """Canonical textual rendering of the underlying value."""
        return str(self)

    def type_string(self) -> str:
        """Typed diagnostic rendering, e.g. ``(u8)integer(5)``."""
        return f"{format_type_annotation(self.type_annotation)}{self.kind.value}({self})"


@dataclass(frozen=True)
class String(_ValueMixin):
    """A KDL string."""

    value: str
    type_annotation: Optional[str] = None

    kind = ValueKind.STRING

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("String value must be a str")

    def __str__(self) -> str:
        return self.value

    def type_string(self) -> str:
        quoted = json.dumps(self.value, ensure_ascii=False)
        return f"{format_type_annotation(self.type_annotation)}string({quoted})"


@dataclass(frozen=True)
class Integer(_ValueMixin):
    """A KDL integer representable as a signed 64-bit integer.

    Use :func:`new_integer` to fall back to :class:`BigInt` automatically.
    """

    value: int
    type_annotation: Optional[str] = None

    kind = ValueKind.INTEGER

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Integer value must be an int")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise RangeError(f"integer {self.value} cannot be represented as int64")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Float(_ValueMixin):
    """A KDL floating-point number representable as a 64-bit float."""

    value: float
    type_annotation: Optional[str] = None

    kind = ValueKind.FLOAT

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError("Float value must be a float")
        if isinstance(self.value, int):
            object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return f"{self.value:f}"


@dataclass(frozen=True)
class BigInt(_ValueMixin):
    """An arbitrary-precision KDL integer."""

    value: int
    type_annotation: Optional[str] = None

    kind = ValueKind.BIG_INT

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("BigInt value must be an int")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BigFloat(_ValueMixin):
    """An arbitrary-precision KDL floating-point number."""

    value: Decimal
    type_annotation: Optional[str] = None

    kind = ValueKind.BIG_FLOAT

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise TypeError("BigFloat value must be a Decimal")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(_ValueMixin):
    """A KDL boolean."""

    value: bool
    type_annotation: Optional[str] = None

    kind = ValueKind.BOOLEAN

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError("Boolean value must be a bool")

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Null(_ValueMixin):
    """A KDL null. An annotated null on a node-start event carries the node's type."""

    type_annotation: Optional[str] = None

    kind = ValueKind.NULL

    def __str__(self) -> str:
        return "null"

    def type_string(self) -> str:
        return f"{format_type_annotation(self.type_annotation)}null"


Value = Union[String, Integer, Float, BigInt, BigFloat, Boolean, Null]

VALUE_TYPES = (String, Integer, Float, BigInt, BigFloat, Boolean, Null)


def is_value(obj: Any) -> bool:
    """Check whether ``obj`` is one of the value variants."""
    return isinstance(obj, VALUE_TYPES)


def new_integer(value: int, type_annotation: Optional[str] = None) -> Value:
    """Wrap an int, falling back to :class:`BigInt` outside the int64 range."""
    if INT64_MIN <= value <= INT64_MAX:
        return Integer(value, type_annotation)
    return BigInt(value, type_annotation)


def new_float(value: Decimal, type_annotation: Optional[str] = None) -> Value:
    """Wrap a decimal, falling back to :class:`BigFloat` when a float would lose it.

    A float is used unless the magnitude overflows or underflows a 64-bit
    float, or the literal carries more significant digits than a float keeps.
    """
    if not value.is_finite():
        return Float(float(value), type_annotation)

    narrowed = float(value)
    digits = len(value.normalize().as_tuple().digits)
    if math.isinf(narrowed) or (narrowed == 0.0 and value != 0) or digits > MAX_FLOAT_DIGITS:
        return BigFloat(value, type_annotation)
    return Float(narrowed, type_annotation)


def number_from_literal(text: str, type_annotation: Optional[str] = None) -> Value:
    """Parse a numeric literal into the narrowest variant that holds it exactly.

    Accepts decimal integers and floats, ``0x``/``0o``/``0b`` prefixed
    integers and ``_`` digit separators.

    Raises:
        ValueError: If ``text`` is not a numeric literal.
    """
    cleaned = text.replace("_", "")
    sign = ""
    body = cleaned
    if body[:1] in ("+", "-"):
        sign, body = body[0], body[1:]

    radix = _RADIX_PREFIXES.get(body[:2].lower())
    if radix is not None:
        try:
            return new_integer(int(sign + body[2:], radix), type_annotation)
        except ValueError:
            raise ValueError(f"invalid numeric literal: {text!r}") from None

    if _DECIMAL_INTEGER.match(cleaned):
        return new_integer(int(cleaned), type_annotation)

    try:
        decimal_value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"invalid numeric literal: {text!r}") from None
    return new_float(decimal_value, type_annotation)


def new_value(raw: Any, type_annotation: Optional[str] = None) -> Value:
    """Wrap a raw Python value in its corresponding KDL value variant.

    Existing values are returned unchanged unless ``type_annotation`` is
    given, in which case an annotated copy is returned.

    Raises:
        TypeError: If ``raw`` has no KDL representation.
    """
    if is_value(raw):
        if type_annotation is not None:
            return raw.with_type_annotation(type_annotation)
        return raw
    # bool MUST be checked before int: bool subclasses int
    if isinstance(raw, bool):
        return Boolean(raw, type_annotation)
    if isinstance(raw, str):
        return String(raw, type_annotation)
    if isinstance(raw, int):
        return new_integer(raw, type_annotation)
    if isinstance(raw, float):
        return Float(raw, type_annotation)
    if isinstance(raw, Decimal):
        return BigFloat(raw, type_annotation)
    if raw is None:
        return Null(type_annotation)
    raise TypeError(f"unsupported type for KDL value: {type(raw).__name__}")
