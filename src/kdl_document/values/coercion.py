"""Typed extraction of Python values from KDL values.

Every extractor takes a single :data:`Value` and either returns the matching
Python value or raises. The error semantics are uniform:

* :class:`KindMismatchError` when the variant does not match the extraction;
* :class:`RangeError` when an integer does not fit the requested width;
* :class:`PrecisionLossError` when a big float narrows inexactly (the
  best-effort float is attached to the error).

Extractors are plain functions so they can be passed to
:func:`kdl_document.tree.accessors.get` and friends.
"""

import sys
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, TypeVar

from kdl_document.shared.errors import (
    KindMismatchError,
    PrecisionLossError,
    RangeError,
)

from .model import (
    INT64_MAX,
    INT64_MIN,
    BigFloat,
    BigInt,
    Boolean,
    Float,
    Integer,
    Null,
    String,
    Value,
)

T = TypeVar("T")

Extractor = Callable[[Value], T]

# Host machine-integer width
HOST_INT_MIN = -sys.maxsize - 1
HOST_INT_MAX = sys.maxsize


def _kind_name(value: Value) -> str:
    kind = getattr(value, "kind", None)
    return kind.value if kind is not None else type(value).__name__


def as_string(value: Value) -> str:
    """Return the underlying str of a :class:`String`."""
    if isinstance(value, String):
        return value.value
    raise KindMismatchError(f"value is not a string (got {_kind_name(value)})")


def as_int64(value: Value) -> int:
    """Return an integer value that fits in a signed 64-bit integer."""
    if isinstance(value, Integer):
        return value.value
    if isinstance(value, BigInt):
        if not INT64_MIN <= value.value <= INT64_MAX:
            raise RangeError(f"big integer {value.value} cannot be represented as int64")
        return value.value
    raise KindMismatchError(f"value is not an integer (got {_kind_name(value)})")


def as_int(value: Value) -> int:
    """Return an integer value range-checked against the host integer width."""
    result = as_int64(value)
    if not HOST_INT_MIN <= result <= HOST_INT_MAX:
        raise RangeError(f"integer {result} cannot be represented as a machine int")
    return result


def as_float64(value: Value) -> float:
    """Return a float value, narrowing a :class:`BigFloat` if needed.

    Raises:
        PrecisionLossError: If a big float is not exactly representable. The
            closest float is available as ``error.value``.
    """
    if isinstance(value, Float):
        return value.value
    if isinstance(value, BigFloat):
        narrowed = float(value.value)
        if value.value.is_finite() and Decimal(narrowed) != value.value:
            raise PrecisionLossError(
                f"big float {value.value} cannot be represented as float64",
                narrowed,
            )
        return narrowed
    raise KindMismatchError(f"value is not a float (got {_kind_name(value)})")


def as_big_integer(value: Value) -> int:
    """Return any integer value with arbitrary precision."""
    if isinstance(value, (BigInt, Integer)):
        return value.value
    raise KindMismatchError(f"value is not an integer (got {_kind_name(value)})")


def as_big_float(value: Value) -> Decimal:
    """Return any float value as an arbitrary precision :class:`~decimal.Decimal`."""
    if isinstance(value, BigFloat):
        return value.value
    if isinstance(value, Float):
        return Decimal(value.value)
    raise KindMismatchError(f"value is not a float (got {_kind_name(value)})")


def as_bool(value: Value) -> bool:
    """Return the underlying bool of a :class:`Boolean`."""
    if isinstance(value, Boolean):
        return value.value
    raise KindMismatchError(f"value is not a boolean (got {_kind_name(value)})")


def as_null(value: Value) -> Null:
    """Return the value itself if it is a :class:`Null`."""
    if isinstance(value, Null):
        return value
    raise KindMismatchError(f"value is not null (got {_kind_name(value)})")


def optional(extractor: Callable[[Value], T]) -> Callable[[Value], Optional[T]]:
    """Wrap ``extractor`` so that a :class:`Null` yields ``None``."""
    def _extract(value: Value) -> Optional[T]:
        if isinstance(value, Null):
            return None
        return extractor(value)

    return _extract


def cast_all(values: Iterable[Value], extractor: Callable[[Value], T]) -> List[T]:
    """Apply ``extractor`` to every value, failing on the first error.

    The raised error is the extractor's own error type, with a message naming
    the offending value.
    """
    results: List[T] = []
    for index, value in enumerate(values):
        try:
            results.append(extractor(value))
        except PrecisionLossError as e:
            raise PrecisionLossError(f"casting value {index} ({value}): {e}", e.value) from e
        except (KindMismatchError, RangeError) as e:
            raise type(e)(f"casting value {index} ({value}): {e}") from e
    return results
