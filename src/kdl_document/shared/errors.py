"""Exception hierarchy for KDL document processing.

Every failure raised by the value, tree, builder, emitter and marshal layers
derives from :class:`KDLError` so callers can treat "this document operation
did not complete" uniformly, while still distinguishing the specific kinds.
"""

from typing import Optional


class KDLError(Exception):
    """Base exception for all KDL document errors."""


class NotFoundError(KDLError):
    """Raised when an argument index, property or child name is absent."""


class KindMismatchError(KDLError):
    """Raised when a value's variant does not match the requested extraction."""


class RangeError(KDLError):
    """Raised when an integer cannot be narrowed to the requested width."""


class PrecisionLossError(KDLError):
    """Raised when a big float cannot be represented exactly as a float.

    The best-effort narrowed value is kept in ``value`` so callers that can
    tolerate the loss may still use it.
    """

    def __init__(self, message: str, value: float) -> None:
        super().__init__(message)
        self.value = value


class InvalidIndexError(KDLError):
    """Raised when a negative positional key is used."""


class StructuralError(KDLError):
    """Raised when an event sequence violates the document grammar."""


class ParseError(KDLError):
    """Raised when the event source reports a lexical or syntax failure."""


class EmitError(KDLError):
    """Raised when an event sink fails while a document is being emitted."""


class MarshalError(KDLError):
    """Raised when a batch marshal or unmarshal operation fails."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        super().__init__(message)
        self.index = index


def is_not_found(error: Optional[BaseException]) -> bool:
    """Check whether ``error`` is, or was caused by, a :class:`NotFoundError`.

    Walks the ``__cause__``/``__context__`` chain so wrapped errors (for
    example a :class:`MarshalError` raised from a missing key) still report
    as not-found.
    """
    seen = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, NotFoundError):
            return True
        seen.add(id(error))
        error = error.__cause__ or error.__context__
    return False
