"""Keyed access to node arguments, properties and single-argument children.

An ``int`` key addresses a positional argument and a ``str`` key addresses a
property. The extractor passed alongside (see :mod:`kdl_document.values.coercion`)
turns the located value into a Python value; its errors propagate unchanged.
"""

from typing import Any, Callable, TypeVar, Union

from kdl_document.shared.errors import InvalidIndexError, NotFoundError
from kdl_document.values import Null, Value, new_value

from .node import Node

T = TypeVar("T")

Key = Union[int, str]


def _check_key(key: Any) -> None:
    # bool subclasses int but is never a valid argument index
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise TypeError(f"unsupported key type {type(key).__name__}")


def get(node: Node, key: Key, extractor: Callable[[Value], T]) -> T:
    """Extract an argument (``int`` key) or property (``str`` key).

    Raises:
        NotFoundError: If the argument index or property is absent.
        InvalidIndexError: If an argument index is negative.
        TypeError: If ``key`` is neither ``int`` nor ``str``.
    """
    _check_key(key)

    if isinstance(key, str):
        if key not in node.properties:
            raise NotFoundError(f"property {key}: no such key")
        return extractor(node.properties[key])

    if key < 0:
        raise InvalidIndexError(f"invalid argument index {key}")
    if len(node.arguments) <= key:
        raise NotFoundError(f"argument at index {key}: no such key")
    return extractor(node.arguments[key])


def get_or_default(
    node: Node, key: Key, extractor: Callable[[Value], T], default: T
) -> T:
    """Like :func:`get`, but return ``default`` when the key is absent."""
    try:
        return get(node, key, extractor)
    except NotFoundError:
        return default


def get_child_value(node: Node, name: str, extractor: Callable[[Value], T]) -> T:
    """Extract the first argument of the first child named ``name``.

    Raises:
        NotFoundError: If no such child exists or it has no arguments.
    """
    child = node.get_child(name)
    if child is None:
        raise NotFoundError(f"child {name}: no such key")
    if not child.arguments:
        raise NotFoundError(f"child {name} argument 0: no such key")
    return extractor(child.arguments[0])


def set_value(node: Node, key: Key, value: Any) -> None:
    """Set an argument (``int`` key) or property (``str`` key).

    Setting an argument beyond the end pads the gap with :class:`Null`
    values. Setting a new property appends its key to ``property_order``; an
    existing key keeps its position. Raw Python values are wrapped with
    :func:`~kdl_document.values.new_value`.

    Raises:
        InvalidIndexError: If an argument index is negative.
        TypeError: If ``key`` is neither ``int`` nor ``str``.
    """
    _check_key(key)
    value = new_value(value)

    if isinstance(key, str):
        node.add_property(key, value)
        return

    if key < 0:
        raise InvalidIndexError(f"invalid argument index {key}")
    while len(node.arguments) <= key:
        node.arguments.append(Null())
    node.arguments[key] = value


set = set_value  # noqa: A001
