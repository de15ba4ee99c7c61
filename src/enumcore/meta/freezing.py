"""Deep freezing utilities.

This module turns values built from the builtin containers into read-only renditions, so that
the attributes attached to enum constants cannot be mutated through a shared reference.
"""
from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, TypeAlias

from ..abstract.exceptions.traced_exceptions import TracedException

Frozen: TypeAlias = Any


class FreezingError(TracedException, ValueError):
    """Signals a value that has no immutable rendition."""


def freeze(value: Any) -> Frozen:
    """Recursively convert a value into an immutable rendition.

    - Mapping -> MappingProxyType over a private dict of frozen values.
    - list, tuple -> tuple of frozen items.
    - namedtuple -> the same namedtuple type holding frozen items. Other tuple subclasses
      are returned unchanged.
    - set, frozenset -> frozenset of the items (items of a set are already hashable).
    - bytearray -> bytes.
    - anything else is returned unchanged. It is the user's responsibility to use
      immutable types for custom objects.

    Args:
        value (Any): The value to freeze.

    Raises:
        FreezingError: Raised when a container holds itself, directly or not.

    Returns:
        Frozen: The immutable rendition of the value.
    """
    return _freeze(value, set())


def _freeze(value: Any, visiting: set[int]) -> Frozen:
    if isinstance(value, Set):
        return frozenset(value)
    if isinstance(value, bytearray):
        return bytes(value)
    is_namedtuple = isinstance(value, tuple) and hasattr(type(value), "_make")
    if not (isinstance(value, (Mapping, list)) or type(value) is tuple or is_namedtuple):
        return value

    if id(value) in visiting:
        raise FreezingError(
            f"Cannot freeze a self-referential {type(value).__name__}."
        )
    visiting.add(id(value))
    try:
        if isinstance(value, Mapping):
            return MappingProxyType({k: _freeze(v, visiting) for k, v in value.items()})
        items = [_freeze(v, visiting) for v in value]
        return type(value)._make(items) if is_namedtuple else tuple(items)
    finally:
        visiting.discard(id(value))


def is_frozen(value: Any) -> bool:
    """Check whether a value is made only of immutable builtin containers.

    Scalars and custom objects are considered frozen, only the builtin mutable
    containers are not.

    Args:
        value (Any): The value to check.

    Returns:
        bool: Whether the value cannot be mutated through its containers.
    """
    return _is_frozen(value, set())


def _is_frozen(value: Any, visiting: set[int]) -> bool:
    if isinstance(value, (dict, list, set, bytearray)):
        return False
    if not isinstance(value, (MappingProxyType, tuple, frozenset)):
        return True
    # a read-only view can only loop back through a mutable container
    if id(value) in visiting:
        return False
    visiting.add(id(value))
    try:
        items = value.values() if isinstance(value, MappingProxyType) else value
        return all(_is_frozen(v, visiting) for v in items)
    finally:
        visiting.discard(id(value))
