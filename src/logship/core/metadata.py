"""Structured log metadata as a recursive tagged union.

A metadata tree is built from four node kinds. Leaves are either ``Text``
or ``Described``; ``MetadataList`` and ``MetadataMap`` nest further nodes.
Nodes are frozen, so a tree never changes after it has been handed to a
handler.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Text:
    """A plain string value."""

    value: str


@dataclass(frozen=True)
class Described:
    """Any value that only has a canonical string description.

    The normalizer still recognizes numbers, dates and binary data here and
    gives them a structural JSON form.
    """

    value: Any


@dataclass(frozen=True)
class MetadataList:
    """An ordered sequence of metadata values."""

    items: tuple["MetadataValue", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class MetadataMap:
    """A mapping from string keys to metadata values.

    Entries are copied into a read-only mapping on construction.
    """

    entries: Mapping[str, "MetadataValue"] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))


MetadataValue = Text | Described | MetadataList | MetadataMap

_NODE_TYPES = (Text, Described, MetadataList, MetadataMap)


def to_metadata_value(obj: Any) -> MetadataValue:
    """Build a metadata tree from plain Python data.

    Existing nodes are returned as-is. Strings become ``Text``, lists and
    tuples become ``MetadataList``, mappings become ``MetadataMap`` with
    stringified keys, and every other value is wrapped in ``Described``.

    Args:
        obj: Value to convert.

    Returns:
        The equivalent MetadataValue.
    """
    if isinstance(obj, _NODE_TYPES):
        return obj
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, (list, tuple)):
        return MetadataList(tuple(to_metadata_value(item) for item in obj))
    if isinstance(obj, Mapping):
        return MetadataMap(
            {str(key): to_metadata_value(value) for key, value in obj.items()}
        )
    return Described(obj)


def to_metadata(values: Mapping[str, Any] | None) -> dict[str, MetadataValue]:
    """Convert a flat mapping of plain values into metadata entries."""
    if not values:
        return {}
    return {str(key): to_metadata_value(value) for key, value in values.items()}
