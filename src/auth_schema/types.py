"""
Structured CQL data types.

Column types are kept as small frozen dataclasses and only rendered to CQL
text at the boundary via ``.cql()``. Equality is structural, so two parses of
``frozen<set<text>>`` compare equal regardless of whitespace or case.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from src.enums import NativeType


@dataclass(frozen=True)
class Native:
    """A scalar type such as ``text`` or ``inet``."""

    name: NativeType

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", NativeType(self.name).canonical)

    def cql(self) -> str:
        return self.name.value


@dataclass(frozen=True)
class SetType:
    element: DataType

    def cql(self) -> str:
        return f"set<{self.element.cql()}>"


@dataclass(frozen=True)
class ListType:
    element: DataType

    def cql(self) -> str:
        return f"list<{self.element.cql()}>"


@dataclass(frozen=True)
class MapType:
    key: DataType
    value: DataType

    def cql(self) -> str:
        return f"map<{self.key.cql()}, {self.value.cql()}>"


@dataclass(frozen=True)
class TupleType:
    elements: tuple[DataType, ...]

    def __post_init__(self) -> None:
        if not self.elements:
            raise ValueError("A tuple type needs at least one element.")
        object.__setattr__(self, "elements", tuple(self.elements))

    def cql(self) -> str:
        return f"tuple<{', '.join(e.cql() for e in self.elements)}>"


@dataclass(frozen=True)
class FrozenType:
    """Serialize the inner value as a single blob (required for key columns)."""

    inner: DataType

    def cql(self) -> str:
        return f"frozen<{self.inner.cql()}>"


DataType: TypeAlias = Native | SetType | ListType | MapType | TupleType | FrozenType

COLLECTION_TYPES = (SetType, ListType, MapType)


def is_multi_cell(data_type: DataType) -> bool:
    """True for non-frozen collections, which cannot be part of a primary key."""
    return isinstance(data_type, COLLECTION_TYPES)


# Shorthands used by declarations and tests.
TEXT = Native(NativeType.TEXT)
BOOLEAN = Native(NativeType.BOOLEAN)
DATE = Native(NativeType.DATE)
INET = Native(NativeType.INET)
SMALLINT = Native(NativeType.SMALLINT)
