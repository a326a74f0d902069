"""Domain models for the auth keyspace (structural schema, table options, keyspace)."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType

from src.auth_schema.identifiers import QualifiedTableName, format_qualified_table_name
from src.auth_schema.types import DataType
from src.constants import (
    COMPRESSION_CHUNK_LENGTH_KB,
    GC_GRACE_SECONDS,
    MEMTABLE_FLUSH_PERIOD_MS,
)
from src.enums import CompressionClass, ReplicationStrategy


@dataclass(frozen=True)
class Column:
    """Declarative CQL column definition."""

    name: str
    data_type: DataType


@dataclass(frozen=True)
class PrimaryKey:
    """Partition key columns followed by clustering columns, both in declared order."""

    partition_key: tuple[str, ...]
    clustering_columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.partition_key:
            raise ValueError("A primary key needs at least one partition key column.")
        object.__setattr__(self, "partition_key", tuple(self.partition_key))
        object.__setattr__(self, "clustering_columns", tuple(self.clustering_columns))

    @property
    def columns(self) -> tuple[str, ...]:
        """All key columns: partition key first, then clustering."""
        return self.partition_key + self.clustering_columns


@dataclass(frozen=True)
class TableStructure:
    """
    Structural description of one table as produced by the schema parser.

    `if_not_exists` records how the source statement was written; it is not
    part of the structure and is ignored by `same_shape`.
    """

    keyspace: str
    name: str
    columns: tuple[Column, ...]
    primary_key: PrimaryKey
    if_not_exists: bool = False

    @property
    def qualified_name(self) -> QualifiedTableName:
        return QualifiedTableName(self.keyspace, self.name)

    @property
    def column_names(self) -> tuple[str, ...]:
        """Column names in declared order."""
        return tuple(column.name for column in self.columns)

    def column(self, name: str) -> Column:
        """Return the column called `name`; KeyError if absent."""
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    def same_shape(self, other: TableStructure) -> bool:
        """True when both structures have the same columns and the same key."""
        return self.columns == other.columns and self.primary_key == other.primary_key


@dataclass(frozen=True)
class TableParams:
    """Table options applied to every auth table."""

    comment: str = ""
    gc_grace_seconds: int = GC_GRACE_SECONDS
    compression_class: CompressionClass = CompressionClass.LZ4
    compression_chunk_length_kb: int = COMPRESSION_CHUNK_LENGTH_KB
    memtable_flush_period_ms: int = MEMTABLE_FLUSH_PERIOD_MS

    @property
    def compression(self) -> Mapping[str, str]:
        """Compression sub-options as the storage engine expects them (read-only)."""
        return MappingProxyType(
            {
                "class": self.compression_class.value,
                "chunk_length_in_kb": str(self.compression_chunk_length_kb),
            }
        )


@dataclass(frozen=True)
class TableDescriptor:
    """
    A fully built auth table: structure, options, and its stable id.

    `id` depends only on (keyspace, name). Editing the column layout keeps the
    id and is surfaced through the schema generation instead.
    """

    name: str
    description: str
    structure: TableStructure
    id: uuid.UUID
    params: TableParams
    schema_text: str

    # --------- Convenience properties ---------

    @property
    def keyspace(self) -> str:
        return self.structure.keyspace

    @property
    def full_name(self) -> str:
        """Unquoted full name: 'keyspace.table'."""
        return format_qualified_table_name(self.structure.qualified_name)

    @property
    def retention(self) -> timedelta:
        """Tombstone retention window (gc grace)."""
        return timedelta(seconds=self.params.gc_grace_seconds)

    @property
    def columns(self) -> tuple[Column, ...]:
        return self.structure.columns

    @property
    def column_names(self) -> tuple[str, ...]:
        return self.structure.column_names

    @property
    def primary_key(self) -> PrimaryKey:
        return self.structure.primary_key

    @property
    def partition_key(self) -> tuple[str, ...]:
        return self.structure.primary_key.partition_key

    @property
    def clustering_columns(self) -> tuple[str, ...]:
        return self.structure.primary_key.clustering_columns


@dataclass(frozen=True)
class ReplicationParams:
    """Keyspace replication policy."""

    replication_factor: int
    strategy: ReplicationStrategy = ReplicationStrategy.SIMPLE

    def __post_init__(self) -> None:
        if self.replication_factor < 1:
            raise ValueError(
                f"Replication factor must be at least 1, got {self.replication_factor}."
            )

    def as_options(self) -> dict[str, str]:
        """Replication map with string values, e.g. {'class': ..., 'replication_factor': '3'}."""
        return {
            "class": self.strategy.value,
            "replication_factor": str(self.replication_factor),
        }


@dataclass(frozen=True)
class KeyspaceDefinition:
    """The assembled auth keyspace: name, replication, and every table in order."""

    name: str
    replication: ReplicationParams
    tables: tuple[TableDescriptor, ...] = field(default_factory=tuple)
    durable_writes: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "tables", tuple(self.tables))
        names = [t.name for t in self.tables]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate table names in keyspace {self.name}: {duplicates}")

    @property
    def replication_factor(self) -> int:
        return self.replication.replication_factor

    @property
    def table_names(self) -> frozenset[str]:
        return frozenset(t.name for t in self.tables)

    def table(self, name: str) -> TableDescriptor:
        """Return the table called `name`; KeyError if it is not part of the keyspace."""
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(name)
