"""Enumerations used throughout the auth schema package."""

from enum import StrEnum


class ReplicationStrategy(StrEnum):
    """Replication strategy class for a keyspace."""

    SIMPLE = "SimpleStrategy"


class CompressionClass(StrEnum):
    """SSTable compressor used by table options."""

    LZ4 = "LZ4Compressor"


class NativeType(StrEnum):
    """Scalar CQL types accepted in table definitions."""

    ASCII = "ascii"
    BIGINT = "bigint"
    BLOB = "blob"
    BOOLEAN = "boolean"
    DATE = "date"
    DECIMAL = "decimal"
    DOUBLE = "double"
    FLOAT = "float"
    INET = "inet"
    INT = "int"
    SMALLINT = "smallint"
    TEXT = "text"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMEUUID = "timeuuid"
    TINYINT = "tinyint"
    UUID = "uuid"
    VARCHAR = "varchar"
    VARINT = "varint"

    @property
    def canonical(self) -> "NativeType":
        """Collapse aliases onto the type the storage engine records."""
        aliases = {
            NativeType.VARCHAR: NativeType.TEXT,
        }
        return aliases.get(self, self)
