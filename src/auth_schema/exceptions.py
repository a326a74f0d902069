"""Exceptions raised while defining or configuring the auth keyspace."""

from __future__ import annotations


class SchemaDefinitionError(Exception):
    """A declared table cannot be turned into a table descriptor.

    Fatal for node startup: there is no fallback schema.
    """

    def __init__(self, message: str, table_name: str | None = None) -> None:
        super().__init__(message)
        self.table_name = table_name

    def __str__(self) -> str:
        message = super().__str__()
        if self.table_name:
            return f"{self.table_name}: {message}"
        return message


class SchemaParseError(SchemaDefinitionError):
    """Schema text is not a valid CREATE TABLE statement."""

    def __init__(
        self,
        message: str,
        table_name: str | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(message, table_name)
        self.position = position

    def __str__(self) -> str:
        text = super().__str__()
        if self.position is not None:
            return f"{text} (at offset {self.position})"
        return text


class ConfigurationDefaultError(Exception):
    """A configured default is missing or unusable."""
