"""
Table descriptor builder: declared schema text → immutable TableDescriptor.

The id is derived from (keyspace, name) only, so editing a table's columns
keeps its id while renaming it yields a new one. Shape changes are tracked by
the schema generation, not by identity churn.
"""

from __future__ import annotations

from src.auth_schema.exceptions import SchemaDefinitionError, SchemaParseError
from src.auth_schema.identifiers import build_table_id, validate_table_name
from src.auth_schema.models import TableDescriptor, TableParams
from src.auth_schema.parser import parse_create_table
from src.auth_schema.tables import TableDefinition
from src.constants import AUTH_KEYSPACE_NAME, GC_GRACE_SECONDS
from src.logger import LOGGER


def _render_schema_text(name: str, schema_text: str) -> str:
    """Substitute the table name into a ``%s`` template; plain text passes through."""
    if "%s" in schema_text:
        return schema_text.replace("%s", name, 1)
    return schema_text


def build_table(
    name: str,
    description: str,
    schema_text: str,
    keyspace: str = AUTH_KEYSPACE_NAME,
) -> TableDescriptor:
    """
    Build the descriptor for one auth table.

    Raises:
        SchemaDefinitionError: if `name` is not a legal table name, `schema_text`
            is empty or does not parse, or the statement names a different table.
    """
    try:
        validate_table_name(name)
    except ValueError as exc:
        raise SchemaDefinitionError(str(exc), table_name=name or None) from exc

    if not schema_text or not schema_text.strip():
        raise SchemaDefinitionError("Schema text is empty", table_name=name)

    text = _render_schema_text(name, schema_text)
    try:
        structure = parse_create_table(text, keyspace)
    except SchemaParseError as exc:
        raise SchemaParseError(exc.args[0], table_name=name, position=exc.position) from exc

    if structure.name != name:
        raise SchemaDefinitionError(
            f"Schema text defines table {structure.name!r}", table_name=name
        )

    descriptor = TableDescriptor(
        name=name,
        description=description,
        structure=structure,
        id=build_table_id(keyspace, name),
        params=TableParams(comment=description, gc_grace_seconds=GC_GRACE_SECONDS),
        schema_text=text,
    )
    LOGGER.debug("Built table %s (id=%s)", descriptor.full_name, descriptor.id)
    return descriptor


def build_table_from_definition(
    definition: TableDefinition,
    keyspace: str = AUTH_KEYSPACE_NAME,
) -> TableDescriptor:
    """Convenience wrapper accepting a TableDefinition."""
    return build_table(
        name=definition.name,
        description=definition.description,
        schema_text=definition.schema_text,
        keyspace=keyspace,
    )
