"""
CQL string builders for the auth keyspace.

All functions return fully-formed CQL strings rendered from the structured
models; text is only produced here, at the boundary with the migration engine.

Design guarantees
- Deterministic, side-effect free string generation.
- Proper identifier quoting and CQL literal escaping.
- `render_create_table` output re-parses to an equal structure.
"""

from __future__ import annotations

from collections.abc import Mapping

from src.auth_schema.identifiers import quote_identifier, quote_qualified_table_name
from src.auth_schema.models import (
    KeyspaceDefinition,
    PrimaryKey,
    TableDescriptor,
    TableParams,
    TableStructure,
)


def escape_cql_literal(value: str) -> str:
    """
    Escape a Python string for use as a single-quoted CQL literal.
    Doubles single quotes. Empty/None → empty string.
    """
    return (value or "").replace("'", "''")


def format_cql_map(options: Mapping[str, str]) -> str:
    """
    Format a CQL map literal: `{'k': 'v', 'k2': 'v2'}`.
    `class` is emitted first, remaining keys are sorted for deterministic output.
    """
    ordered = sorted(options.items(), key=lambda item: (item[0] != "class", item[0]))
    body = ", ".join(
        f"'{escape_cql_literal(k)}': '{escape_cql_literal(v)}'" for k, v in ordered
    )
    return "{" + body + "}"


def render_primary_key(primary_key: PrimaryKey) -> str:
    """PRIMARY KEY(...) clause; composite partition keys get their own parentheses."""
    partition = [quote_identifier(c) for c in primary_key.partition_key]
    head = partition[0] if len(partition) == 1 else f"({', '.join(partition)})"
    parts = [head, *(quote_identifier(c) for c in primary_key.clustering_columns)]
    return f"PRIMARY KEY({', '.join(parts)})"


def render_create_table(
    table: TableDescriptor | TableStructure,
    if_not_exists: bool = True,
) -> str:
    """CREATE TABLE [IF NOT EXISTS] keyspace.table (columns..., PRIMARY KEY(...))."""
    structure = table.structure if isinstance(table, TableDescriptor) else table
    guard = "IF NOT EXISTS " if if_not_exists else ""
    columns = [f"{quote_identifier(c.name)} {c.data_type.cql()}" for c in structure.columns]
    body = ", ".join([*columns, render_primary_key(structure.primary_key)])
    return (
        f"CREATE TABLE {guard}{quote_qualified_table_name(structure.qualified_name)} "
        f"({body})"
    )


def render_table_options(params: TableParams) -> str:
    """WITH comment = '...' AND gc_grace_seconds = ... AND ..."""
    options = [
        f"comment = '{escape_cql_literal(params.comment)}'",
        f"gc_grace_seconds = {params.gc_grace_seconds}",
        f"compression = {format_cql_map(params.compression)}",
        f"memtable_flush_period_in_ms = {params.memtable_flush_period_ms}",
    ]
    return "WITH " + "\n    AND ".join(options)


def render_table(descriptor: TableDescriptor, if_not_exists: bool = True) -> str:
    """Full table statement including options, terminated by ';'."""
    return (
        f"{render_create_table(descriptor, if_not_exists)}\n"
        f"    {render_table_options(descriptor.params)};"
    )


def render_create_keyspace(keyspace: KeyspaceDefinition, if_not_exists: bool = True) -> str:
    """CREATE KEYSPACE [IF NOT EXISTS] name WITH replication = {...} AND durable_writes = ..."""
    guard = "IF NOT EXISTS " if if_not_exists else ""
    durable = "true" if keyspace.durable_writes else "false"
    return (
        f"CREATE KEYSPACE {guard}{quote_identifier(keyspace.name)} "
        f"WITH replication = {format_cql_map(keyspace.replication.as_options())} "
        f"AND durable_writes = {durable};"
    )


def render_keyspace(keyspace: KeyspaceDefinition) -> str:
    """Keyspace statement followed by every table statement, blank-line separated."""
    statements = [render_create_keyspace(keyspace)]
    statements.extend(render_table(table) for table in keyspace.tables)
    return "\n\n".join(statements)
