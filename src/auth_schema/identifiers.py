"""
Identifier utilities for the auth schema.

This module defines:
- Canonical table-name dataclass: QualifiedTableName.
- Helpers to validate, quote and format keyspace-qualified names.
- The deterministic table id builder used for every system table.

Conventions:
- Verbs: validate_*, quote_*, format_*, build_*.
- Identifiers are unquoted CQL names: [A-Za-z_][A-Za-z0-9_]*.
- Table ids are derived from names only, never from column layout.
"""

from __future__ import annotations

import hashlib
import re
import uuid
from dataclasses import dataclass

from src.constants import MAX_TABLE_NAME_LENGTH

_UNQUOTED_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


# -----------------------------
# Core name data structure
# -----------------------------


@dataclass(frozen=True)
class QualifiedTableName:
    """Two-part table name: keyspace.table."""

    keyspace: str
    table: str


# -----------------------------
# Validation
# -----------------------------


def is_valid_identifier(identifier: str) -> bool:
    """True when `identifier` can be used unquoted as a keyspace/table/column name."""
    return bool(identifier) and _UNQUOTED_IDENTIFIER.fullmatch(identifier) is not None


def validate_table_name(table_name: str) -> str:
    """
    Return `table_name` unchanged if it is a legal table name.

    Raises:
        ValueError: if empty, not a lowercase unquoted identifier, or longer
            than MAX_TABLE_NAME_LENGTH.
    """
    if not table_name:
        raise ValueError("Table name must not be empty.")
    if not is_valid_identifier(table_name):
        raise ValueError(f"Table name {table_name!r} is not a valid identifier.")
    if table_name != table_name.lower():
        raise ValueError(f"Table name {table_name!r} must be lowercase.")
    if len(table_name) > MAX_TABLE_NAME_LENGTH:
        raise ValueError(
            f"Table name {table_name!r} exceeds {MAX_TABLE_NAME_LENGTH} characters."
        )
    return table_name


# -----------------------------
# String helpers
# -----------------------------


def quote_identifier(identifier: str) -> str:
    """Double-quote a CQL identifier unless it is a plain lowercase name."""
    if is_valid_identifier(identifier) and identifier == identifier.lower():
        return identifier
    return '"' + identifier.replace('"', '""') + '"'


def format_qualified_table_name(name: QualifiedTableName) -> str:
    """Unquoted: 'keyspace.table'."""
    return f"{name.keyspace}.{name.table}"


def quote_qualified_table_name(name: QualifiedTableName) -> str:
    """Quoted where needed: 'keyspace.table' or '"KeySpace"."Table"'."""
    return f"{quote_identifier(name.keyspace)}.{quote_identifier(name.table)}"


# -----------------------------
# Table id builder
# -----------------------------


def build_table_id(keyspace: str, table: str) -> uuid.UUID:
    """
    Build the deterministic id of a system table.

    The id is a name-based (version 3) UUID over the MD5 digest of the keyspace
    bytes immediately followed by the table bytes. No namespace UUID is mixed in,
    so ``system_auth.roles`` always maps to the same id on every node.
    """
    digest = hashlib.md5(
        keyspace.encode("utf-8") + table.encode("utf-8"), usedforsecurity=False
    ).digest()
    return uuid.UUID(bytes=digest, version=3)
