"""Keyspace assembler: every declared auth table plus a replication policy."""

from __future__ import annotations

from collections.abc import Iterable

from src.auth_schema.builder import build_table_from_definition
from src.auth_schema.models import KeyspaceDefinition, ReplicationParams
from src.auth_schema.tables import TABLE_DEFINITIONS, TableDefinition
from src.constants import AUTH_KEYSPACE_NAME
from src.logger import LOGGER


def resolve_replication_factor(replication_floor: int, configured_default_rf: int | None) -> int:
    """
    Return max(floor, configured); None means the configured value is unavailable.

    Raises:
        ValueError: if the floor is below 1 or the configured value is negative.
    """
    if replication_floor < 1:
        raise ValueError(f"Replication floor must be at least 1, got {replication_floor}.")
    if configured_default_rf is None:
        LOGGER.info(
            "No default keyspace replication factor configured; using floor %d.",
            replication_floor,
        )
        return replication_floor
    if configured_default_rf < 0:
        raise ValueError(
            f"Configured replication factor must be non-negative, got {configured_default_rf}."
        )
    return max(replication_floor, configured_default_rf)


def assemble(
    replication_floor: int,
    configured_default_rf: int | None,
    keyspace: str = AUTH_KEYSPACE_NAME,
    definitions: Iterable[TableDefinition] = TABLE_DEFINITIONS,
) -> KeyspaceDefinition:
    """
    Build every declared table and wrap them in a KeyspaceDefinition.

    The result depends only on the arguments. Table build errors propagate.
    """
    replication_factor = resolve_replication_factor(replication_floor, configured_default_rf)
    tables = tuple(build_table_from_definition(d, keyspace) for d in definitions)
    return KeyspaceDefinition(
        name=keyspace,
        replication=ReplicationParams(replication_factor=replication_factor),
        tables=tables,
    )
