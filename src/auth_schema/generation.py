"""
Schema generation of the auth keyspace.

The generation is a logical timestamp for automatic table creation on node
startup. If you change the shape of any table in `src.auth_schema.tables`,
increment CURRENT_GENERATION and add a line to GENERATION_HISTORY describing
the change.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from src.logger import LOGGER

CURRENT_GENERATION: Final[int] = 1

GENERATION_HISTORY: Final[Mapping[int, str]] = MappingProxyType(
    {
        0: "original definition",
        1: "compression chunk length reduced to 16KiB, memtable flush period unset on all tables",
    }
)


def requires_reconciliation(
    stored_generation: int | None,
    current_generation: int = CURRENT_GENERATION,
) -> bool:
    """
    Decide whether the stored auth table definitions must be (re)applied.

    None means nothing has been stored yet. A stored generation newer than ours
    means this node runs older code than the one that wrote the schema; it must
    not downgrade the definitions.
    """
    if stored_generation is None:
        return True
    if stored_generation < 0:
        raise ValueError(f"Stored generation must be non-negative, got {stored_generation}.")
    if stored_generation > current_generation:
        LOGGER.warning(
            "Stored auth schema generation %d is newer than this node's generation %d; "
            "leaving definitions untouched.",
            stored_generation,
            current_generation,
        )
        return False
    return stored_generation < current_generation
