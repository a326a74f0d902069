"""Shared constant values for the authorization keyspace."""

from datetime import timedelta
from typing import Final

AUTH_KEYSPACE_NAME: Final[str] = "system_auth"

# Tombstones in auth tables must outlive repair cycles, or revoked grants resurface.
GC_GRACE_PERIOD: Final[timedelta] = timedelta(days=90)
GC_GRACE_SECONDS: Final[int] = int(GC_GRACE_PERIOD.total_seconds())

COMPRESSION_CHUNK_LENGTH_KB: Final[int] = 16
MEMTABLE_FLUSH_PERIOD_MS: Final[int] = 0

MAX_TABLE_NAME_LENGTH: Final[int] = 48
