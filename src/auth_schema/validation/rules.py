"""
Concrete validation rules for the assembled auth keyspace.

- Centralised RuleCode (StrEnum)
- Table rules inspect one TableDescriptor; keyspace rules inspect the whole definition
- A 'default_rule_set()' factory that returns (table_rules, keyspace_rules)
"""

from __future__ import annotations

from collections.abc import Set
from datetime import timedelta
from enum import StrEnum

from src.auth_schema.identifiers import build_table_id
from src.auth_schema.models import KeyspaceDefinition, TableDescriptor
from src.auth_schema.tables import TABLE_NAMES
from src.auth_schema.validation.diagnostics import Diagnostic, DiagnosticLevel
from src.constants import GC_GRACE_PERIOD


class RuleCode(StrEnum):
    """Identifiers for every rule; used as Diagnostic.code."""

    TABLE_SET_MATCHES_DECLARED = "TABLE_SET_MATCHES_DECLARED"
    TABLE_IDENTITY_MATCHES_NAME = "TABLE_IDENTITY_MATCHES_NAME"
    RETENTION_WINDOW = "RETENTION_WINDOW"
    REPLICATION_FLOOR_RESPECTED = "REPLICATION_FLOOR_RESPECTED"
    IDEMPOTENT_CREATION = "IDEMPOTENT_CREATION"


# ---------- TABLE RULES ----------


class TableIdentityMatchesName:
    """A table's id must be the one derived from (keyspace, name)."""

    code = RuleCode.TABLE_IDENTITY_MATCHES_NAME.value
    description = "Table id must be derived from keyspace and table name."

    def check(self, table: TableDescriptor) -> list[Diagnostic]:
        expected = build_table_id(table.keyspace, table.name)
        if table.id == expected:
            return []
        return [
            Diagnostic(
                table_key=table.full_name,
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=f"Table id {table.id} does not match derived id {expected}",
                hint="Build descriptors with build_table instead of constructing them by hand.",
            )
        ]


class RetentionWindow:
    """Every auth table keeps tombstones for the full gc grace period."""

    code = RuleCode.RETENTION_WINDOW.value
    description = "Auth tables must retain tombstones for the full gc grace period."

    def __init__(self, expected: timedelta = GC_GRACE_PERIOD) -> None:
        self.expected = expected

    def check(self, table: TableDescriptor) -> list[Diagnostic]:
        if table.retention == self.expected:
            return []
        return [
            Diagnostic(
                table_key=table.full_name,
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=(
                    f"Retention is {table.retention.days} days, "
                    f"expected {self.expected.days} days"
                ),
            )
        ]


class IdempotentCreation:
    """Schema texts declared without IF NOT EXISTS are reported for unification."""

    code = RuleCode.IDEMPOTENT_CREATION.value
    description = "Schema texts should use CREATE TABLE IF NOT EXISTS consistently."

    def check(self, table: TableDescriptor) -> list[Diagnostic]:
        if table.structure.if_not_exists:
            return []
        return [
            Diagnostic(
                table_key=table.full_name,
                level=DiagnosticLevel.INFO,
                code=self.code,
                message="Schema text is declared without IF NOT EXISTS",
                hint="Rendered statements always use IF NOT EXISTS.",
            )
        ]


# ---------- KEYSPACE RULES ----------


class TableSetMatchesDeclared:
    """The keyspace must contain exactly the declared tables."""

    code = RuleCode.TABLE_SET_MATCHES_DECLARED.value
    description = "Assembled tables must equal the declared table names."

    def __init__(self, expected: Set[str] = TABLE_NAMES) -> None:
        self.expected = frozenset(expected)

    def check(self, keyspace: KeyspaceDefinition, replication_floor: int) -> list[Diagnostic]:
        actual = keyspace.table_names
        missing = sorted(self.expected - actual)
        unexpected = sorted(actual - self.expected)
        findings: list[Diagnostic] = []
        if missing:
            findings.append(
                Diagnostic(
                    table_key="",
                    level=DiagnosticLevel.ERROR,
                    code=self.code,
                    message=f"Keyspace {keyspace.name} is missing tables: {missing}",
                )
            )
        if unexpected:
            findings.append(
                Diagnostic(
                    table_key="",
                    level=DiagnosticLevel.ERROR,
                    code=self.code,
                    message=f"Keyspace {keyspace.name} has undeclared tables: {unexpected}",
                    hint="Add the table to TABLE_NAMES and bump the schema generation.",
                )
            )
        return findings


class ReplicationFloorRespected:
    """Replication of the auth keyspace never drops below the floor."""

    code = RuleCode.REPLICATION_FLOOR_RESPECTED.value
    description = "Replication factor must be at least the replication floor."

    def check(self, keyspace: KeyspaceDefinition, replication_floor: int) -> list[Diagnostic]:
        if keyspace.replication_factor >= replication_floor:
            return []
        return [
            Diagnostic(
                table_key="",
                level=DiagnosticLevel.ERROR,
                code=self.code,
                message=(
                    f"Replication factor {keyspace.replication_factor} is below "
                    f"the floor {replication_floor}"
                ),
            )
        ]


def default_rule_set() -> tuple[
    tuple[TableIdentityMatchesName | RetentionWindow | IdempotentCreation, ...],
    tuple[TableSetMatchesDeclared | ReplicationFloorRespected, ...],
]:
    """Return (table_rules, keyspace_rules) used at startup."""
    table_rules = (TableIdentityMatchesName(), RetentionWindow(), IdempotentCreation())
    keyspace_rules = (TableSetMatchesDeclared(), ReplicationFloorRespected())
    return table_rules, keyspace_rules
