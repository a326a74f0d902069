"""
Validator core: run table rules per table, then keyspace rules once.

Responsibilities
----------------
- Keep rules decoupled via simple Protocols (each rule receives only what it needs).
- Perform no I/O. Caller supplies the assembled keyspace and the replication floor.
- Produce a ValidationReport (immutable) with a convenience .ok flag.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from src.auth_schema.models import KeyspaceDefinition, TableDescriptor
from src.auth_schema.validation.diagnostics import Diagnostic, ValidationReport
from src.auth_schema.validation.rules import default_rule_set


class TableRule(Protocol):
    """
    A rule over one built table.

    Contract
    --------
    - Receives a single TableDescriptor.
    - Returns zero or more diagnostics; must not raise for normal invalid input.
    """

    code: str
    description: str

    def check(self, table: TableDescriptor) -> list[Diagnostic]: ...


class KeyspaceRule(Protocol):
    """A rule over the whole keyspace definition and the replication floor."""

    code: str
    description: str

    def check(self, keyspace: KeyspaceDefinition, replication_floor: int) -> list[Diagnostic]: ...


class KeyspaceValidator:
    """Applies table rules to every table in declared order, then keyspace rules."""

    def __init__(
        self,
        table_rules: Iterable[TableRule] = (),
        keyspace_rules: Iterable[KeyspaceRule] = (),
    ) -> None:
        self._table_rules = tuple(table_rules)
        self._keyspace_rules = tuple(keyspace_rules)

    @classmethod
    def with_default_rules(cls) -> KeyspaceValidator:
        table_rules, keyspace_rules = default_rule_set()
        return cls(table_rules=table_rules, keyspace_rules=keyspace_rules)

    def validate(self, keyspace: KeyspaceDefinition, replication_floor: int) -> ValidationReport:
        """Run all configured rules and return a ValidationReport."""
        diagnostics: list[Diagnostic] = []

        for table in keyspace.tables:
            for rule in self._table_rules:
                diagnostics.extend(rule.check(table))

        for rule in self._keyspace_rules:
            diagnostics.extend(rule.check(keyspace, replication_floor))

        return ValidationReport(diagnostics=tuple(diagnostics))
