"""
Auth schema registry: the value handed to the migration engine at startup.

Call `initialize_auth_schema` once on the bootstrap path and pass the returned
SchemaRegistry to whatever needs it. There is no module-level instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from src.auth_schema.config import BootstrapConfig, load_bootstrap_config
from src.auth_schema.exceptions import SchemaDefinitionError
from src.auth_schema.generation import CURRENT_GENERATION
from src.auth_schema.keyspace import assemble
from src.auth_schema.models import KeyspaceDefinition
from src.auth_schema.validation.diagnostics import ValidationReport
from src.auth_schema.validation.validator import KeyspaceValidator
from src.logger import LOGGER


@dataclass(frozen=True)
class SchemaRegistry:
    """Immutable startup state of the auth keyspace."""

    generation: int
    keyspace: KeyspaceDefinition
    replication_floor: int
    superuser_setup_delay: timedelta

    @property
    def table_names(self) -> frozenset[str]:
        return self.keyspace.table_names

    def assembled_namespace(self) -> KeyspaceDefinition:
        """The keyspace definition the migration engine reconciles against."""
        return self.keyspace

    def as_migration_input(self) -> tuple[int, KeyspaceDefinition]:
        """(generation, keyspace) pair consumed by the migration engine."""
        return self.generation, self.keyspace


def _report_or_raise(report: ValidationReport) -> None:
    for diagnostic in report.diagnostics:
        LOGGER.log(diagnostic.level.log_level, "%s", diagnostic)
    if not report.ok:
        summary = "; ".join(str(d) for d in report.errors)
        raise SchemaDefinitionError(f"Auth keyspace failed validation: {summary}")


def initialize_auth_schema(
    config: BootstrapConfig | None = None,
    validator: KeyspaceValidator | None = None,
) -> SchemaRegistry:
    """
    Build, validate and return the auth schema registry.

    Raises:
        SchemaDefinitionError: if any table fails to build or the assembled
            keyspace breaks an invariant. Startup must not continue.
    """
    bootstrap = config if config is not None else load_bootstrap_config()
    keyspace = assemble(bootstrap.replication_floor, bootstrap.default_keyspace_rf)

    checker = validator or KeyspaceValidator.with_default_rules()
    _report_or_raise(checker.validate(keyspace, bootstrap.replication_floor))

    registry = SchemaRegistry(
        generation=CURRENT_GENERATION,
        keyspace=keyspace,
        replication_floor=bootstrap.replication_floor,
        superuser_setup_delay=bootstrap.superuser_setup_delay,
    )
    LOGGER.info(
        "Auth keyspace %s ready: generation %d, %d tables, replication factor %d.",
        keyspace.name,
        registry.generation,
        len(keyspace.tables),
        keyspace.replication_factor,
    )
    return registry
