from collections.abc import Callable
from pathlib import Path

import pytest

from src.auth_schema.builder import build_table_from_definition
from src.auth_schema.keyspace import assemble
from src.auth_schema.models import KeyspaceDefinition, TableDescriptor
from src.auth_schema.tables import CIDR_GROUPS, ROLES, definition_for


@pytest.fixture(scope="session")
def auth_keyspace() -> KeyspaceDefinition:
    """The auth keyspace assembled with floor 1 and configured RF 1."""
    return assemble(replication_floor=1, configured_default_rf=1)


@pytest.fixture
def roles_table() -> TableDescriptor:
    return build_table_from_definition(definition_for(ROLES))


@pytest.fixture
def cidr_groups_table() -> TableDescriptor:
    return build_table_from_definition(definition_for(CIDR_GROUPS))


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write a YAML node config into tmp_path and return its path."""

    def _write(body: str) -> Path:
        path = tmp_path / "node.yaml"
        path.write_text(body)
        return path

    return _write
