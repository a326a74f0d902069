"""
Declared auth tables.

Each schema text is a template with one ``%s`` placeholder for the table name.
The texts are kept byte-for-byte as the storage engine has always received
them; any change to their shape requires bumping CURRENT_GENERATION in
`src.auth_schema.generation`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

ROLES: Final[str] = "roles"
ROLE_MEMBERS: Final[str] = "role_members"
ROLE_PERMISSIONS: Final[str] = "role_permissions"
# Misspelled on disk since it was introduced; renaming would change the table id.
RESOURCE_ROLE_INDEX: Final[str] = "resource_role_permissons_index"
NETWORK_PERMISSIONS: Final[str] = "network_permissions"
CIDR_PERMISSIONS: Final[str] = "cidr_permissions"
CIDR_GROUPS: Final[str] = "cidr_groups"
IDENTITY_TO_ROLES: Final[str] = "identity_to_role"


@dataclass(frozen=True)
class TableDefinition:
    """Source declaration of one auth table, before it is built."""

    name: str
    description: str
    schema_text: str


ROLES_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "role text,"
    "is_superuser boolean,"
    "can_login boolean,"
    "salted_hash text,"
    "member_of set<text>,"
    "password_set_date date,"
    "PRIMARY KEY(role))"
)

# identity is an opaque string produced by role authenticators (e.g. certificate based)
IDENTITY_TO_ROLES_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "identity text,"
    "role text,"
    "PRIMARY KEY(identity))"
)

ROLE_MEMBERS_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "role text,"
    "member text,"
    "PRIMARY KEY(role, member))"
)

ROLE_PERMISSIONS_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "role text,"
    "resource text,"
    "permissions set<text>,"
    "PRIMARY KEY(role, resource))"
)

RESOURCE_ROLE_INDEX_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "resource text,"
    "role text,"
    "PRIMARY KEY(resource, role))"
)

NETWORK_PERMISSIONS_CQL: Final[str] = (
    "CREATE TABLE IF NOT EXISTS %s ("
    "role text, "
    "dcs frozen<set<text>>, "
    "PRIMARY KEY(role))"
)

CIDR_PERMISSIONS_CQL: Final[str] = (
    "CREATE TABLE %s ("
    "role text, "
    "cidr_groups frozen<set<text>>, "
    "PRIMARY KEY(role))"
)

CIDR_GROUPS_CQL: Final[str] = (
    "CREATE TABLE %s ("
    "cidr_group text, "
    "cidrs frozen<set<tuple<inet, smallint>>>, "
    "PRIMARY KEY(cidr_group))"
)


# Declaration order is the order tables appear in the assembled keyspace.
TABLE_DEFINITIONS: Final[tuple[TableDefinition, ...]] = (
    TableDefinition(ROLES, "role definitions", ROLES_CQL),
    TableDefinition(ROLE_MEMBERS, "role memberships lookup table", ROLE_MEMBERS_CQL),
    TableDefinition(ROLE_PERMISSIONS, "permissions granted to db roles", ROLE_PERMISSIONS_CQL),
    TableDefinition(
        RESOURCE_ROLE_INDEX,
        "index of db roles with permissions granted on a resource",
        RESOURCE_ROLE_INDEX_CQL,
    ),
    TableDefinition(NETWORK_PERMISSIONS, "user network permissions", NETWORK_PERMISSIONS_CQL),
    TableDefinition(CIDR_PERMISSIONS, "user cidr permissions", CIDR_PERMISSIONS_CQL),
    TableDefinition(CIDR_GROUPS, "cidr groups to cidrs mapping", CIDR_GROUPS_CQL),
    TableDefinition(
        IDENTITY_TO_ROLES, "mtls authorized identities lookup table", IDENTITY_TO_ROLES_CQL
    ),
)

TABLE_NAMES: Final[frozenset[str]] = frozenset(
    {
        ROLES,
        ROLE_MEMBERS,
        ROLE_PERMISSIONS,
        RESOURCE_ROLE_INDEX,
        NETWORK_PERMISSIONS,
        CIDR_PERMISSIONS,
        CIDR_GROUPS,
        IDENTITY_TO_ROLES,
    }
)


def definition_for(name: str) -> TableDefinition:
    """Return the declaration of table `name`; KeyError if it is not an auth table."""
    for definition in TABLE_DEFINITIONS:
        if definition.name == name:
            return definition
    raise KeyError(name)
