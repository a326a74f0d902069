import uuid
from dataclasses import replace

from src.auth_schema.models import KeyspaceDefinition, ReplicationParams, TableParams
from src.auth_schema.validation.diagnostics import DiagnosticLevel
from src.auth_schema.validation.rules import (
    IdempotentCreation,
    ReplicationFloorRespected,
    RetentionWindow,
    RuleCode,
    TableIdentityMatchesName,
    TableSetMatchesDeclared,
    default_rule_set,
)


# ---- table rules ----

def test_identity_rule_accepts_built_table(roles_table):
    assert TableIdentityMatchesName().check(roles_table) == []


def test_identity_rule_flags_foreign_id(roles_table):
    tampered = replace(roles_table, id=uuid.uuid4())
    [finding] = TableIdentityMatchesName().check(tampered)
    assert finding.level is DiagnosticLevel.ERROR
    assert finding.code == RuleCode.TABLE_IDENTITY_MATCHES_NAME
    assert finding.table_key == "system_auth.roles"


def test_retention_rule(roles_table):
    assert RetentionWindow().check(roles_table) == []
    shortened = replace(roles_table, params=TableParams(gc_grace_seconds=864_000))
    [finding] = RetentionWindow().check(shortened)
    assert "Retention is 10 days, expected 90 days" == finding.message


def test_idempotent_creation_reports_info_only(roles_table, cidr_groups_table):
    assert IdempotentCreation().check(roles_table) == []
    [finding] = IdempotentCreation().check(cidr_groups_table)
    assert finding.level is DiagnosticLevel.INFO


# ---- keyspace rules ----

def test_table_set_rule_accepts_assembled_keyspace(auth_keyspace):
    assert TableSetMatchesDeclared().check(auth_keyspace, 1) == []


def test_table_set_rule_reports_missing_tables(auth_keyspace):
    partial = replace(auth_keyspace, tables=auth_keyspace.tables[:-1])
    [finding] = TableSetMatchesDeclared().check(partial, 1)
    assert "missing tables: ['identity_to_role']" in finding.message


def test_table_set_rule_reports_undeclared_tables(auth_keyspace):
    rule = TableSetMatchesDeclared(expected=auth_keyspace.table_names - {"roles", "cidr_groups"})
    [finding] = rule.check(auth_keyspace, 1)
    assert "undeclared tables: ['cidr_groups', 'roles']" in finding.message


def test_replication_floor_rule(auth_keyspace):
    rule = ReplicationFloorRespected()
    assert rule.check(auth_keyspace, 1) == []
    [finding] = rule.check(auth_keyspace, 3)
    assert finding.message == "Replication factor 1 is below the floor 3"


def test_replication_floor_rule_with_explicit_keyspace(roles_table):
    keyspace = KeyspaceDefinition("system_auth", ReplicationParams(5), (roles_table,))
    assert ReplicationFloorRespected().check(keyspace, 5) == []


def test_default_rule_set_shape():
    table_rules, keyspace_rules = default_rule_set()
    assert {r.code for r in table_rules} == {
        RuleCode.TABLE_IDENTITY_MATCHES_NAME,
        RuleCode.RETENTION_WINDOW,
        RuleCode.IDEMPOTENT_CREATION,
    }
    assert {r.code for r in keyspace_rules} == {
        RuleCode.TABLE_SET_MATCHES_DECLARED,
        RuleCode.REPLICATION_FLOOR_RESPECTED,
    }
